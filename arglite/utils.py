"""
Arglite utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the tokenizer, the coercer and the resolver.

Overview
- UnsetType / Unset
  • Singleton sentinel standing for an absent value ("undefined"): the value of
    a token without '=', the result of coercing "undefined", and the marker for
    "not provided" in parameter defaults.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- nullify(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values
    like None/0/""/[].

- escape(text, chars, safety)
  • Backslash-escape a set of characters in a string, optionally respecting
    escapes that are already present.
  • REGEX_CHARS lists the characters that must be escaped before a string can
    be placed inside a regular expression character class.

Stability and contract
- Names in __all__ are re-exported from the package; the rest may change.

Quick examples
    >>> nullify(Unset, "fallback")
    'fallback'
    >>> escape("a|b", ("|",))
    'a\\\\|b'
"""
import functools
import re
from collections.abc import Iterable
from typing import final


@final
class UnsetType:
    """
    Singleton sentinel representing a value that was not provided.

    None is a real value in this package (the coerced form of "null"), so an
    absent value needs its own marker. A single instance, Unset, is exposed.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset".
    - Non-subclassable: this type is sealed.
    - Singleton per process: UnsetType() always yields the same instance, also
      across copy/deepcopy/pickle.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in annotations (e.g., str | UnsetType).
        """
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        """
        Support reversed PEP 604 unions when UnsetType appears on the right.
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        """
        Ensure a single instance for this sentinel type.
        """
        return super().__new__(cls)

    def __reduce__(self):
        return "Unset"

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        """
        Disallow subclassing to preserve sentinel semantics.
        """
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def nullify(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Returns the given object unless it is Unset, in which case `default` is
    returned. Falsey values like None, 0, "" or [] are preserved as-is.

    Examples
    - nullify("name", "fallback") -> "name"
    - nullify(Unset, "fallback")  -> "fallback"
    - nullify(None, "fallback")   -> None
    """
    return default if object is Unset else object


REGEX_CHARS = ("^", "$", "|", ".", "*", "+", "?", "(", ")", "[", "]", "{", "}", "\\", "-", "&", "~")
"""
Characters with a meaning inside a regular expression or a character class.

Escaping them with escape(text, REGEX_CHARS, False) makes any text safe to be
placed between '[' and ']'.
"""


@functools.lru_cache(maxsize=1024)
def _escape(text, chars, safety):
    """
    cached worker for escape(); chars is a tuple so the triple is hashable.
    """
    if not text or not chars:
        return text

    pattern = re.compile("[%s]" % "".join(map(re.escape, chars)))

    def replace(match):
        char = match.group()
        if not safety:
            return "\\" + char

        offset = match.start()
        # already escaped by the previous backslash
        if offset and text[offset - 1] == "\\":
            return char

        if char == "\\":
            following = text[offset + 1:offset + 2]
            # the backslash is the escape of a listed character
            if following and following != "\\" and following in chars:
                return char
            # count the run of backslashes, plus the listed character closing it
            count = 1
            while text[offset + count:offset + count + 1] == "\\":
                count += 1
            closing = text[offset + count:offset + count + 1]
            if closing and closing in chars:
                count += 1
            if not count % 2:
                return char

        return "\\" + char

    return pattern.sub(replace, text)


def escape(text, chars=("\\",), safety=True, /):
    r"""
    Backslash-escape every listed character found in a string.

    Parameters
    - text: str
      The string to escape.
    - chars: Iterable[str] (default: a lone backslash)
      Single characters that must be escaped. Duplicates are harmless.
    - safety: bool (default: True)
      • True: leave alone characters that are already escaped by a preceding
        backslash, and backslashes that act as such an escape. Runs of
        backslashes are counted so that a fully escaped run stays untouched.
      • False: escape every occurrence, whatever precedes it.

    Returns
    - str: the escaped string. Empty text or an empty set of characters
      returns the text unchanged.

    Notes
    - Pure function, memoized on the exact (text, chars, safety) triple.
    - With safety on, escaping twice gives the same result as escaping once.

    Examples
    - escape("hello\\World")                   -> "hello\\\\World"
    - escape("hello\\|World", ("|",))          -> "hello\\|World"
    - escape("hello\\|World", ("|",), False)   -> "hello\\\\|World"
    """
    if not isinstance(text, str):
        raise TypeError("escape() first argument must be a string")
    if isinstance(chars, str):
        chars = tuple(chars)
    elif isinstance(chars, Iterable):
        chars = tuple(chars)
    else:
        raise TypeError("escape() second argument must be an iterable of characters")
    if not all(isinstance(char, str) and len(char) == 1 for char in chars):
        raise ValueError("escape() second argument must contain single characters only")
    return _escape(text, chars, bool(safety))


Unset = UnsetType()
"""
Sentinel for "undefined" / "not provided".

Notes
- Singleton: there is only one Unset instance.
- Distinct from None: None is the coerced form of "null".
- Falsey: bool(Unset) is False, but it is not equivalent to None or 0.
"""


__all__ = (
    # Functions
    "nullify",
    "escape",

    # Types
    "UnsetType",

    # Constants
    "Unset",
    "REGEX_CHARS",
)
