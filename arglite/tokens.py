r"""
Arglite tokenizer and argument stream reducer.

Overview
- tokenize(arg, prefixes=("-",)) -> Token
  Split one raw argument into (prefix, key, value, arg):
    '--key=value' → Token(prefix='--', key='key', value='value', arg='--key=value')
    '--key'       → Token(prefix='--', key='key', value=Unset,   arg='--key')
    '--key='      → Token(prefix='--', key='key', value='',      arg='--key=')
    'key'         → Token(prefix='',   key='key', value=Unset,   arg='key')

- reduce_arguments(args, callback, prefixes=("-",)) -> dict
  Tokenize every argument in order, hand it to a callback and fold the
  returned entries into an insertion-ordered dict (last write wins).

Token shape
- prefix: the first character when it is an admissible prefix, followed by
  every immediate repetition of that same character ('--', '__', '$$').
  Mixed runs are not merged: with prefixes '\' and '$', '\$key' has prefix '\'
  and key '$key'. An empty set of prefixes disables prefix recognition.
- key: everything up to the first '='. Backslashes do not escape it:
  '$\=value' has key '\' and value 'value'.
- value: everything after that '='; Unset when there is no '='.

Invariant
    token.prefix + token.key + ("=" + token.value if token.value is not Unset else "") == token.arg
"""
import functools
import re
from collections.abc import Iterable, Mapping
from typing import NamedTuple

from .utils import REGEX_CHARS, Unset, escape


class Token(NamedTuple):
    """
    one tokenized argument.

    - prefix: leading run of one repeated prefix character (may be '').
    - key: text between the prefix and the first '=' (may be '').
    - value: text after that '=' ('' when nothing follows), Unset without '='.
    - arg: the original argument, verbatim.
    """
    prefix: str
    key: str
    value: object
    arg: str


class Entry(NamedTuple):
    """
    a (key, value) pair returned by a reduce_arguments() callback.
    """
    key: str
    value: object


@functools.cache
def _compile(prefixes):
    """
    build (and cache) the token pattern for a joined prefix string.
    """
    if chars := escape(prefixes, REGEX_CHARS, False):
        prefix = r"(?P<prefix>(?P<char>[%s])(?P=char)*)?" % chars
    else:
        prefix = r"(?P<prefix>)"
    return re.compile(prefix + r"(?P<key>[^=]*)(?P<sign>=)?(?P<value>.*)", re.DOTALL)


def _join(prefixes, name):
    if isinstance(prefixes, str):
        return prefixes
    if not isinstance(prefixes, Iterable):
        raise TypeError("%s() prefixes must be an iterable of strings" % name)
    prefixes = tuple(prefixes)
    if not all(isinstance(prefix, str) for prefix in prefixes):
        raise TypeError("%s() prefixes must be an iterable of strings" % name)
    # order-preserving deduplication keeps the character class small
    return "".join(dict.fromkeys("".join(prefixes)))


def tokenize(arg, prefixes=("-",), /):
    """
    Split a raw argument into prefix, key and value.

    Parameters
    - arg: str
      The raw argument, e.g. '--key=value'. Multi-line text is accepted.
    - prefixes: Iterable[str] | str (default: ("-",))
      Characters admissible as a prefix. Empty strings contribute nothing;
      no characters at all means every argument has an empty prefix.

    Returns
    - Token(prefix, key, value, arg)

    Notes
    - Never fails for a string argument: an argument without a prefix, a key
      or a value yields '' (or Unset for the value) in that field.
    """
    if not isinstance(arg, str):
        raise TypeError("tokenize() first argument must be a string")
    match = _compile(_join(prefixes, "tokenize")).fullmatch(arg)
    value = match["value"] if match["sign"] else Unset
    return Token(match["prefix"] or "", match["key"], value, arg)


def _passthrough(key, value, prefix, arg, /):
    """
    default reduce_arguments() callback: keep prefixed arguments that have a key.
    """
    if prefix and key:
        return Entry(key, value)
    return None


def _unpack(result):
    """
    read (key, value) out of a callback result, or None when it carries neither.
    """
    if result is None:
        return None
    if isinstance(result, Mapping):
        if "key" in result and "value" in result:
            return result["key"], result["value"]
        return None
    try:
        return result.key, result.value
    except AttributeError:
        return None


def reduce_arguments(args, callback=Unset, prefixes=("-",), /):
    """
    Tokenize a sequence of arguments and fold callback results into a dict.

    Parameters
    - args: Iterable[str]
      Raw arguments, processed strictly in order.
    - callback: Callable[[str, str | Unset, str, str], Entry | Mapping | None]
      Called as callback(key, value, prefix, arg) for every argument. A result
      carrying both a key and a value (an Entry, any object with .key/.value,
      or a mapping with "key" and "value") is written to the result; anything
      else drops the argument.
      Unset (the default) keeps arguments that have both a prefix and a key.
    - prefixes: Iterable[str] | str (default: ("-",))
      Forwarded to tokenize().

    Returns
    - dict: insertion-ordered mapping; a repeated key keeps its first position
      and its last value.
    """
    if isinstance(args, str) or not isinstance(args, Iterable):
        raise TypeError("reduce_arguments() first argument must be an iterable of strings")
    if callback is Unset:
        callback = _passthrough
    if not callable(callback):
        raise TypeError("reduce_arguments() second argument must be callable")

    joined = _join(prefixes, "reduce_arguments")
    result = {}
    for arg in args:
        token = tokenize(arg, joined)
        if (entry := _unpack(callback(token.key, token.value, token.prefix, arg))) is not None:
            key, value = entry
            result[key] = value
    return result


__all__ = (
    "Token",
    "Entry",
    "tokenize",
    "reduce_arguments",
)
