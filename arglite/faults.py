"""
Arglite faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every reportable issue.
- LiteralSyntaxError: raised by the strict literal grammar (parse_literal and
  LiteralParser). The permissive coercer catches it and falls through to plain
  string handling, so it never escapes parse_value().
- AliasConflictWarning: issued when two option descriptors claim the same
  spelling; the later descriptor wins.
- warn(): central entry point to issue a warning with its context options.

UX goals
- Offset-first messages: literal errors point at the exact offending character.
- Short titles, one-sentence bodies, a single clear hint.
- Styling configurable via __styles__ in __main__, codes relabelled via
  __codes__ in __main__.

Integration
- Library code raises or warns; only the console entry point renders faults
  (any object here can be handed to console.print thanks to __rich__).
"""
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping (by high-level domain)
    - literal grammar errors (211xx)
      • UNEXPECTED_CHARACTER, UNEXPECTED_END, UNTERMINATED_STRING,
        INVALID_ESCAPE, INVALID_NUMBER, TRAILING_CHARACTERS,
        NESTING_TOO_DEEP
    - option resolution warnings (221xx)
      • ALIAS_CONFLICT

    normalize() lets a host remap codes to its own labels while keeping the
    numeric values stable.
    """
    # --- literal grammar errors (21xxx) ---
    UNEXPECTED_CHARACTER        = 21101
    UNEXPECTED_END              = 21102
    UNTERMINATED_STRING         = 21103
    INVALID_ESCAPE              = 21104
    INVALID_NUMBER              = 21105
    TRAILING_CHARACTERS         = 21106
    NESTING_TOO_DEEP            = 21107

    # --- option resolution warnings (22xxx) ---
    ALIAS_CONFLICT              = 22101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _styles(defaults):
    return defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))


class LiteralSyntaxError(ValueError):
    """
    malformed array/object literal.

    options
    - code: FaultCode of the failure.
    - text: the complete literal being parsed.
    - offset: index in text where parsing stopped.
    - title: short human title (defaults to the code name).
    - hint: one actionable sentence.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    @property
    def text(self):
        return self.options.get("text", "")

    @property
    def offset(self):
        return self.options.get("offset", 0)

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        styles = _styles({
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "error-source": "#E6E6F0",
            "error-caret": "bold #FF4DA6",
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })

        code = self.code
        title = self.options.get("title") or (code.name.replace("_", " ").lower() if code else "syntax error")
        header = Text.assemble(
            "[ ",
            (getattr(__import__("__main__"), "__prog__", "arglite"), styles["prog-name"]),
            " — ",
            (code.normalize() if code else "?", styles["code"]),
            " | ",
            (title.title(), styles["error-title"]),
            " ]"
        )
        parts = [header, Text(str(self.message), styles["error-message"])]

        # only single-line sources get a caret line
        if self.text and "\n" not in self.text:
            parts.append(Text("  " + self.text, styles["error-source"]))
            parts.append(Text("  " + " " * self.offset + "^", styles["error-caret"]))

        if hint := self.options.get("hint"):
            parts.append(Text.assemble((" → ", styles["hint-arrow"]), (hint, styles["hint"])))

        return Group(*parts)


class AliasConflictWarning(UserWarning):
    """
    an alias spelling was registered twice for different option names.

    options
    - spelling: the conflicting spelling (prefix included).
    - previous: the option name that owned it before.
    - current: the option name that owns it now.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        styles = _styles({
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",  # softer pinky title for warnings

            # body
            "warning-message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        })

        header = Text.assemble(
            "[ ",
            (getattr(__import__("__main__"), "__prog__", "arglite"), styles["prog-name"]),
            " — ",
            (FaultCode.ALIAS_CONFLICT.normalize(), styles["code"]),
            " | ",
            ("Alias Conflict", styles["warning-title"]),
            " ]"
        )
        parts = [header, Text(str(self.message), styles["warning-message"])]
        if hint := self.options.get("hint"):
            parts.append(Text.assemble((" → ", styles["hint-arrow"]), (hint, styles["hint"])))
        return Group(*parts)


def warn(warning, /, *, stacklevel=2):
    """
    issue a warning instance through the warnings machinery.

    contract
    - warning must be an instance of a Warning subclass (e.g. AliasConflictWarning).
    - stacklevel is relative to the caller of warn().
    """
    if not isinstance(warning, Warning):
        raise TypeError("warn() argument must be a warning instance")
    warnings.warn(warning, stacklevel=stacklevel + 1)


__all__ = (
    "FaultCode",
    "LiteralSyntaxError",
    "AliasConflictWarning",
    "console",
    "warn",
)
