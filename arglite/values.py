r"""
Arglite value coercion.

Overview
- parse_value(value): convert a raw string (or an already typed value) into the
  most specific applicable type. Steps are tried in a fixed order and the first
  one that succeeds wins:
    1. undefined  "undefined" / Unset         → Unset
    2. null       "null" / None               → None
    3. boolean    "true" / "false" / bool     → bool
    4. number     "NaN", "±Infinity", decimal, 0x/0o/0b radix (signed) → int | float
    5. array      "[...]" / list / tuple      → list (tuple passed through)
    6. object     "{...}" / Mapping           → dict (Mapping passed through)
    7. string     one layer of matching quotes removed; anything else str()'d
  parse_value() never raises: a malformed array or object literal simply falls
  through to the string step.

- parse_undefined / parse_null / parse_boolean / parse_number / parse_array /
  parse_object / parse_string: the individual steps. Each returns a Coercion
  (succeeded, value) so callers can compose their own precedence.

- LiteralParser / parse_literal(text): strict recursive-descent grammar for the
  array/object literal forms (nested arrays and objects, quoted or bare keys,
  the scalar grammar above, quoted strings with escapes, trailing commas and
  comments). Errors raise LiteralSyntaxError.

Number typing
- Integral literals ("25", "0x2f0D", "-0b11") give int.
- Fractional or exponent literals ("0.5", "1e3") give float.
- A negative zero ("-0") gives -0.0 so the sign survives.

Quick examples
    >>> parse_value("0x2f0D")
    12045
    >>> parse_value('[null, true, 1, "a"]')
    [None, True, 1, 'a']
    >>> parse_value("{ name: 'alex', age: 22 }")
    {'name': 'alex', 'age': 22}
    >>> parse_value('"true"')
    'true'
"""
import math
import re
from collections.abc import Mapping
from typing import NamedTuple

from .faults import FaultCode, LiteralSyntaxError
from .utils import Unset


class Coercion(NamedTuple):
    """
    outcome of a single coercion step.

    - succeeded: whether the step recognized the value.
    - value: the converted value on success, the untouched input otherwise.
    """
    succeeded: bool
    value: object


_NUMBER = re.compile(r"""
    (?P<sign>[+-])?
    (?:
        (?P<special>Infinity|NaN)
      | 0[xX](?P<hex>[0-9a-fA-F]+)
      | 0[oO](?P<oct>[0-7]+)
      | 0[bB](?P<bin>[01]+)
      | (?P<decimal>(?:[0-9]+(?P<point>\.)?[0-9]*|(?P<fraction>\.)[0-9]+)(?P<exponent>[eE][+-]?[0-9]+)?)
    )
""", re.VERBOSE)

_QUOTED = re.compile(r"(['\"`])(.*)\1", re.DOTALL)

# whitespace and line terminators of the literal grammar
_WHITESPACE = "\t\n\v\f\r \u00a0\u1680\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a\u2028\u2029\u202f\u205f\u3000\ufeff"


def _number(match):
    """
    convert a _NUMBER match into int/float.
    """
    negative = match["sign"] == "-"
    if special := match["special"]:
        if special == "NaN":
            return math.nan
        return -math.inf if negative else math.inf

    if match["decimal"] is not None:
        if match["point"] or match["fraction"] or match["exponent"]:
            number = float(match["decimal"])
            return -number if negative else number
        number = int(match["decimal"])
    elif match["hex"] is not None:
        number = int(match["hex"], 16)
    elif match["oct"] is not None:
        number = int(match["oct"], 8)
    else:
        number = int(match["bin"], 2)

    if negative:
        # int has no negative zero
        return -number if number else -0.0
    return number


def parse_undefined(value, /):
    if value is Unset or value == "undefined":
        return Coercion(True, Unset)
    return Coercion(False, value)


def parse_null(value, /):
    if value is None or value == "null":
        return Coercion(True, None)
    return Coercion(False, value)


def parse_boolean(value, /):
    if isinstance(value, bool):
        return Coercion(True, value)
    if value == "true":
        return Coercion(True, True)
    if value == "false":
        return Coercion(True, False)
    return Coercion(False, value)


def parse_number(value, /):
    """
    numeric step.

    - int/float values (bool excluded) pass through.
    - "" and whitespace-only strings fail. Only the characters in _WHITESPACE
      are trimmed, so control characters such as U+001C are not whitespace.
    - "NaN", "Infinity", "+Infinity", "-Infinity" give the IEEE specials; a
      signed "NaN" is not a number.
    - otherwise the stripped string must be fully consumed by the grammar:
      optional sign, then a 0x/0o/0b radix integer or a decimal with optional
      fraction and exponent.
    """
    if isinstance(value, bool):
        return Coercion(False, value)
    if isinstance(value, (int, float)):
        return Coercion(True, value)
    if not isinstance(value, str) or not (text := value.strip(_WHITESPACE)):
        return Coercion(False, value)
    if text == "NaN":
        return Coercion(True, math.nan)

    match = _NUMBER.fullmatch(text)
    if not match or (match["special"] == "NaN"):
        return Coercion(False, value)
    return Coercion(True, _number(match))


def parse_array(value, /):
    if isinstance(value, (list, tuple)):
        return Coercion(True, value)
    if isinstance(value, str) and (text := value.strip(_WHITESPACE)).startswith("[") and text.endswith("]"):
        try:
            return Coercion(True, LiteralParser(text).parse())
        except LiteralSyntaxError:
            return Coercion(False, value)
    return Coercion(False, value)


def parse_object(value, /):
    if isinstance(value, Mapping):
        return Coercion(True, value)
    if isinstance(value, str) and (text := value.strip(_WHITESPACE)).startswith("{") and text.endswith("}"):
        try:
            return Coercion(True, LiteralParser(text).parse())
        except LiteralSyntaxError:
            return Coercion(False, value)
    return Coercion(False, value)


def parse_string(value, /):
    """
    final step, always succeeds.

    - strings lose one layer of matching surrounding quotes (', " or `); the
      inner text is not coerced again.
    - anything else is converted with str().
    """
    if isinstance(value, str):
        if match := _QUOTED.fullmatch(value):
            return Coercion(True, match[2])
        return Coercion(True, value)
    return Coercion(True, str(value))


_STEPS = (
    parse_undefined,
    parse_null,
    parse_boolean,
    parse_number,
    parse_array,
    parse_object,
    parse_string,
)


def parse_value(value, /):
    """
    Convert a raw value into its most specific type.

    Parameters
    - value: any
      Usually the string found after '=' in an argument.

    Returns
    - The value produced by the first successful step (see module docstring).

    Notes
    - Total function: never raises for any input.
    """
    for step in _STEPS:
        succeeded, result = step(value)
        if succeeded:
            return result
    return value  # unreachable: parse_string always succeeds


_IDENTIFIER = re.compile(r"(?:[^\W\d]|\$)(?:\w|\$)*")
_WORDS = {"undefined": Unset, "null": None, "true": True, "false": False}
_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}


class LiteralParser:
    """
    Recursive-descent parser for array/object literal text.

    grammar
        value   := word | number | string | array | object
        word    := "undefined" | "null" | "true" | "false"
        number  := see parse_number (signed NaN and Infinity are allowed here)
        string  := '...' | "..." | `...`   (backslash escapes)
        array   := "[" [ value { "," value } [","] ] "]"
        object  := "{" [ member { "," member } [","] ] "}"
        member  := ( identifier | string | number ) ":" value

    Whitespace and // or /* */ comments may appear between any two tokens.

    usage
        LiteralParser("[1, {a: 2}]").parse()  -> [1, {"a": 2}]
    """

    # arrays and objects nested deeper than this fail with NESTING_TOO_DEEP
    max_depth = 128

    def __init__(self, text, /):
        if not isinstance(text, str):
            raise TypeError("LiteralParser() argument must be a string")
        self.text = text
        self.offset = 0
        self.depth = 0

    def parse(self):
        """
        parse the whole text as a single value; trailing input is an error.
        """
        self.offset = 0
        self.depth = 0
        self._skip()
        value = self._value()
        self._skip()
        if self.offset < len(self.text):
            self._fail(
                "unexpected %r after the end of the literal" % self.text[self.offset],
                FaultCode.TRAILING_CHARACTERS,
                hint="remove everything after the closing bracket or brace"
            )
        return value

    def _fail(self, message, code, /, *, hint=None, offset=None):
        raise LiteralSyntaxError(
            message,
            code=code,
            text=self.text,
            offset=self.offset if offset is None else offset,
            hint=hint
        )

    def _peek(self):
        return self.text[self.offset:self.offset + 1]

    def _skip(self):
        text = self.text
        while self.offset < len(text):
            char = text[self.offset]
            if char in _WHITESPACE:
                self.offset += 1
            elif text.startswith("//", self.offset):
                end = text.find("\n", self.offset)
                self.offset = len(text) if end < 0 else end + 1
            elif text.startswith("/*", self.offset):
                end = text.find("*/", self.offset + 2)
                if end < 0:
                    self._fail("unterminated block comment", FaultCode.UNEXPECTED_END, hint="close the comment with */")
                self.offset = end + 2
            else:
                break

    def _expect(self, char):
        if self._peek() != char:
            self._unexpected("%r" % char)
        self.offset += 1

    def _unexpected(self, expectation):
        if self.offset >= len(self.text):
            self._fail("unexpected end of literal, expected %s" % expectation, FaultCode.UNEXPECTED_END)
        self._fail(
            "unexpected %r at offset %d, expected %s" % (self.text[self.offset], self.offset, expectation),
            FaultCode.UNEXPECTED_CHARACTER
        )

    def _value(self):
        match self._peek():
            case "[":
                return self._array()
            case "{":
                return self._object()
            case "'" | '"' | "`":
                return self._string()
            case "":
                self._unexpected("a value")

        if match := _NUMBER.match(self.text, self.offset):
            return self._number(match)

        if match := _IDENTIFIER.match(self.text, self.offset):
            if match[0] in _WORDS:
                self.offset = match.end()
                return _WORDS[match[0]]
            self._fail(
                "unknown word %r at offset %d" % (match[0], self.offset),
                FaultCode.UNEXPECTED_CHARACTER,
                hint="quote plain text values, for example '%s'" % match[0]
            )

        self._unexpected("a value")

    def _number(self, match):
        # a number glued to identifier characters ("12abc", "0x1g") is not a number
        end = match.end()
        if end < len(self.text) and (self.text[end].isalnum() or self.text[end] in "_$."):
            self._fail(
                "invalid number %r at offset %d" % (self.text[self.offset:end + 1], self.offset),
                FaultCode.INVALID_NUMBER
            )
        self.offset = end
        return _number(match)

    def _nest(self):
        if self.depth >= self.max_depth:
            self._fail(
                "literal nested deeper than %d levels at offset %d" % (self.max_depth, self.offset),
                FaultCode.NESTING_TOO_DEEP,
                hint="flatten the value or pass it as separate options"
            )
        self.depth += 1

    def _array(self):
        self._expect("[")
        self._nest()
        result = []
        self._skip()
        while self._peek() != "]":
            result.append(self._value())
            self._skip()
            if self._peek() == ",":
                self.offset += 1
                self._skip()
            elif self._peek() != "]":
                self._unexpected("',' or ']'")
        self.offset += 1
        self.depth -= 1
        return result

    def _object(self):
        self._expect("{")
        self._nest()
        result = {}
        self._skip()
        while self._peek() != "}":
            key = self._key()
            self._skip()
            self._expect(":")
            self._skip()
            result[key] = self._value()
            self._skip()
            if self._peek() == ",":
                self.offset += 1
                self._skip()
            elif self._peek() != "}":
                self._unexpected("',' or '}'")
        self.offset += 1
        self.depth -= 1
        return result

    def _key(self):
        if self._peek() in ("'", '"', "`"):
            return self._string()
        if match := _IDENTIFIER.match(self.text, self.offset):
            self.offset = match.end()
            return match[0]
        if match := _NUMBER.match(self.text, self.offset):
            number = self._number(match)
            if math.isnan(number):
                return "NaN"
            if math.isinf(number):
                return "-Infinity" if number < 0 else "Infinity"
            if isinstance(number, float) and number.is_integer():
                return str(int(number))
            return str(number)
        self._unexpected("a property name")

    def _string(self):
        text = self.text
        quote = text[self.offset]
        start = self.offset
        self.offset += 1
        chunks = []
        while True:
            if self.offset >= len(text):
                self._fail(
                    "unterminated string starting at offset %d" % start,
                    FaultCode.UNTERMINATED_STRING,
                    hint="close the string with %s" % quote,
                    offset=start
                )
            char = text[self.offset]
            if char == quote:
                self.offset += 1
                return "".join(chunks)
            if char == "\\":
                chunks.append(self._escape())
                continue
            if char in "\r\n" and quote != "`":
                self._fail(
                    "line break inside a string at offset %d" % self.offset,
                    FaultCode.UNTERMINATED_STRING,
                    hint="use \\n or backticks for multi-line text"
                )
            chunks.append(char)
            self.offset += 1

    def _escape(self):
        text = self.text
        start = self.offset
        self.offset += 1
        char = text[self.offset:self.offset + 1]
        if not char:
            self._fail("unterminated escape sequence", FaultCode.UNTERMINATED_STRING, offset=start)
        self.offset += 1

        if char in _ESCAPES:
            # \0 followed by a digit is a legacy octal escape
            if char == "0" and text[self.offset:self.offset + 1].isdigit():
                self._fail("octal escapes are not supported", FaultCode.INVALID_ESCAPE, offset=start)
            return _ESCAPES[char]
        if char == "x":
            return self._codepoint(2, start)
        if char == "u":
            if text[self.offset:self.offset + 1] == "{":
                end = text.find("}", self.offset)
                digits = text[self.offset + 1:end] if end > 0 else ""
                if not re.fullmatch(r"[0-9a-fA-F]{1,6}", digits) or int(digits, 16) > 0x10FFFF:
                    self._fail("invalid unicode escape", FaultCode.INVALID_ESCAPE, offset=start)
                self.offset = end + 1
                return chr(int(digits, 16))
            return self._codepoint(4, start)
        if char == "\r":
            # line continuation, \r\n counts as one break
            if text[self.offset:self.offset + 1] == "\n":
                self.offset += 1
            return ""
        if char in "\n\u2028\u2029":
            return ""
        if char.isdigit():
            self._fail("octal escapes are not supported", FaultCode.INVALID_ESCAPE, offset=start)
        return char

    def _codepoint(self, width, start):
        digits = self.text[self.offset:self.offset + width]
        if not re.fullmatch(r"[0-9a-fA-F]{%d}" % width, digits):
            self._fail("invalid hexadecimal escape", FaultCode.INVALID_ESCAPE, offset=start)
        self.offset += width
        return chr(int(digits, 16))


def parse_literal(text, /):
    """
    Strictly parse a literal (array, object or scalar) and return its value.

    Unlike parse_value(), malformed input raises LiteralSyntaxError (with code,
    text and offset) instead of falling back to the raw string.
    """
    return LiteralParser(text).parse()


__all__ = (
    "Coercion",
    "LiteralParser",
    "parse_undefined",
    "parse_null",
    "parse_boolean",
    "parse_number",
    "parse_array",
    "parse_object",
    "parse_string",
    "parse_value",
    "parse_literal",
)
