"""
Tests for the utility helpers.

Scope
- Unset sentinel: singleton identity, falsy semantics, copy/pickle identity and
  finality.
- nullify(): only Unset is replaced, other falsy values survive.
- escape(): safe and unsafe modes, including runs of backslashes and sets of
  several characters.
"""
import copy
import pickle
import re
import unittest
from unittest import TestCase

from arglite.utils import *
from arglite.utils import _escape


class UnsetTest(TestCase):
    """
    Test suite for the `UnsetType` singleton.
    """

    def testSingleton(self):
        self.assertIs(UnsetType(), UnsetType())
        self.assertIs(Unset, UnsetType())

    def testRepr(self):
        self.assertEqual(repr(Unset), "Unset")
        self.assertEqual(str(Unset), "Unset")

    def testFalsely(self):
        self.assertFalse(Unset)
        self.assertNotEqual(Unset, None)
        self.assertNotEqual(Unset, False)  # noqa: E712

    def testCopyDeepcopyPickle(self):
        """
        copy(), deepcopy() and pickle round-trips preserve identity.
        """
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testUnion(self):
        self.assertIsInstance("text", str | Unset)
        self.assertIsInstance(Unset, str | Unset)
        self.assertNotIsInstance(1, str | Unset)

    def testFinalClass(self):
        with self.assertRaises(TypeError):
            type("UnsetType", (UnsetType,), {})


class NullifyTest(TestCase):

    def testUnsetIsReplaced(self):
        self.assertIsNone(nullify(Unset))
        self.assertEqual(nullify(Unset, "fallback"), "fallback")

    def testFalsyValuesArePreserved(self):
        for value in (None, 0, "", [], False):
            with self.subTest(value=value):
                self.assertIs(nullify(value, "fallback"), value)


class EscapeTest(TestCase):
    """
    Behavioral tests for escape().

    Every vector is written as (text, chars, safe result, unsafe result).
    """

    def testDefaultEscapesBackslash(self):
        self.assertEqual(escape("hello\\World"), "hello\\\\World")
        self.assertEqual(escape('!@"#$;%^:&?* \\ .,/()[]{}'), '!@"#$;%^:&?* \\\\ .,/()[]{}')

    def testEmptyInputs(self):
        self.assertEqual(escape(""), "")
        self.assertEqual(escape("hello\\World", ()), "hello\\World")
        self.assertEqual(escape("hello\\World", ("\\", "\\")), "hello\\\\World")

    def testBackslashRuns(self):
        vectors = (
            ("hello\\World", ("\\",), "hello\\\\World", "hello\\\\World"),
            ("hello\\\\World", ("\\",), "hello\\\\World", "hello\\\\\\\\World"),
            ("hello\\\\\\World", ("\\",), "hello\\\\\\\\World", "hello\\\\\\\\\\\\World"),
        )
        self._check(vectors)

    def testSingleCharacter(self):
        vectors = (
            ("hello|World", ("|",), "hello\\|World", "hello\\|World"),
            ("hello\\|World", ("|",), "hello\\|World", "hello\\\\|World"),
            ("hello\\\\|World", ("|",), "hello\\\\|World", "hello\\\\\\|World"),
            ("hello||World", ("|",), "hello\\|\\|World", "hello\\|\\|World"),
            ("hello\\||World", ("|",), "hello\\|\\|World", "hello\\\\|\\|World"),
            ("hello|\\\\|World", ("|",), "hello\\|\\\\|World", "hello\\|\\\\\\|World"),
        )
        self._check(vectors)

    def testCharacterAndBackslash(self):
        vectors = (
            ("hello|World", ("|", "\\"), "hello\\|World", "hello\\|World"),
            ("hello\\|World", ("|", "\\"), "hello\\|World", "hello\\\\\\|World"),
            ("hello\\\\|World", ("|", "\\"), "hello\\\\\\|World", "hello\\\\\\\\\\|World"),
            ("hello||World", ("|", "\\"), "hello\\|\\|World", "hello\\|\\|World"),
            ("hello\\||World", ("|", "\\"), "hello\\|\\|World", "hello\\\\\\|\\|World"),
            ("hello|\\\\|World", ("|", "\\"), "hello\\|\\\\\\|World", "hello\\|\\\\\\\\\\|World"),
        )
        self._check(vectors)

    def testSeveralCharacters(self):
        chars = ("|", "$")
        vectors = (
            ("hello$|World", chars, "hello\\$\\|World", "hello\\$\\|World"),
            ("hello\\$\\|World", chars, "hello\\$\\|World", "hello\\\\$\\\\|World"),
            ("hello$||World", chars, "hello\\$\\|\\|World", "hello\\$\\|\\|World"),
        )
        self._check(vectors)

    def testAnchors(self):
        chars = ("|", "\\", "^", "$")
        vectors = (
            ("^hello|World$", chars, "\\^hello\\|World\\$", "\\^hello\\|World\\$"),
            ("^hello|\\World$", chars, "\\^hello\\|\\\\World\\$", "\\^hello\\|\\\\World\\$"),
            ("\\^hello|\\World$\\", chars, "\\^hello\\|\\\\World\\$\\\\", "\\\\\\^hello\\|\\\\World\\$\\\\"),
        )
        self._check(vectors)

    def testSafeEscapeIsIdempotent(self):
        for text in ("hello|World", "a||b", "\\^x$", "[a-z]"):
            with self.subTest(text=text):
                once = escape(text, REGEX_CHARS)
                self.assertEqual(escape(once, REGEX_CHARS), once)

    def testRegexCharsBuildCharacterClass(self):
        chars = escape("-\\^]$", REGEX_CHARS, False)
        pattern = re.compile("[%s]+" % chars)
        self.assertTrue(pattern.fullmatch("-\\^]$"))
        self.assertIsNone(pattern.fullmatch("a"))

    def testStringOfCharacters(self):
        self.assertEqual(escape("a|b$c", "|$"), "a\\|b\\$c")

    def testValidation(self):
        with self.assertRaises(TypeError):
            escape(1)
        with self.assertRaises(TypeError):
            escape("text", 1)
        with self.assertRaises(ValueError):
            escape("text", ("ab",))

    def testCacheIsBounded(self):
        limit = _escape.cache_info().maxsize
        self.assertEqual(limit, 1024)
        for index in range(limit + 100):
            self.assertEqual(escape("a$%d" % index, "$", False), "a\\$%d" % index)
        self.assertLessEqual(_escape.cache_info().currsize, limit)

    def _check(self, vectors):
        for text, chars, safe, unsafe in vectors:
            with self.subTest(text=text, chars=chars):
                self.assertEqual(escape(text, chars, True), safe)
                self.assertEqual(escape(text, chars, False), unsafe)


if __name__ == '__main__':
    unittest.main()
