"""
Console entry point tests.

Scope
- main() pretty-prints the parsed options on stdout and returns 0.
- Values that look like literals but do not parse are reported on stderr.
"""
import io
import re
import sys
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest import TestCase, mock

from arglite.__main__ import main
from arglite.utils import Unset


class MainTest(TestCase):

    def run_main(self, args):
        stdout, stderr = io.StringIO(), io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            code = main(args)
        # drop ANSI styling in case the console detected a color terminal
        plain = lambda stream: re.sub(r"\x1b\[[0-9;]*m", "", stream.getvalue())
        return code, plain(stdout), plain(stderr)

    def testPrintsOptions(self):
        code, stdout, stderr = self.run_main(["--foo", "--bar=", "--qux=25", "--list=[1, 2]"])
        self.assertEqual(code, 0)
        self.assertEqual(stdout.strip(), "{'foo': True, 'bar': '', 'qux': 25, 'list': [1, 2]}")
        self.assertEqual(stderr, "")

    def testReportsMalformedLiterals(self):
        code, stdout, stderr = self.run_main(["--list=[1, 2"])
        self.assertEqual(code, 0)
        self.assertIn("'[1, 2'", stdout)
        self.assertIn("value of 'list' kept as text:", stderr)
        self.assertIn("Unexpected End", stderr)

    def testProcessArguments(self):
        with mock.patch.object(sys, "argv", ["arglite", "--name=alex"]):
            code, stdout, stderr = self.run_main(Unset)
        self.assertEqual(code, 0)
        self.assertIn("'name': 'alex'", stdout)


if __name__ == '__main__':
    unittest.main()
