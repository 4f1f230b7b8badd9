# python
"""
Tokenizer behavioral tests (lexical cases, warnings, forbidden names).

Scope
- Validate the three lexical cases: named (--name[=value]), flag clusters (-abc), positionals.
- Validate ForbiddenArgNameError offsets and the advisory warnings on clusters.

Conventions
- Test method names follow CamelCase per project convention.
- Tests call argosy.tokens.tokenize directly with an explicit argv position.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argosy.faults import ForbiddenArgNameError, EmptyFlagArgWarning, DuplicateFlagWarning
from argosy.tokens import ParsedArg, tokenize


class TestNamedTokens(TestCase):
    """Behavioral tests for --name and --name=value tokens."""

    def testNameAndValueSplitOnFirstEquals(self):
        self.assertEqual(tokenize("--name=value", 0), ParsedArg("name", "value", 0))

    def testValueKeepsLaterEquals(self):
        parsed = tokenize("--expr=a=b", 2)
        self.assertEqual(parsed.name, "expr")
        self.assertEqual(parsed.value, "a=b")
        self.assertEqual(parsed.position, 2)

    def testBareNameHasNoValue(self):
        parsed = tokenize("--verbose", 0)
        self.assertEqual(parsed.name, "verbose")
        self.assertIsNone(parsed.value)
        self.assertIsNone(parsed.warning)

    def testEmptyInlineValueIsEmptyString(self):
        self.assertEqual(tokenize("--name=", 0).value, "")

    def testValueIsNotRestricted(self):
        self.assertEqual(tokenize("--path=/tmp/out-1_2.txt", 0).value, "/tmp/out-1_2.txt")

    def testMixedCaseLettersAccepted(self):
        self.assertEqual(tokenize("--dryRun", 0).name, "dryRun")

    def testHyphenInNameReportsOffset(self):
        with self.assertRaises(ForbiddenArgNameError) as caught:
            tokenize("--na-me=x", 3)
        self.assertEqual(caught.exception.offset, 4)
        self.assertEqual(caught.exception.position, 3)
        self.assertEqual(caught.exception.token, "--na-me=x")

    def testDigitInNameReportsOffset(self):
        with self.assertRaises(ForbiddenArgNameError) as caught:
            tokenize("--v2", 0)
        self.assertEqual(caught.exception.offset, 3)

    def testUnderscoreInNameReportsOffset(self):
        with self.assertRaises(ForbiddenArgNameError) as caught:
            tokenize("--bad_name", 0)
        self.assertEqual(caught.exception.offset, 5)

    def testNonAsciiLetterForbidden(self):
        with self.assertRaises(ForbiddenArgNameError) as caught:
            tokenize("--naïve", 0)
        self.assertEqual(caught.exception.offset, 4)

    def testCharactersAfterEqualsAreNotChecked(self):
        self.assertEqual(tokenize("--name=_-9", 0).value, "_-9")

    def testEmptyNameForbidden(self):
        for token in ("--", "--=value"):
            with self.subTest(token=token):
                with self.assertRaises(ForbiddenArgNameError) as caught:
                    tokenize(token, 0)
                self.assertEqual(caught.exception.offset, 2)
                self.assertIn("empty argument name", caught.exception.message)

    def testReservedFlagsNameForbidden(self):
        with self.assertRaises(ForbiddenArgNameError) as caught:
            tokenize("--flags=ab", 1)
        self.assertIn("reserved", caught.exception.message)
        self.assertEqual(caught.exception.position, 1)


class TestFlagClusters(TestCase):
    """Behavioral tests for -abc style clusters."""

    def testDistinctLettersYieldSetWithoutWarning(self):
        parsed = tokenize("-abc", 0)
        self.assertEqual(parsed.name, "flags")
        self.assertEqual(parsed.value, frozenset("abc"))
        self.assertEqual(len(parsed.value), 3)
        self.assertIsNone(parsed.warning)

    def testRepeatedLetterAttachesDuplicateWarning(self):
        parsed = tokenize("-aab", 4)
        self.assertEqual(parsed.value, frozenset("ab"))
        self.assertIsInstance(parsed.warning, DuplicateFlagWarning)
        self.assertEqual(parsed.warning.flag, "a")
        self.assertEqual(parsed.warning.position, 4)

    def testLoneDashIsEmptyClusterWithWarning(self):
        parsed = tokenize("-", 2)
        self.assertEqual(parsed.name, "flags")
        self.assertEqual(parsed.value, frozenset())
        self.assertIsInstance(parsed.warning, EmptyFlagArgWarning)
        self.assertEqual(parsed.warning.position, 2)

    def testClusterInvariant(self):
        for token in ("-x", "--name=x", "value", "-"):
            with self.subTest(token=token):
                parsed = tokenize(token, 0)
                self.assertEqual(parsed.cluster, isinstance(parsed.value, frozenset))


class TestPositionals(TestCase):
    """Behavioral tests for positional tokens."""

    def testPositionalKeepsRawValue(self):
        parsed = tokenize("input.txt", 5)
        self.assertTrue(parsed.positional)
        self.assertIsNone(parsed.name)
        self.assertEqual(parsed.value, "input.txt")
        self.assertEqual(parsed.position, 5)

    def testEmptyStringIsPositional(self):
        self.assertTrue(tokenize("", 0).positional)

    def testNonStringRejected(self):
        with self.assertRaises(TypeError):
            tokenize(3, 0)


if __name__ == "__main__":
    unittest.main()
