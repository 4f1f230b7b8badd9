# python
"""
Type conversion and record building tests (ArgType, coerce).

Scope
- Validate ArgType.coerce for each type, including the bare "--name" case.
- Validate record building: declared order, absent values, flag presets,
  one_of restrictions, and ConversionError details.

Conventions
- Test method names follow CamelCase per project convention.
- Records are built through resolve() followed by coerce(), as execute() does.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argosy import Arg, Command, ArgType, Bool, Nat, Int, String, Float, File, Folder
from argosy.coercion import absent, coerce
from argosy.faults import ConversionError
from argosy.resolver import resolve


def _record(command, argv):
    return coerce(resolve(command, argv))


class TestArgTypeCoerce(TestCase):
    """Conversion of raw token values."""

    def testBool(self):
        self.assertIs(Bool.coerce(None), True)
        self.assertIs(Bool.coerce("true"), True)
        self.assertIs(Bool.coerce("false"), False)
        for raw in ("yes", "True", "1", ""):
            with self.subTest(raw=raw):
                with self.assertRaises(ValueError):
                    Bool.coerce(raw)

    def testNat(self):
        self.assertEqual(Nat.coerce("3"), 3)
        self.assertEqual(Nat.coerce("007"), 7)
        for raw in ("-3", "+3", "3.0", "abc", "", " 3", None):
            with self.subTest(raw=raw):
                with self.assertRaises(ValueError):
                    Nat.coerce(raw)

    def testInt(self):
        self.assertEqual(Int.coerce("-3"), -3)
        self.assertEqual(Int.coerce("+4"), 4)
        for raw in ("3.0", "1_000", "--3", None):
            with self.subTest(raw=raw):
                with self.assertRaises(ValueError):
                    Int.coerce(raw)

    def testFloat(self):
        self.assertEqual(Float.coerce("2.5"), 2.5)
        self.assertEqual(Float.coerce("-1e3"), -1000.0)
        self.assertEqual(Float.coerce("3"), 3.0)
        for raw in ("x", " 1.0", "1_0.0", "", None):
            with self.subTest(raw=raw):
                with self.assertRaises(ValueError):
                    Float.coerce(raw)

    def testTextualTypesPassThrough(self):
        for type in (String, File, Folder):
            with self.subTest(type=type):
                self.assertEqual(type.coerce("a b"), "a b")
                self.assertIsNone(type.coerce(None))

    def testLabelsAndResolvable(self):
        self.assertEqual(Nat.label, "a natural number")
        self.assertTrue(File.resolvable)
        self.assertTrue(Folder.resolvable)
        self.assertFalse(String.resolvable)
        self.assertEqual(repr(ArgType.NAT), "Nat")


class TestCoerce(TestCase):
    """Typed record construction."""

    def testNatRejectsNegative(self):
        cmd = Command(args={"count": Arg(type=Nat)})
        with self.assertRaises(ConversionError) as caught:
            _record(cmd, ["--count=-3"])
        self.assertEqual(caught.exception.name, "count")
        self.assertEqual(caught.exception.value, "-3")
        self.assertIs(caught.exception.expected, Nat)
        self.assertEqual(caught.exception.position, 0)

    def testNatAccepted(self):
        cmd = Command(args={"count": Arg(type=Nat)})
        self.assertEqual(_record(cmd, ["--count=3"]), {"count": 3})

    def testBareNumericNameIsMissingValue(self):
        cmd = Command(args={"count": Arg(type=Nat)})
        with self.assertRaises(ConversionError) as caught:
            _record(cmd, ["--count"])
        self.assertIsNone(caught.exception.value)
        self.assertIn("no value was given", caught.exception.message)

    def testBareBoolIsTrue(self):
        cmd = Command(args={"verbose": Arg(type=Bool)})
        self.assertEqual(_record(cmd, ["--verbose"]), {"verbose": True})

    def testAbsentValues(self):
        cmd = Command(args={
            "verbose": Arg(type=Bool),
            "jobs": Arg(type=Nat, default=2),
            "name": Arg(),
        })
        self.assertEqual(_record(cmd, []), {"verbose": False, "jobs": 2, "name": None})
        self.assertIs(absent(cmd.args["verbose"]), False)
        self.assertIsNone(absent(cmd.args["name"]))

    def testRecordFollowsDeclaredOrder(self):
        cmd = Command(args={"b": Arg(), "a": Arg(type=Int), "c": Arg(type=Bool)})
        self.assertEqual(list(_record(cmd, ["--c", "--a=1"])), ["b", "a", "c"])

    def testFlagPresetsKeepTypedValue(self):
        cmd = Command(args={
            "verbose": Arg(type=Bool, flags="v"),
            "jobs": Arg(type=Nat, default=1, flags={"j": 4}),
        })
        self.assertEqual(_record(cmd, ["-vj"]), {"verbose": True, "jobs": 4})

    def testOneOfRestriction(self):
        cmd = Command(args={"mode": Arg(one_of={"fast", "safe"})})
        self.assertEqual(_record(cmd, ["--mode=safe"]), {"mode": "safe"})
        with self.assertRaises(ConversionError) as caught:
            _record(cmd, ["--mode=slow"])
        self.assertIn("is not one of 'fast', 'safe'", caught.exception.message)

    def testFilesStayPaths(self):
        cmd = Command(args={"src": Arg(type=File)}, default_params=[["src"]])
        self.assertEqual(_record(cmd, ["a.txt"]), {"src": "a.txt"})

    def testFirstFailureWins(self):
        cmd = Command(args={"a": Arg(type=Nat), "b": Arg(type=Int)})
        with self.assertRaises(ConversionError) as caught:
            _record(cmd, ["--b=x", "--a=y"])
        self.assertEqual(caught.exception.name, "a")


if __name__ == "__main__":
    unittest.main()
