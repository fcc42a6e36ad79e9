"""
Flag values and flag-set tests (registration, parsing, help helpers).

Scope
- Validate typed values: conversion, printing and zero values.
- Validate FlagSet registration and lexicographic visitation.
- Validate parse() syntax, terminators and faults.
- Validate duration parsing/printing and the help helpers.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from datetime import timedelta
from unittest import TestCase

from helmsman.faults import FaultCode, FlagParseError, HelpRequested
from helmsman.flags import *


class TestValues(TestCase):
    """Behavioral tests for the typed flag values."""

    def testStringValue(self):
        value = StringValue()
        self.assertEqual(value.get(), "")
        value.set("fast")
        self.assertEqual(str(value), "fast")

    def testBoolValue(self):
        value = BoolValue()
        self.assertIs(value.get(), False)
        self.assertEqual(str(value), "false")
        for text in ("1", "t", "T", "true", "TRUE", "True"):
            value.set(text)
            self.assertIs(value.get(), True)
        value.set("F")
        self.assertEqual(str(value), "false")
        with self.assertRaises(ValueError):
            value.set("yes")

    def testIntValueAcceptsPrefixes(self):
        value = IntValue()
        value.set("0x10")
        self.assertEqual(value.get(), 16)
        value.set("-3")
        self.assertEqual(str(value), "-3")

    def testIntValueRejectsText(self):
        with self.assertRaises(ValueError):
            IntValue().set("ten")

    def testUintValueRejectsNegatives(self):
        with self.assertRaises(ValueError):
            UintValue().set("-1")
        with self.assertRaises(ValueError):
            UintValue(-1)

    def testTextDefaultsAreConverted(self):
        self.assertEqual(IntValue("3").get(), 3)
        self.assertIs(BoolValue("true").get(), True)
        self.assertEqual(FloatValue("0.5").get(), 0.5)
        self.assertEqual(DurationValue("90s").get(), timedelta(seconds=90))
        self.assertEqual(StringValue("3").get(), "3")

    def testFloatValuePrinting(self):
        self.assertEqual(str(FloatValue()), "0")
        self.assertEqual(str(FloatValue(2.0)), "2")
        self.assertEqual(str(FloatValue(1.5)), "1.5")

    def testDurationValue(self):
        value = DurationValue()
        self.assertEqual(value.get(), timedelta(0))
        self.assertEqual(str(value), "0s")
        value.set("1m30s")
        self.assertEqual(value.get(), timedelta(seconds=90))
        with self.assertRaises(ValueError):
            value.set("soon")

    def testZeroTable(self):
        self.assertEqual(StringValue.zero, "")
        self.assertEqual(BoolValue.zero, "false")
        self.assertEqual(IntValue.zero, "0")
        self.assertEqual(UintValue.zero, "0")
        self.assertEqual(FloatValue.zero, "0")
        self.assertEqual(DurationValue.zero, "0s")


class TestDurations(TestCase):
    """Behavioral tests for duration text."""

    def testParse(self):
        self.assertEqual(parse_duration("300ms"), timedelta(milliseconds=300))
        self.assertEqual(parse_duration("1.5h"), timedelta(minutes=90))
        self.assertEqual(parse_duration("2h45m"), timedelta(hours=2, minutes=45))
        self.assertEqual(parse_duration("-1s"), timedelta(seconds=-1))
        self.assertEqual(parse_duration("0"), timedelta(0))

    def testParseSubMicrosecondUnits(self):
        self.assertEqual(parse_duration("2000000ns"), timedelta(milliseconds=2))
        self.assertEqual(parse_duration("3000ns"), timedelta(microseconds=3))
        self.assertEqual(parse_duration("1s500000ns"), timedelta(seconds=1.5))
        self.assertEqual(parse_duration("250us"), parse_duration("250µs"))

    def testParseRejectsMalformed(self):
        for text in ("", "1", "h", "1x", ".s"):
            with self.subTest(text=text), self.assertRaises(ValueError):
                parse_duration(text)

    def testFormat(self):
        self.assertEqual(format_duration(timedelta(0)), "0s")
        self.assertEqual(format_duration(timedelta(hours=1)), "1h0m0s")
        self.assertEqual(format_duration(timedelta(seconds=90)), "1m30s")
        self.assertEqual(format_duration(timedelta(seconds=1.5)), "1.5s")
        self.assertEqual(format_duration(timedelta(milliseconds=300)), "300ms")
        self.assertEqual(format_duration(timedelta(microseconds=1500)), "1.5ms")
        self.assertEqual(format_duration(timedelta(microseconds=20)), "20µs")
        self.assertEqual(format_duration(timedelta(seconds=-2)), "-2s")


class TestFlagSetRegistration(TestCase):
    """Behavioral tests for FlagSet registration and visitation."""

    def setUp(self):
        self.flags = FlagSet("demo")

    def testHelpersReturnValues(self):
        self.assertIsInstance(self.flags.string("name", "guest"), StringValue)
        self.assertIsInstance(self.flags.bool("verbose"), BoolValue)
        self.assertIsInstance(self.flags.int("count", 3), IntValue)
        self.assertIsInstance(self.flags.uint("size"), UintValue)
        self.assertIsInstance(self.flags.float("ratio", 0.5), FloatValue)
        self.assertIsInstance(self.flags.duration("timeout"), DurationValue)
        self.assertEqual(len(self.flags), 6)

    def testDefaultCapturedAtRegistration(self):
        value = self.flags.string("name", "guest", "who to greet")
        flag = self.flags.lookup("name")
        self.assertEqual(flag.default, "guest")
        self.assertEqual(flag.usage, "who to greet")
        self.assertIs(flag.value, value)
        value.set("admin")
        self.assertEqual(flag.default, "guest")

    def testRedefinitionRejected(self):
        self.flags.bool("verbose")
        with self.assertRaises(ValueError):
            self.flags.string("verbose")

    def testInvalidNamesRejected(self):
        for name in ("", "-v", "a=b"):
            with self.subTest(name=name), self.assertRaises(ValueError):
                self.flags.bool(name)

    def testNegativeUintDefaultRejected(self):
        with self.assertRaises(ValueError):
            self.flags.uint("size", -1)

    def testLookupUnknown(self):
        self.assertIsNone(self.flags.lookup("missing"))
        self.assertNotIn("missing", self.flags)

    def testLexicographicVisitation(self):
        for name in ("zeta", "alpha", "m", "beta"):
            self.flags.bool(name)
        visited = []
        self.flags.visit_all(lambda flag: visited.append(flag.name))
        self.assertEqual(visited, ["alpha", "beta", "m", "zeta"])
        self.assertEqual([flag.name for flag in self.flags], visited)

    def testVisitOnlySetFlags(self):
        self.flags.bool("verbose")
        self.flags.string("name")
        self.flags.set("name", "x")
        visited = []
        self.flags.visit(lambda flag: visited.append(flag.name))
        self.assertEqual(visited, ["name"])

    def testLong(self):
        self.flags.bool("v")
        self.flags.bool("verbose")
        self.assertFalse(self.flags.lookup("v").long)
        self.assertTrue(self.flags.lookup("verbose").long)


class TestFlagSetParsing(TestCase):
    """Behavioral tests for FlagSet.parse()."""

    def setUp(self):
        self.flags = FlagSet("demo")
        self.verbose = self.flags.bool("verbose")
        self.name = self.flags.string("name")
        self.count = self.flags.int("count")

    def testStopsAtFirstNonFlag(self):
        rest = self.flags.parse(["--verbose", "-name", "x", "file", "--count=3"])
        self.assertEqual(rest, ["file", "--count=3"])
        self.assertEqual(self.flags.args, rest)
        self.assertTrue(self.flags.parsed)
        self.assertIs(self.verbose.get(), True)
        self.assertEqual(self.name.get(), "x")
        self.assertEqual(self.count.get(), 0)

    def testAssignedForms(self):
        self.flags.parse(["-name=a=b", "--count=7", "-verbose=false"])
        self.assertEqual(self.name.get(), "a=b")
        self.assertEqual(self.count.get(), 7)
        self.assertIs(self.verbose.get(), False)

    def testDoubleDashTerminates(self):
        self.assertEqual(self.flags.parse(["--", "--verbose"]), ["--verbose"])
        self.assertIs(self.verbose.get(), False)

    def testSingleDashIsAnArgument(self):
        self.assertEqual(self.flags.parse(["-", "x"]), ["-", "x"])

    def testEmptyInput(self):
        self.assertEqual(self.flags.parse([]), [])

    def testBooleanDoesNotConsumeNextToken(self):
        self.assertEqual(self.flags.parse(["-verbose", "true"]), ["true"])

    def testUndefinedFlag(self):
        with self.assertRaises(FlagParseError) as context:
            self.flags.parse(["--bogus"])
        self.assertEqual(str(context.exception), "flag provided but not defined: -bogus")
        self.assertEqual(context.exception.options["code"], FaultCode.FLAG_PARSE)
        self.assertEqual(context.exception.options["flag"], "bogus")

    def testHelpRequested(self):
        for token in ("-h", "-help", "--help"):
            with self.subTest(token=token), self.assertRaises(HelpRequested):
                self.flags.parse([token])

    def testDefinedHelpIsAnOrdinaryFlag(self):
        helps = self.flags.bool("h")
        self.flags.parse(["-h"])
        self.assertIs(helps.get(), True)

    def testBadSyntax(self):
        for token in ("---x", "-=x", "--=x"):
            with self.subTest(token=token), self.assertRaises(FlagParseError) as context:
                self.flags.parse([token])
            self.assertEqual(str(context.exception), f"bad flag syntax: {token}")

    def testMissingValue(self):
        with self.assertRaises(FlagParseError) as context:
            self.flags.parse(["--name"])
        self.assertEqual(str(context.exception), "flag needs an argument: -name")

    def testInvalidValue(self):
        with self.assertRaises(FlagParseError) as context:
            self.flags.parse(["--count", "many"])
        self.assertTrue(str(context.exception).startswith("invalid value 'many' for flag -count"))

    def testInvalidBoolean(self):
        with self.assertRaises(FlagParseError) as context:
            self.flags.parse(["--verbose=maybe"])
        self.assertTrue(str(context.exception).startswith("invalid boolean value 'maybe' for -verbose"))


class TestHelpHelpers(TestCase):
    """Behavioral tests for unquote_usage() and is_zero_value()."""

    def testBackQuotedName(self):
        flag = Flag("config", "load `file` at startup", StringValue())
        self.assertEqual(unquote_usage(flag), ("file", "load file at startup"))

    def testTypeHintFallback(self):
        self.assertEqual(unquote_usage(Flag("name", "who", StringValue())), ("string", "who"))
        self.assertEqual(unquote_usage(Flag("count", "how many", IntValue())), ("int", "how many"))
        self.assertEqual(unquote_usage(Flag("size", "", UintValue())), ("uint", ""))
        self.assertEqual(unquote_usage(Flag("ratio", "", FloatValue())), ("float", ""))
        self.assertEqual(unquote_usage(Flag("wait", "", DurationValue())), ("duration", ""))

    def testBooleanHasNoHint(self):
        self.assertEqual(unquote_usage(Flag("verbose", "talk more", BoolValue())), ("", "talk more"))

    def testUnbalancedQuoteIgnored(self):
        self.assertEqual(unquote_usage(Flag("name", "a `b", StringValue())), ("string", "a `b"))

    def testZeroValues(self):
        self.assertTrue(is_zero_value(Flag("name", "", StringValue()), ""))
        self.assertTrue(is_zero_value(Flag("verbose", "", BoolValue()), "false"))
        self.assertTrue(is_zero_value(Flag("count", "", IntValue()), "0"))
        self.assertTrue(is_zero_value(Flag("wait", "", DurationValue()), "0s"))

    def testLiteralZeroFallback(self):
        self.assertTrue(is_zero_value(Flag("name", "", StringValue()), "0"))
        self.assertTrue(is_zero_value(Flag("name", "", StringValue()), "false"))

    def testNonZeroValues(self):
        self.assertFalse(is_zero_value(Flag("name", "", StringValue()), "guest"))
        self.assertFalse(is_zero_value(Flag("verbose", "", BoolValue()), "true"))
        self.assertFalse(is_zero_value(Flag("wait", "", DurationValue()), "1s"))


if __name__ == "__main__":
    unittest.main()
