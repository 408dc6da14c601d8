# python
"""
Parser behavioral tests (CommandLineArgs, parse, ParsedArguments).

Scope
- Validate parsing of required/optional declarations and typed lookups.
- Validate every parse fault: missing, repeated, enum, boolean, type tag, internal.
- Validate accessor resolution order (given value, call default, spec default, fault).
- Validate argv forms (string, iterable, sys.argv) and deferred parsing.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (CommandLineArgs, Registry, parse, faults).
"""

from __future__ import annotations

import sys
import unittest
import warnings
from unittest import TestCase
from unittest.mock import patch

from argvet import (
    CommandLineArgs,
    Registry,
    Option,
    Kind,
    ParsedArguments,
    Integer,
    parse,
)
from argvet.faults import (
    MissingArgumentsError,
    MultipleValuesError,
    OptionValueRequiredError,
    InvalidEnumValueError,
    InvalidBooleanValueError,
    UnhandledTypeError,
    UnrecognizedArgumentError,
    NoDefaultValueError,
    InternalInconsistencyError,
    DuplicateArgumentWarning,
    FaultCode,
)

NAME = {"arg": "name", "type": "string"}


class TestRequiredArguments(TestCase):
    """Required declarations: presence, missing detection and typed values."""

    def testStringValueIsReturnedAndSpecified(self):
        args = CommandLineArgs([NAME], [], ["--name=value1"])
        self.assertEqual(args.get_value("name"), "value1")
        self.assertTrue(args.specified("name"))

    def testSpacedValueForm(self):
        args = CommandLineArgs([NAME], [], ["--name", "value1"])
        self.assertEqual(args.get_value("name"), "value1")

    def testAllMissingArgumentsAreNamed(self):
        with self.assertRaises(MissingArgumentsError) as context:
            CommandLineArgs([NAME, {"arg": "port", "type": "int"}], [], [])
        self.assertEqual(context.exception.options["missing"], ("name", "port"))
        self.assertEqual(context.exception.options["code"], FaultCode.MISSING_ARGUMENTS)
        self.assertIn("name", str(context.exception))
        self.assertIn("port", str(context.exception))

    def testOnlyAbsentArgumentsAreReportedMissing(self):
        with self.assertRaises(MissingArgumentsError) as context:
            CommandLineArgs([NAME, {"arg": "port", "type": "int"}], [], ["--port=80"])
        self.assertEqual(context.exception.options["missing"], ("name",))

    def testRequiredDefaultIsIgnored(self):
        with self.assertRaises(MissingArgumentsError):
            CommandLineArgs([{"arg": "name", "type": "string", "def": "x"}], [], [])

    def testMissingValueRaises(self):
        with self.assertRaises(OptionValueRequiredError) as context:
            CommandLineArgs([NAME], [], ["--name"])
        self.assertEqual(context.exception.options["option"], "name")

    def testMissingValueBeforeAnotherSwitchRaises(self):
        with self.assertRaises(OptionValueRequiredError):
            CommandLineArgs([NAME, {"arg": "port", "type": "int"}], [], ["--name", "--port=80"])


class TestOptionalArguments(TestCase):
    """Optional declarations and their defaults."""

    def testDefaultWhenAbsent(self):
        args = CommandLineArgs([], [{"arg": "name", "type": "string", "def": "fallback"}], [])
        self.assertEqual(args.get_value("name"), "fallback")
        self.assertFalse(args.specified("name"))

    def testGivenValueWinsOverDefault(self):
        args = CommandLineArgs([], [{"arg": "name", "type": "string", "def": "fallback"}], ["--name=given"])
        self.assertEqual(args.get_value("name"), "given")
        self.assertEqual(args.get_value("name", "ignored"), "given")

    def testOptionalEnumWithoutDefaultMayBeOmitted(self):
        args = CommandLineArgs([], [{"arg": "env", "enum": ["dev", "prod"]}], [])
        self.assertFalse(args.specified("env"))

    def testCallDefaultBeatsSpecDefault(self):
        args = CommandLineArgs([], [{"arg": "port", "type": "int", "def": 80}], [])
        self.assertEqual(args.get_value("port", 8080), 8080)

    def testExplicitNoneDefaultIsReturned(self):
        args = CommandLineArgs([], [{"arg": "port", "type": "int"}], [])
        self.assertIsNone(args.get_value("port", None))

    def testDefaultsAreNotCoerced(self):
        args = CommandLineArgs([], [{"arg": "port", "type": "int", "def": "80"}], [])
        self.assertEqual(args.get_value("port"), "80")

    def testNoDefaultRaises(self):
        args = CommandLineArgs([], [{"arg": "port", "type": "int"}], [])
        with self.assertRaises(NoDefaultValueError) as context:
            args.get_value("port")
        self.assertEqual(context.exception.options["argument"], "port")


class TestCoercion(TestCase):
    """Kind-specific coercion through the full parse path."""

    def testBooleanTrueToken(self):
        args = CommandLineArgs([{"arg": "flag", "type": "boolean"}], [], ["--flag=T"])
        self.assertIs(args.get_value("flag"), True)

    def testBooleanFalseToken(self):
        args = CommandLineArgs([{"arg": "flag", "type": "boolean"}], [], ["--flag=False"])
        self.assertIs(args.get_value("flag"), False)

    def testBooleanBogusTokenRaises(self):
        with self.assertRaises(InvalidBooleanValueError) as context:
            CommandLineArgs([{"arg": "flag", "type": "boolean"}], [], ["--flag=bogus"])
        self.assertEqual(context.exception.options["value"], "bogus")

    def testCsvSplitsInOrder(self):
        args = CommandLineArgs([{"arg": "tags", "type": "csv"}], [], ["--tags=a,b,c"])
        self.assertEqual(args.get_value("tags"), ("a", "b", "c"))

    def testCsvEmptyYieldsOneEmptyString(self):
        args = CommandLineArgs([{"arg": "tags", "type": "csv"}], [], ["--tags="])
        self.assertEqual(args.get_value("tags"), ("",))

    def testCsvKeepsWhitespace(self):
        args = CommandLineArgs([{"arg": "tags", "type": "csv"}], [], ["--tags=a, b"])
        self.assertEqual(args.get_value("tags"), ("a", " b"))

    def testEnumRejectsUnknownValue(self):
        with self.assertRaises(InvalidEnumValueError) as context:
            CommandLineArgs([{"arg": "env", "enum": ["dev", "prod"]}], [], ["--env=staging"])
        self.assertEqual(context.exception.options["choices"], ("dev", "prod"))

    def testEnumAcceptsDeclaredValue(self):
        args = CommandLineArgs([{"arg": "env", "enum": ["dev", "prod"]}], [], ["--env=prod"])
        self.assertEqual(args.get_value("env"), "prod")

    def testEnumWinsOverType(self):
        args = CommandLineArgs([{"arg": "level", "type": "int", "enum": ["1", "2"]}], [], ["--level=2"])
        self.assertEqual(args.get_value("level"), "2")
        self.assertIs(args.registry.types["level"], Kind.ENUM)

    def testStringAndRegexAreIdentity(self):
        values = ["plain", "", "^a+[b-c]*$", "with space", "ünïcödé"]
        for value in values:
            with self.subTest(value=value):
                args = CommandLineArgs(
                    [NAME, {"arg": "pattern", "type": "regex"}], [],
                    ["--name=" + value, "--pattern=" + value],
                )
                self.assertEqual(args.get_value("name"), value)
                self.assertEqual(args.get_value("pattern"), value)

    def testIntegerConversion(self):
        args = CommandLineArgs([{"arg": "port", "type": "int"}], [], ["--port", "-5"])
        self.assertEqual(args.get_value("port"), -5)

    def testIntegerForgivingConversion(self):
        # pins the current behavior: text without leading digits becomes 0
        cases = {"abc": 0, "12abc": 12, " 7": 7, "+3": 3, "": 0}
        for raw, expected in cases.items():
            with self.subTest(raw=raw):
                args = CommandLineArgs([{"arg": "port", "type": "int"}], [], ["--port=" + raw])
                self.assertEqual(args.get_value("port"), expected)

    def testTypedVariantIsKept(self):
        args = CommandLineArgs([{"arg": "port", "type": "int"}], [], ["--port=80"])
        self.assertEqual(args.parsed.typed("port"), Integer(80))

    def testUnknownTypeTagRaisesWhenGiven(self):
        with self.assertRaises(UnhandledTypeError) as context:
            CommandLineArgs([{"arg": "ratio", "type": "float"}], [], ["--ratio=0.5"])
        self.assertEqual(context.exception.options["kind"], "float")

    def testUnknownTypeTagIsAcceptedWhenAbsent(self):
        args = CommandLineArgs([], [{"arg": "ratio", "type": "float", "def": 0.5}], [])
        self.assertEqual(args.get_value("ratio"), 0.5)


class TestParseFaults(TestCase):
    """Structural faults that abort the whole parse."""

    def testRepeatedOptionRaises(self):
        with self.assertRaises(MultipleValuesError) as context:
            CommandLineArgs([NAME], [], ["--name=a", "--name=b"])
        self.assertEqual(context.exception.options["option"], "name")
        self.assertEqual(context.exception.options["values"], ("a", "b"))

    def testRepeatedOptionalOptionRaises(self):
        with self.assertRaises(MultipleValuesError):
            CommandLineArgs([], [{"arg": "tag", "type": "string"}], ["--tag=a", "--tag", "b", "--tag=c"])

    def testInternalInconsistencyRaises(self):
        class LeakyRegistry(Registry):
            @property
            def options(self):
                return super().options + (Option("ghost", False),)

        registry = LeakyRegistry([NAME])
        with self.assertRaises(InternalInconsistencyError) as context:
            parse(registry, ["--name=a", "--ghost=1"])
        self.assertEqual(context.exception.options["option"], "ghost")

    def testUnknownSwitchesAreSkipped(self):
        args = CommandLineArgs([NAME], [], ["--verbose=1", "-x", "--name=a"])
        self.assertEqual(args.get_value("name"), "a")

    def testReadingStopsAtFirstNonSwitch(self):
        with self.assertRaises(MissingArgumentsError):
            CommandLineArgs([NAME], [], ["file.txt", "--name=a"])

    def testReadingStopsAtDoubleDash(self):
        with self.assertRaises(MissingArgumentsError):
            CommandLineArgs([NAME], [], ["--", "--name=a"])

    def testFailedParseKeepsPreviousStore(self):
        args = CommandLineArgs([NAME], [], ["--name=first"])
        with self.assertRaises(MultipleValuesError):
            args.parse(["--name=a", "--name=b"])
        self.assertEqual(args.get_value("name"), "first")


class TestAccessor(TestCase):
    """get_value and specified lookups."""

    def testUnrecognizedArgumentRaises(self):
        args = CommandLineArgs([NAME], [], ["--name=a"])
        with self.assertRaises(UnrecognizedArgumentError) as context:
            args.get_value("nonexistent")
        self.assertEqual(context.exception.options["known"], ("name",))

    def testUnrecognizedArgumentIgnoresCallDefault(self):
        args = CommandLineArgs([NAME], [], ["--name=a"])
        with self.assertRaises(UnrecognizedArgumentError):
            args.get_value("nonexistent", "fallback")

    def testUnrecognizedArgumentSuggestsCloseName(self):
        args = CommandLineArgs([NAME], [], ["--name=a"])
        with self.assertRaises(UnrecognizedArgumentError) as context:
            args.get_value("nmae")
        self.assertEqual(context.exception.options["suggestions"][0], "name")

    def testSpecifiedIsFalseForUnknownNames(self):
        args = CommandLineArgs([NAME], [], ["--name=a"])
        self.assertFalse(args.specified("nonexistent"))

    def testParsedStoreIsReadOnly(self):
        args = CommandLineArgs([NAME], [], ["--name=a"])
        self.assertIsInstance(args.parsed, ParsedArguments)
        with self.assertRaises(TypeError):
            args.parsed["name"] = "b"  # type: ignore[index]


class TestConstruction(TestCase):
    """argv forms, factory, deferred parse and duplicate declarations."""

    def testShellStringArgv(self):
        args = CommandLineArgs([NAME], [], "--name='hello world'")
        self.assertEqual(args.get_value("name"), "hello world")

    def testProcessArgvByDefault(self):
        with patch.object(sys, "argv", ["tool", "--name=from-argv"]):
            args = CommandLineArgs([NAME], [])
        self.assertEqual(args.get_value("name"), "from-argv")

    def testNonStringTokenRejected(self):
        with self.assertRaises(TypeError):
            CommandLineArgs([NAME], [], ["--name", 5])

    def testBuildFactory(self):
        args = CommandLineArgs.build([NAME], [{"arg": "port", "type": "int", "def": 1}], ["--name=a"])
        self.assertEqual(args.get_value("name"), "a")
        self.assertEqual(args.get_value("port"), 1)

    def testDeferredParse(self):
        args = CommandLineArgs([NAME], [], parse=False)
        with self.assertRaises(RuntimeError):
            args.specified("name")
        args.parse(["--name=later"])
        self.assertEqual(args.get_value("name"), "later")

    def testDeferredParseUsesConstructionArgv(self):
        args = CommandLineArgs([NAME], [], ["--name=stored"], parse=False)
        args.parse()
        self.assertEqual(args.get_value("name"), "stored")

    def testGeneratorDeclarationsSurviveRegister(self):
        args = CommandLineArgs((spec for spec in [NAME]), [], ["--name=a"])
        args.register()
        args.parse()
        self.assertEqual(args.get_value("name"), "a")

    def testDuplicateDeclarationLastWins(self):
        with self.assertWarns(DuplicateArgumentWarning):
            args = CommandLineArgs([NAME], [{"arg": "name", "type": "int", "def": 3}], [])
        self.assertFalse(args.specified("name"))
        self.assertEqual(args.get_value("name"), 3)
        self.assertIs(args.registry.types["name"], Kind.INT)

    def testDuplicateWithinOneListLastWins(self):
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", DuplicateArgumentWarning)
            args = CommandLineArgs([NAME, {"arg": "name", "type": "boolean"}], [], ["--name=t"])
        self.assertIs(args.get_value("name"), True)


if __name__ == '__main__':
    unittest.main()
