"""
Parser module behavioral tests (token scan, coercion, binding and outcomes).

Scope
- Validate long, short, bundled and '=value' option spellings.
- Validate the '--' terminator and lookahead for option values.
- Validate value coercion, choices and positional binding (variadic included).
- Validate error accumulation order and suggestions for unknown options.
- Validate outcome value semantics and parse purity.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (parse, is_option_token, definitions).
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argot import (
    ArgumentDefinition,
    CommandDefinition,
    OptionDefinition,
    ParseErrorKind,
    ParseFailure,
    ParseOutcome,
    ParseSuccess,
    is_option_token,
    parse,
    validate,
)


def build():
    command = CommandDefinition(
        "build",
        "Bundle an entry point",
        options=[
            OptionDefinition("output", short="o", required=True),
            OptionDefinition("count", type="number", default=1),
            OptionDefinition("force", short="f", type="boolean"),
            OptionDefinition("verbose", short="v", type="boolean"),
        ],
        arguments=[
            ArgumentDefinition("entry", required=True),
            ArgumentDefinition("extras", variadic=True),
        ],
    )
    validate(command)
    return command


class TestParseOptions(TestCase):
    """Behavioral tests for option spellings and values."""

    def setUp(self):
        self.command = build()

    def parseOk(self, *tokens):
        outcome = parse(tokens, self.command)
        self.assertIsInstance(outcome, ParseSuccess, outcome)
        return outcome

    def parseKinds(self, *tokens):
        outcome = parse(tokens, self.command)
        self.assertIsInstance(outcome, ParseFailure, outcome)
        return outcome.kinds()

    def testMixedCommandLine(self):
        outcome = self.parseOk("--output", "dist", "entry.ts", "--count", "2", "-vf", "extra1", "extra2")
        self.assertEqual(dict(outcome.options), {"output": "dist", "count": 2, "force": True, "verbose": True})
        self.assertEqual(dict(outcome.args), {"entry": "entry.ts", "extras": ["extra1", "extra2"]})

    def testDefaultsApplied(self):
        outcome = self.parseOk("-o", "dist", "entry")
        self.assertEqual(dict(outcome.options), {"output": "dist", "count": 1, "force": False, "verbose": False})
        self.assertEqual(outcome.args["extras"], [])

    def testAttachedValues(self):
        self.assertEqual(self.parseOk("--output=dist", "e").options["output"], "dist")
        self.assertEqual(self.parseOk("-o=dist", "e").options["output"], "dist")
        self.assertEqual(self.parseOk("--output=", "e").options["output"], "")
        self.assertEqual(self.parseOk("--output=a=b", "e").options["output"], "a=b")

    def testLastOccurrenceWins(self):
        self.assertEqual(self.parseOk("-o", "a", "--output", "b", "e").options["output"], "b")

    def testNumberValues(self):
        self.assertEqual(self.parseOk("-o", "d", "--count=2.5", "e").options["count"], 2.5)
        self.assertEqual(self.parseOk("-o", "d", "--count", "-3", "e").options["count"], -3)

    def testInvalidNumber(self):
        outcome = parse(["-o", "d", "--count", "abc", "e"], self.command)
        self.assertEqual(outcome.kinds(), [ParseErrorKind.INVALID_OPTION_VALUE])
        self.assertIn("expected number", outcome.errors[0].message)
        self.assertEqual(self.parseKinds("-o", "d", "--count=nan", "e"), [ParseErrorKind.INVALID_OPTION_VALUE])

    def testNumberTokensMustBeAsciiLiterals(self):
        for raw in ("1_000", "1_0.5", "\u0663"):
            with self.subTest(raw=raw):
                outcome = parse(["-o", "d", "--count", raw, "e"], self.command)
                self.assertEqual(outcome.kinds(), [ParseErrorKind.INVALID_OPTION_VALUE])

    def testLongIntegerToken(self):
        self.assertEqual(self.parseOk("-o", "d", "--count", "9" * 5000, "e").options["count"], 10 ** 5000 - 1)

    def testLongBooleanWithValue(self):
        self.assertFalse(self.parseOk("--force=false", "-o", "d", "e").options["force"])
        self.assertTrue(self.parseOk("--force=true", "-o", "d", "e").options["force"])
        self.assertEqual(self.parseKinds("--force=yes", "-o", "d", "e"), [ParseErrorKind.INVALID_OPTION_VALUE])

    def testShortBooleanIgnoresAttachedValue(self):
        self.assertTrue(self.parseOk("-f=false", "-o", "d", "e").options["force"])

    def testBooleanDoesNotConsumeNextToken(self):
        outcome = self.parseOk("--force", "entry", "-o", "d")
        self.assertEqual(outcome.args["entry"], "entry")

    def testUnrecognizedDashTokenIsAValue(self):
        self.assertEqual(self.parseOk("--output", "-x", "e").options["output"], "-x")

    def testMissingValueAtEnd(self):
        self.assertEqual(self.parseKinds("e", "-o"), [
            ParseErrorKind.MISSING_OPTION_VALUE,
            ParseErrorKind.MISSING_REQUIRED_OPTION,
        ])

    def testMissingValueBeforeKnownOption(self):
        outcome = parse(["--output", "--force", "e"], self.command)
        self.assertEqual(outcome.kinds(), [
            ParseErrorKind.MISSING_OPTION_VALUE,
            ParseErrorKind.MISSING_REQUIRED_OPTION,
        ])
        self.assertEqual(outcome.errors[0].details["option"], "--output")

    def testMissingValueBeforeTerminator(self):
        self.assertEqual(self.parseKinds("--output", "--", "e"), [
            ParseErrorKind.MISSING_OPTION_VALUE,
            ParseErrorKind.MISSING_REQUIRED_OPTION,
        ])

    def testBundle(self):
        outcome = self.parseOk("-fv", "-o", "d", "e")
        self.assertTrue(outcome.options["force"])
        self.assertTrue(outcome.options["verbose"])

    def testBundleWithValueTakingOption(self):
        for bundle in ("-ov", "-vo"):
            with self.subTest(bundle=bundle):
                self.assertIn(ParseErrorKind.INVALID_OPTION_BUNDLE, self.parseKinds(bundle, "d", "e"))

    def testBundleWithAttachedValue(self):
        self.assertEqual(self.parseKinds("-vf=x", "-o", "d", "e"), [ParseErrorKind.INVALID_OPTION_BUNDLE])

    def testBundleWithUnknownMember(self):
        self.assertEqual(self.parseKinds("-vx", "-o", "d", "e"), [ParseErrorKind.UNKNOWN_OPTION])


class TestUnknownOptions(TestCase):
    """Behavioral tests for unknown options and their suggestions."""

    def setUp(self):
        self.command = build()

    def testLongSuggestion(self):
        outcome = parse(["--outpt", "dist", "e"], self.command)
        error = outcome.errors[0]
        self.assertIs(error.kind, ParseErrorKind.UNKNOWN_OPTION)
        self.assertEqual(error.message, "unknown option '--outpt', did you mean '--output'?")
        self.assertEqual(error.details["suggestion"], "--output")
        self.assertEqual(error.details["token"], "--outpt")

    def testLongSuggestionIgnoresAttachedValue(self):
        error = parse(["--outptu=dist", "e"], self.command).errors[0]
        self.assertEqual(error.details["token"], "--outptu")
        self.assertEqual(error.details["suggestion"], "--output")

    def testShortSuggestion(self):
        error = parse(["-x", "-o", "d", "e"], self.command).errors[0]
        self.assertEqual(error.details["suggestion"], "-o")

    def testNoSuggestion(self):
        error = parse(["--bogus", "-o", "d", "e"], self.command).errors[0]
        self.assertEqual(error.message, "unknown option '--bogus'")
        self.assertNotIn("suggestion", error.details)

    def testNegativeNumberIsAnOption(self):
        self.assertEqual(parse(["-5", "-o", "d", "e"], self.command).kinds(), [ParseErrorKind.UNKNOWN_OPTION])

    def testErrorsAccumulateInOrder(self):
        outcome = parse(["--bogus", "-ov", "--count", "x"], self.command)
        self.assertEqual(outcome.kinds(), [
            ParseErrorKind.UNKNOWN_OPTION,
            ParseErrorKind.INVALID_OPTION_BUNDLE,
            ParseErrorKind.INVALID_OPTION_VALUE,
            ParseErrorKind.MISSING_REQUIRED_OPTION,
            ParseErrorKind.MISSING_REQUIRED_ARGUMENT,
        ])


class TestTerminator(TestCase):
    """Behavioral tests for the '--' terminator."""

    def setUp(self):
        self.command = build()

    def testTokensAfterTerminatorArePositional(self):
        outcome = parse(["-o", "dist", "entry", "--", "--not-an-option", "-v", "--"], self.command)
        self.assertEqual(outcome.args["extras"], ["--not-an-option", "-v", "--"])
        self.assertFalse(outcome.options["verbose"])

    def testLoneDashIsPositional(self):
        self.assertEqual(parse(["-o", "d", "-"], self.command).args["entry"], "-")


class TestArguments(TestCase):
    """Behavioral tests for positional binding."""

    def testMissingRequiredOptionAndArgument(self):
        self.assertEqual(parse([], build()).kinds(), [
            ParseErrorKind.MISSING_REQUIRED_OPTION,
            ParseErrorKind.MISSING_REQUIRED_ARGUMENT,
        ])

    def testTooManyArguments(self):
        command = CommandDefinition("copy", arguments=[ArgumentDefinition("source", required=True),
                                                       ArgumentDefinition("target")])
        outcome = parse(["x", "y", "z", "w"], command)
        self.assertEqual(outcome.kinds(), [ParseErrorKind.TOO_MANY_ARGUMENTS])
        self.assertEqual(outcome.errors[0].message, "too many arguments: 'z', 'w'")
        self.assertEqual(outcome.errors[0].details["tokens"], ("z", "w"))

    def testNoArgumentsDeclared(self):
        self.assertEqual(parse(["x"], CommandDefinition("noop")).kinds(), [ParseErrorKind.TOO_MANY_ARGUMENTS])

    def testOptionalArgumentWithoutDefaultIsNone(self):
        command = CommandDefinition("copy", arguments=[ArgumentDefinition("source")])
        self.assertEqual(dict(parse([], command).args), {"source": None})

    def testOptionalArgumentDefault(self):
        command = CommandDefinition("copy", arguments=[ArgumentDefinition("source", default=".")])
        self.assertEqual(parse([], command).args["source"], ".")

    def testArgumentCoercion(self):
        command = CommandDefinition("sum", arguments=[ArgumentDefinition("values", type="number", variadic=True)])
        self.assertEqual(parse(["1", "2.5"], command).args["values"], [1, 2.5])

        outcome = parse(["1", "x", "3"], command)
        self.assertEqual(outcome.kinds(), [ParseErrorKind.INVALID_ARGUMENT_VALUE])
        self.assertEqual(outcome.errors[0].details["token"], "x")

    def testRequiredVariadic(self):
        command = CommandDefinition("rm", arguments=[ArgumentDefinition("files", required=True, variadic=True)])
        self.assertEqual(parse([], command).kinds(), [ParseErrorKind.MISSING_REQUIRED_ARGUMENT])
        self.assertEqual(parse(["a", "b"], command).args["files"], ["a", "b"])

    def testArgumentChoices(self):
        command = CommandDefinition("run", arguments=[ArgumentDefinition("mode", choices=["fast", "safe"])])
        self.assertEqual(parse(["fast"], command).args["mode"], "fast")

        outcome = parse(["slow"], command)
        self.assertEqual(outcome.kinds(), [ParseErrorKind.INVALID_ARGUMENT_VALUE])
        self.assertEqual(outcome.errors[0].message, "invalid value 'slow' for argument 'mode' (choices: 'fast', 'safe')")


class TestChoicesAndDefaults(TestCase):
    """Behavioral tests for option choices and default handling."""

    def testOptionChoices(self):
        command = CommandDefinition("run", options=[OptionDefinition("mode", choices=("fast", "safe"))])
        self.assertEqual(parse(["--mode", "safe"], command).options["mode"], "safe")

        outcome = parse(["--mode=slow"], command)
        self.assertEqual(outcome.kinds(), [ParseErrorKind.INVALID_OPTION_VALUE])
        self.assertIn("choices: 'fast', 'safe'", outcome.errors[0].message)

    def testRepeatedChoices(self):
        command = CommandDefinition("run", options=[OptionDefinition("mode", choices=["fast", "fast"])])
        validate(command)
        self.assertEqual(parse(["--mode=fast"], command).options["mode"], "fast")

    def testNumberChoicesCompareByValue(self):
        command = CommandDefinition("run", options=[OptionDefinition("level", type="number", choices=(1, 2))])
        self.assertEqual(parse(["--level=2.0"], command).options["level"], 2.0)
        self.assertFalse(parse(["--level=3"], command))

    def testOptionWithoutValueOrDefaultIsAbsent(self):
        command = CommandDefinition("run", options=[OptionDefinition("mode")])
        self.assertNotIn("mode", parse([], command).options)

    def testNoneDefaultIsPresent(self):
        command = CommandDefinition("run", options=[OptionDefinition("mode", default=None)])
        self.assertIsNone(parse([], command).options["mode"])

    def testDefaultsAreNotShared(self):
        command = CommandDefinition(
            "run",
            options=[OptionDefinition("tags", default=["a"])],
            arguments=[ArgumentDefinition("files", variadic=True, default=["x", "y"])],
        )
        first = parse([], command)
        first.options["tags"].append("b")
        first.args["files"].append("z")

        second = parse([], command)
        self.assertEqual(second.options["tags"], ["a"])
        self.assertEqual(second.args["files"], ["x", "y"])


class TestOutcome(TestCase):
    """Behavioral tests for outcome value semantics and purity."""

    def testTruthiness(self):
        command = build()
        self.assertTrue(parse(["-o", "d", "e"], command))
        self.assertFalse(parse([], command))
        self.assertTrue(parse(["-o", "d", "e"], command).ok)
        self.assertFalse(parse([], command).ok)

    def testBaseOutcomeIsFalsy(self):
        self.assertIs(bool(ParseOutcome()), False)

    def testParseIsPure(self):
        command = build()
        for tokens in (["-o", "d", "e", "x"], ["--bogus", "-ov"], []):
            with self.subTest(tokens=tokens):
                self.assertEqual(parse(tokens, command), parse(tokens, command))

    def testDifferentOutcomesDiffer(self):
        command = build()
        self.assertNotEqual(parse(["-o", "a", "e"], command), parse(["-o", "b", "e"], command))
        self.assertNotEqual(parse(["-o", "a", "e"], command), parse([], command))

    def testResultsAreReadOnly(self):
        outcome = parse(["-o", "d", "e"], build())
        with self.assertRaises(TypeError):
            outcome.options["output"] = "other"
        with self.assertRaises(TypeError):
            outcome.args["entry"] = "other"

    def testAcceptsAnyIterable(self):
        self.assertTrue(parse(iter(["-o", "d", "e"]), build()))

    def testRejectsNonStringTokens(self):
        with self.assertRaises(TypeError):
            parse(["-o", 3], build())

    def testRejectsNonCommand(self):
        with self.assertRaises(TypeError):
            parse([], "build")


class TestIsOptionToken(TestCase):
    """Behavioral tests for the lookahead classifier."""

    def testRecognized(self):
        command = build()
        for token in ("--output", "--output=x", "-o", "-o=x", "-ox", "--force"):
            with self.subTest(token=token):
                self.assertTrue(is_option_token(token, command))

    def testNotRecognized(self):
        command = build()
        for token in ("--nope", "-x", "value", "-", "--", "", "--out"):
            with self.subTest(token=token):
                self.assertFalse(is_option_token(token, command))


if __name__ == "__main__":
    unittest.main()
