# python
"""
Parsers module behavioral tests.

Scope
- Validate long options: exact names, unambiguous prefixes, "=value" and
  next-token arguments.
- Validate short clusters, attached arguments and the "--" boundary.
- Validate ordering modes, fault codes and unrecognized-option handlers.
- Validate help output helpers on the parser.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import io
import pickle
import sys
import types
import unittest
import warnings
from unittest import TestCase, mock

from rich.console import Console

from getopts import (
    DuplicateNameWarning,
    FaultCode,
    Mode,
    Option,
    ParseError,
    Parser,
    append,
    format_help,
    store,
    store_or,
    store_true,
)


class ParserTestCase(TestCase):
    """Shared fixture: a compiler-like option table."""

    def setUp(self):
        self.config = types.SimpleNamespace(verbose=False, output="", input="", count=0, libdirs=[], files=[])
        self.options = [
            Option("-v", "--verbose", action=store_true(self.config, "verbose"), descr="chatty output"),
            Option("-o", "--output", arity="optional", action=store_or(self.config, "output", "stdout"),
                   metavar="FILE", descr="output FILE"),
            Option("-c", arity="optional", action=store_or(self.config, "input", "stdin"), metavar="FILE"),
            Option("-n", "--count", arity="required", action=store(self.config, "count")),
            Option("-L", "--libdir", arity="required", action=append(self.config.libdirs), metavar="DIR"),
        ]
        self.parser = self.build()

    def build(self, **options):
        return Parser(self.options, append(self.config.files), **options)


class TestLongOptions(ParserTestCase):
    """Behavioral tests for "--name[=value]" tokens."""

    def testExactNames(self):
        self.parser.run(["--verbose", "--count=5"])
        self.assertTrue(self.config.verbose)
        self.assertEqual(self.config.count, 5)

    def testRequiredTakesNextToken(self):
        self.parser.run(["--libdir", "/usr/lib", "--count", "3"])
        self.assertEqual(self.config.libdirs, ["/usr/lib"])
        self.assertEqual(self.config.count, 3)

    def testRequiredTakesNextTokenEvenIfItLooksLikeAnOption(self):
        self.parser.run(["--libdir", "-v"])
        self.assertEqual(self.config.libdirs, ["-v"])
        self.assertFalse(self.config.verbose)

    def testRequiredAcceptsEmptyValue(self):
        self.parser.run(["--libdir="])
        self.assertEqual(self.config.libdirs, [""])

    def testValueKeepsEqualSigns(self):
        self.parser.run(["--libdir=a=b"])
        self.assertEqual(self.config.libdirs, ["a=b"])

    def testOptionalNeverTakesNextToken(self):
        self.parser.run(["--output", "out.txt"])
        self.assertEqual(self.config.output, "stdout")
        self.assertEqual(self.config.files, ["out.txt"])

    def testOptionalWithValue(self):
        self.parser.run(["--output=out.txt"])
        self.assertEqual(self.config.output, "out.txt")

    def testUniquePrefixResolves(self):
        self.parser.run(["--verb", "--lib", "a", "--out=b"])
        self.assertTrue(self.config.verbose)
        self.assertEqual(self.config.libdirs, ["a"])
        self.assertEqual(self.config.output, "b")

    def testMissingRequiredArgument(self):
        with self.assertRaises(ParseError) as caught:
            self.parser.run(["--libdir"])
        self.assertEqual(str(caught.exception), "argument required: --libdir")
        self.assertIs(caught.exception.code, FaultCode.ARGUMENT_REQUIRED)

    def testArgumentNotAllowed(self):
        with self.assertRaises(ParseError) as caught:
            self.parser.run(["--verbose=1"])
        self.assertEqual(str(caught.exception), "argument not allowed: --verbose")
        self.assertIs(caught.exception.code, FaultCode.ARGUMENT_NOT_ALLOWED)
        self.assertEqual(caught.exception.options["value"], "1")
        self.assertFalse(self.config.verbose)

    def testInvalidValue(self):
        with self.assertRaises(ParseError) as caught:
            self.parser.run(["--count=many"])
        self.assertEqual(str(caught.exception), "invalid value: many")
        self.assertIs(caught.exception.code, FaultCode.INVALID_VALUE)


class TestLongMatching(TestCase):
    """Behavioral tests for exact and prefix resolution across options."""

    def setUp(self):
        self.seen = []
        self.parser = Parser([
            Option("--help", action=lambda: self.seen.append("help")),
            Option("--hello", action=lambda: self.seen.append("hello")),
        ])

    def testExactWins(self):
        self.parser.run(["--help"])
        self.assertEqual(self.seen, ["help"])

    def testPrefixOfTwoOptionsIsAmbiguous(self):
        for token in ("--he", "--hel"):
            with self.subTest(token=token), self.assertRaises(ParseError) as caught:
                self.parser.run([token])
            self.assertEqual(str(caught.exception), "ambiguous option: %s" % token)
            self.assertIs(caught.exception.code, FaultCode.AMBIGUOUS_OPTION)
            self.assertEqual(len(caught.exception.options["candidates"]), 2)
        self.assertEqual(self.seen, [])

    def testPrefixOfOneOptionResolves(self):
        self.parser.run(["--hell"])
        self.assertEqual(self.seen, ["hello"])

    def testNoMatchIsUnrecognized(self):
        with self.assertRaises(ParseError) as caught:
            self.parser.run(["--hells"])
        self.assertEqual(str(caught.exception), "unrecognized option: --hells")
        self.assertIs(caught.exception.code, FaultCode.UNRECOGNIZED_OPTION)

    def testExactBeatsEarlierPrefix(self):
        seen = []
        parser = Parser([
            Option("--helper", action=lambda: seen.append("helper")),
            Option("--help", action=lambda: seen.append("help")),
        ])
        parser.run(["--help"])
        self.assertEqual(seen, ["help"])

    def testDuplicateLongNameWarnsAndIsAmbiguous(self):
        with self.assertWarns(DuplicateNameWarning):
            parser = Parser([Option("--dup"), Option("--dup")])
        with self.assertRaises(ParseError) as caught:
            parser.run(["--dup"])
        self.assertIs(caught.exception.code, FaultCode.AMBIGUOUS_OPTION)

    def testDistinctNamesDoNotWarn(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error", DuplicateNameWarning)
            Parser([Option("-a", "--all"), Option("-b", "--almost")])


class TestShortOptions(ParserTestCase):
    """Behavioral tests for "-abc" clusters."""

    def testClusterOfFlagsAndOptional(self):
        self.parser.run(["-vo"])
        self.assertTrue(self.config.verbose)
        self.assertEqual(self.config.output, "stdout")

    def testOptionalConsumesRestOfCluster(self):
        self.parser.run(["-ofile", "-cv"])
        self.assertEqual(self.config.output, "file")
        self.assertEqual(self.config.input, "v")
        self.assertFalse(self.config.verbose)

    def testOptionalNeverTakesNextToken(self):
        self.parser.run(["-o", "file"])
        self.assertEqual(self.config.output, "stdout")
        self.assertEqual(self.config.files, ["file"])

    def testRequiredAttachedAndSeparate(self):
        self.parser.run(["-L/opt", "-L", "/usr/lib", "-vL", "lib"])
        self.assertEqual(self.config.libdirs, ["/opt", "/usr/lib", "lib"])
        self.assertTrue(self.config.verbose)

    def testMissingRequiredArgument(self):
        with self.assertRaises(ParseError) as caught:
            self.parser.run(["-vL"])
        self.assertEqual(str(caught.exception), "argument required: -L")
        self.assertIs(caught.exception.code, FaultCode.ARGUMENT_REQUIRED)
        self.assertTrue(self.config.verbose)

    def testUnknownCharacterStopsCluster(self):
        with self.assertRaises(ParseError) as caught:
            self.parser.run(["-vxo"])
        self.assertEqual(str(caught.exception), "unrecognized option: -xo")
        self.assertTrue(self.config.verbose)
        self.assertEqual(self.config.output, "")

    def testDuplicateShortNameIsAmbiguous(self):
        with self.assertWarns(DuplicateNameWarning):
            parser = Parser([Option("-x"), Option("-x")])
        with self.assertRaises(ParseError) as caught:
            parser.run(["-x"])
        self.assertEqual(str(caught.exception), "ambiguous option: -x")

    def testSingleDashIsNonOption(self):
        self.parser.run(["-"])
        self.assertEqual(self.config.files, ["-"])


class TestNonOptions(ParserTestCase):
    """Behavioral tests for non-option tokens and ordering modes."""

    def testInterleavedByDefault(self):
        self.parser.run(["a", "-v", "b"])
        self.assertEqual(self.config.files, ["a", "b"])
        self.assertTrue(self.config.verbose)

    def testDoubleDashEndsOptions(self):
        self.parser.run(["a", "--", "-v", "--output", "--"])
        self.assertEqual(self.config.files, ["a", "-v", "--output", "--"])
        self.assertFalse(self.config.verbose)

    def testPosixlyCorrectStopsAtFirstNonOption(self):
        parser = self.build(mode="posixly-correct")
        self.assertIs(parser.mode, Mode.POSIXLY_CORRECT)
        parser.run(["-v", "a", "-o", "b"])
        self.assertTrue(self.config.verbose)
        self.assertEqual(self.config.output, "")
        self.assertEqual(self.config.files, ["a", "-o", "b"])

    def testUnknownModeRejected(self):
        with self.assertRaises(ValueError):
            self.build(mode="gnu")

    def testDefaultHandlerIgnoresNonOptions(self):
        Parser(self.options).run(["a", "-v"])
        self.assertTrue(self.config.verbose)
        self.assertEqual(self.config.files, [])


class TestUnrecognizedOptions(ParserTestCase):
    """Behavioral tests for the unrecognized-option handler."""

    def testDefaultHandlerRaises(self):
        for token in ("--nope", "--nope=3", "-x", "--=x"):
            with self.subTest(token=token), self.assertRaises(ParseError) as caught:
                self.parser.run([token])
            self.assertEqual(str(caught.exception), "unrecognized option: %s" % token)
            self.assertEqual(caught.exception.options["token"], token)

    def testCustomHandlerContinues(self):
        unknown = []
        parser = Parser(self.options, append(self.config.files), append(unknown))
        parser.run(["-vxo", "--nope", "f", "-o"])
        self.assertEqual(unknown, ["-xo", "--nope"])
        self.assertEqual(self.config.files, ["f"])
        self.assertEqual(self.config.output, "stdout")


class TestRun(ParserTestCase):
    """Behavioral tests for argument vectors and repeated runs."""

    def testEffectsBeforeErrorPersist(self):
        with self.assertRaises(ParseError):
            self.parser.run(["-v", "-L", "a", "--libdir"])
        self.assertTrue(self.config.verbose)
        self.assertEqual(self.config.libdirs, ["a"])

    def testRunsAccumulateIntoCallerState(self):
        self.parser.run(["-La", "x"])
        self.parser.run(["-Lb", "y"])
        self.assertEqual(self.config.libdirs, ["a", "b"])
        self.assertEqual(self.config.files, ["x", "y"])

    def testTwoParsersProduceIdenticalEffects(self):
        def table(config):
            return Parser([
                Option("-v", "--verbose", action=store_true(config, "verbose")),
                Option("-o", "--output", arity="optional", action=store_or(config, "output", "stdout")),
                Option("-n", "--count", arity="required", action=store(config, "count")),
            ], append(config.files))

        first = types.SimpleNamespace(verbose=False, output="", count=0, files=[])
        second = types.SimpleNamespace(verbose=False, output="", count=0, files=[])
        argv = ["-vo", "--count=3", "x", "--", "-n"]
        table(first).run(argv)
        table(second).run(argv)
        self.assertEqual(vars(first), vars(second))
        self.assertEqual(vars(first), {"verbose": True, "output": "stdout", "count": 3, "files": ["x", "-n"]})

    def testEmptyVector(self):
        self.parser.run([])
        self.assertEqual(self.config.files, [])

    def testStringIsSplitLikeAShell(self):
        self.parser.run("-v 'a b' --count=2")
        self.assertEqual(self.config.files, ["a b"])
        self.assertEqual(self.config.count, 2)

    def testDefaultsToProcessArguments(self):
        with mock.patch.object(sys, "argv", ["prog", "-v", "main.c"]):
            self.parser.run()
        self.assertTrue(self.config.verbose)
        self.assertEqual(self.config.files, ["main.c"])

    def testTupleVector(self):
        self.parser.run(("-v",))
        self.assertTrue(self.config.verbose)

    def testRejectsNonStringTokens(self):
        with self.assertRaises(TypeError):
            self.parser.run(["-v", 1])
        with self.assertRaises(TypeError):
            self.parser.run(5)


class TestRaisedErrors(TestCase):
    """Behavioral tests for the context carried by parser-raised errors."""

    def setUp(self):
        self.parser = Parser([
            Option("-L", "--libdir", arity="required", action=lambda text: None),
            Option("--lines", action=lambda: None),
            Option("-q", action=lambda: None),
        ])

    def raised(self, *argv):
        with self.assertRaises(ParseError) as caught:
            self.parser.run(list(argv))
        return caught.exception

    def testContextNamesOptions(self):
        self.assertEqual(self.raised("-L").options["option"], "option '-L/--libdir'")
        self.assertEqual(self.raised("--lines=2").options["option"], "option '--lines'")
        self.assertEqual(self.raised("--li").options["candidates"], ("option '-L/--libdir'", "option '--lines'"))

    def testErrorsWithLambdaActionsPickle(self):
        for argv in (["-L"], ["--lines=2"], ["--li"], ["-x"]):
            with self.subTest(argv=argv):
                error = self.raised(*argv)
                copy = pickle.loads(pickle.dumps(error))
                self.assertEqual(str(copy), str(error))
                self.assertIs(copy.code, error.code)
                self.assertEqual(dict(copy.options), dict(error.options))


class TestParserDeclaration(TestCase):
    """Behavioral tests for Parser construction."""

    def testOptionsMustBeOptions(self):
        with self.assertRaises(TypeError):
            Parser([object()])
        with self.assertRaises(TypeError):
            Parser(None)

    def testHandlersMustAcceptOneArgument(self):
        with self.assertRaises(TypeError):
            Parser([], 1)
        with self.assertRaises(TypeError):
            Parser([], lambda: None)
        with self.assertRaises(TypeError):
            Parser([], unrecognized=lambda: None)

    def testOptionsAreKeptInOrder(self):
        options = [Option("-b"), Option("-a")]
        self.assertEqual(Parser(options).options, tuple(options))


class TestParserHelp(ParserTestCase):
    """Behavioral tests for Parser.help and Parser.print_help."""

    def testHelpIsPlainLayout(self):
        self.assertEqual(self.parser.help("Options"), format_help("Options", self.options))

    def testPrintHelpWritesToConsole(self):
        stream = io.StringIO()
        self.parser.print_help("Options", console=Console(file=stream, width=120), colorful=False)
        output = stream.getvalue()
        self.assertTrue(output.startswith("Options\n"))
        self.assertIn("--output[=FILE]", output)
        self.assertIn("-L DIR", output)

    def testPrintHelpFancyPanel(self):
        stream = io.StringIO()
        self.parser.print_help("Options", console=Console(file=stream, width=120), fancy=True)
        self.assertIn("HELP", stream.getvalue())
        self.assertIn("--libdir=DIR", stream.getvalue())


if __name__ == "__main__":
    unittest.main()
