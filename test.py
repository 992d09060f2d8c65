#! /usr/bin/env python
import doctest
import io
import os
import time
import unittest
from abc import ABC, abstractmethod
from contextlib import redirect_stderr, redirect_stdout
from unittest import mock

import main
from positional_parse import (
    BOOLEAN,
    BYTE,
    CHAR,
    DEFAULT_REGISTRY,
    DOUBLE,
    FLOAT,
    INTEGER,
    LONG,
    SHORT,
    STRING,
    UNIT,
    Argument,
    ArgumentError,
    ArgumentType,
    ConversionError,
    Empty,
    Error,
    ExceptionError,
    KeyValue,
    MissingArgsStrategy,
    MissingArgumentsError,
    Outcome,
    PositionalParser,
    Sequence,
    UnknownTypeError,
    Value,
    argument,
    argument_types,
    data_structures,
    find_quoted,
    find_token,
    outcome,
    parse,
    parser,
)
from positional_parse.errors import EmptyOutcomeError
from positional_parse.options import MISSING_ARGS_ENV, default_strategy


def load_tests(_, tests, __):
    for mod in [
        argument,
        argument_types,
        data_structures,
        outcome,
        parser,
    ]:
        tests.addTests(doctest.DocTestSuite(mod))
    return tests


class MonadLawTester(ABC):
    @abstractmethod
    def assertEqual(self, a, b):
        raise NotImplementedError

    def f1(self, x):
        unwrapped = self.unwrap(x)
        if isinstance(x, int):
            return self.m(unwrapped + 1)
        else:
            return self.m(unwrapped)

    def f2(self, x):
        unwrapped = self.unwrap(x)
        if isinstance(unwrapped, int):
            return self.m(unwrapped * 2)
        else:
            return self.m(unwrapped)

    @staticmethod
    @abstractmethod
    def m(a):
        raise NotImplementedError

    @staticmethod
    @abstractmethod
    def return_(a):
        raise NotImplementedError

    @staticmethod
    def unwrapped_values():
        return [1]

    @staticmethod
    @abstractmethod
    def wrapped_values():
        raise NotImplementedError

    def test_law1(self):
        for a in self.unwrapped_values():
            x1 = self.return_(a) >= self.f1
            x2 = self.m(self.f1(a))
            self.assertEqual(self.unwrap(x1), self.unwrap(x2))

    def test_law2(self):
        for p in self.wrapped_values():
            p = self.m(p)
            a = p >= self.return_
            self.assertEqual(self.unwrap(a), self.unwrap(p))

    def test_law3(self):
        for p in self.wrapped_values():
            p = self.m(p)
            x1 = p >= (lambda a: self.f1(a) >= self.f2)
            x2 = (p >= self.f1) >= self.f2
            self.assertEqual(self.unwrap(x1), self.unwrap(x2))

    @staticmethod
    @abstractmethod
    def unwrap(x):
        raise NotImplementedError


class TestOutcomeLaws(MonadLawTester, unittest.TestCase):
    @staticmethod
    def m(a):
        return a if isinstance(a, Outcome) else Value(a)

    @staticmethod
    def return_(a):
        return Outcome.return_(a)

    @staticmethod
    def wrapped_values():
        return [Value(1), Value("a"), Empty(), Error(ArgumentError("failed"))]

    @staticmethod
    def unwrap(x):
        return x.get if isinstance(x, Value) else x

    def test_empty_is_identity(self):
        error = Error(ArgumentError("failed"))
        for x in self.wrapped_values() + [error]:
            self.assertEqual(Empty() | x, x)
            self.assertEqual(x | Empty(), x)
        self.assertEqual(Outcome.zero(), Empty())

    def test_value_wins_over_error(self):
        error = Error(ArgumentError("failed"))
        self.assertEqual(error | Value(1), Value(1))
        self.assertEqual(Value(1) + error, Value(1))


class TestOutcome(unittest.TestCase):
    def test_callbacks_run_for_matching_variant_only(self):
        seen = []
        Value(1).on_success(seen.append).on_error(seen.append).on_empty(
            lambda: seen.append("empty")
        )
        Empty().on_success(seen.append).on_empty(lambda: seen.append("empty"))
        cause = ArgumentError("failed")
        Error(cause).on_success(seen.append).on_error(seen.append)
        self.assertEqual(seen, [1, "empty", cause])

    def test_on_error_filters_by_kind(self):
        seen = []
        Error(ValueError("bad")).on_error(seen.append, MissingArgumentsError)
        self.assertEqual(seen, [])

    def test_unwrap(self):
        self.assertEqual(Value(3).unwrap(), 3)
        with self.assertRaises(KeyError):
            Error(KeyError("k")).unwrap()
        with self.assertRaises(EmptyOutcomeError):
            Empty().unwrap()

    def test_attempt(self):
        self.assertEqual(Outcome.attempt(int, "7"), Value(7))
        self.assertIsInstance(Outcome.attempt(int, "seven"), Error)
        self.assertEqual(Outcome.attempt(lambda: Empty()), Empty())

    def test_map_skips_non_values(self):
        self.assertEqual(Empty().map(str), Empty())
        error = Error(ArgumentError("failed"))
        self.assertIs(error.map(str), error)


class TestArgumentTypes(unittest.TestCase):
    def test_integer_ranges(self):
        cases = [
            (BYTE, "127", True),
            (BYTE, "-128", True),
            (BYTE, "128", False),
            (SHORT, "32767", True),
            (SHORT, "32768", False),
            (INTEGER, "2147483647", True),
            (INTEGER, "2147483648", False),
            (LONG, "2147483648", True),
            (LONG, "9223372036854775808", False),
        ]
        for kind, candidate, valid in cases:
            with self.subTest(kind=kind, candidate=candidate):
                self.assertIs(DEFAULT_REGISTRY[kind].validate(candidate), valid)

    def test_integer_syntax(self):
        integer = DEFAULT_REGISTRY[INTEGER]
        self.assertEqual(integer.grab("+5 rest"), Value(5))
        self.assertEqual(integer.grab("-5"), Value(-5))
        self.assertEqual(integer.grab("1_000"), Empty())
        self.assertEqual(integer.grab("1.0"), Empty())
        self.assertEqual(integer.grab(" 5"), Empty())
        self.assertTrue(integer.validate("12\r\n"))

    def test_floating_point(self):
        self.assertEqual(DEFAULT_REGISTRY[DOUBLE].grab("1.5"), Value(1.5))
        self.assertEqual(DEFAULT_REGISTRY[DOUBLE].grab("1e3"), Value(1000.0))
        self.assertTrue(DEFAULT_REGISTRY[DOUBLE].validate("1e50"))
        self.assertFalse(DEFAULT_REGISTRY[FLOAT].validate("1e50"))
        self.assertFalse(DEFAULT_REGISTRY[DOUBLE].validate("one"))
        single = DEFAULT_REGISTRY[FLOAT].grab("0.1").unwrap()
        self.assertNotEqual(single, 0.1)
        self.assertAlmostEqual(single, 0.1, places=6)

    def test_boolean(self):
        boolean = DEFAULT_REGISTRY[BOOLEAN]
        self.assertEqual(boolean.grab("true"), Value(True))
        self.assertEqual(boolean.grab("false\nmore"), Value(False))
        self.assertEqual(boolean.grab("True"), Empty())

    def test_string(self):
        string = DEFAULT_REGISTRY[STRING]
        self.assertEqual(string.grab('""'), Value(""))
        self.assertEqual(string.grab('"say \\"hi\\"" later'), Value('say "hi"'))
        self.assertEqual(string.extract('skip "this" and "that"'), '"this"')
        self.assertEqual(string.extract('"unterminated'), "")

    def test_unterminated_string_scan_is_linear(self):
        text = '"\\' * 200_000
        start = time.perf_counter()
        self.assertEqual(DEFAULT_REGISTRY[STRING].extract(text), "")
        self.assertEqual(parse([Argument("1", STRING)], text).unwrap().to_dict(), {})
        self.assertLess(time.perf_counter() - start, 2.0)

    def test_find_quoted(self):
        self.assertEqual(find_quoted('a "b\\\\" c"'), '"b\\\\"')
        self.assertEqual(find_quoted('\\"x"'), '"x"')
        self.assertEqual(find_quoted("no quotes"), "")
        self.assertEqual(find_quoted('"a\\" b\\"'), "")

    def test_char(self):
        char = DEFAULT_REGISTRY[CHAR]
        self.assertEqual(char.grab("'x' rest"), Value("x"))
        self.assertEqual(char.grab("ab"), Empty())

    def test_unit_never_matches(self):
        self.assertEqual(DEFAULT_REGISTRY[UNIT].extract("anything at all"), "")

    def test_validators_are_total(self):
        inputs = ["", " ", "\r\n", '"', "'", "\\", "nan", "-", "+", "\x00", "٣"]
        for kind in DEFAULT_REGISTRY:
            type_ = DEFAULT_REGISTRY[kind]
            for text in inputs:
                with self.subTest(kind=kind, text=text):
                    type_.validate(text)
                    self.assertIsInstance(type_.extract(text), str)

    def test_register_returns_new_registry(self):
        word = ArgumentType("word", validator=str.isalpha, converter=str.upper)
        registry = DEFAULT_REGISTRY.register(word)
        self.assertIs(registry["word"], word)
        self.assertNotIn("word", DEFAULT_REGISTRY)
        self.assertEqual(len(registry), len(DEFAULT_REGISTRY) + 1)

        replaced = registry.register(ArgumentType(INTEGER, lambda _: True, str))
        self.assertEqual(replaced[INTEGER].grab("abc"), Value("abc"))
        self.assertEqual(len(replaced), len(registry))

    def test_unknown_kind(self):
        with self.assertRaises(UnknownTypeError):
            DEFAULT_REGISTRY["missing"]

    def test_find_token(self):
        self.assertEqual(find_token("a\rb"), "a")
        self.assertEqual(find_token(""), "")


class TestArgument(unittest.TestCase):
    def test_numeric_names_sort_numerically(self):
        names = ["10", "2", "1"]
        arranged = argument.arrange(Argument(name, INTEGER) for name in names)
        self.assertEqual([a.name for a in arranged], ["1", "2", "10"])
        # a plain string sort would put "10" before "2"
        self.assertNotEqual(sorted(names), ["1", "2", "10"])

    def test_explicit_position_wins(self):
        arranged = argument.arrange(
            [
                Argument("reason", STRING, position=1),
                Argument("user", INTEGER, position=0),
                Argument("extra", BOOLEAN),
            ]
        )
        self.assertEqual([a.name for a in arranged], ["user", "reason", "extra"])

    def test_structural_duplicates_are_dropped(self):
        a = Argument("1", INTEGER, required=True)
        arranged = argument.arrange([a, Argument("1", INTEGER, required=True)])
        self.assertEqual(arranged, [a])
        arranged = argument.arrange([a, Argument("1", INTEGER)])
        self.assertEqual(len(arranged), 2)

    def test_very_long_decimal_name(self):
        long_name = "9" * 5000
        arranged = argument.arrange(
            [Argument(long_name, INTEGER), Argument("reason", STRING), Argument("3", INTEGER)]
        )
        self.assertEqual([a.name for a in arranged], ["3", long_name, "reason"])


class TestSequence(unittest.TestCase):
    def test_slicing_keeps_type(self):
        s = Sequence([KeyValue("1", 5), KeyValue("2", True)])
        self.assertEqual(s[1:], Sequence([KeyValue("2", True)]))
        self.assertEqual(s[-1], KeyValue("2", True))

    def test_to_dict_collects_repeated_names(self):
        s = Sequence([KeyValue("a", 1), KeyValue("b", 2), KeyValue("a", 3)])
        self.assertEqual(s.to_dict(), {"a": [1, 3], "b": 2})
        self.assertEqual(Sequence([]).to_dict(), {})


class TestPositionalParser(unittest.TestCase):
    def test_ban_command(self):
        arguments = [
            Argument("1", INTEGER, required=True),
            Argument("3", BOOLEAN),
            Argument("2", STRING),
        ]
        result = parse(arguments, '123 "Being a jerk to everyone" true')
        self.assertEqual(
            list(result.unwrap()),
            [
                KeyValue("1", 123),
                KeyValue("2", "Being a jerk to everyone"),
                KeyValue("3", True),
            ],
        )

    def assertMissing(self, result, *names):
        self.assertIsInstance(result, Error)
        self.assertIsInstance(result.cause, MissingArgumentsError)
        self.assertEqual([a.name for a in result.cause.missing], list(names))

    def test_single_missing_argument(self):
        arguments = [Argument("1", INTEGER, required=True)]
        for strategy in MissingArgsStrategy:
            with self.subTest(strategy=strategy):
                self.assertMissing(parse(arguments, "", strategy), "1")

    def test_quick_stops_at_first_miss(self):
        arguments = [
            Argument("1", INTEGER, required=True),
            Argument("2", INTEGER, required=True),
        ]
        self.assertMissing(parse(arguments, "", MissingArgsStrategy.QUICK), "1")

    def test_thorough_reports_every_miss(self):
        arguments = [
            Argument("1", INTEGER, required=True),
            Argument("2", INTEGER, required=True),
        ]
        result = parse(arguments, "", MissingArgsStrategy.THOROUGH)
        self.assertMissing(result, "1", "2")
        self.assertEqual(
            str(result.cause), "The following arguments are required: 1, 2"
        )

    def test_quick_keeps_scanning_after_optional_miss(self):
        arguments = [
            Argument("1", INTEGER),
            Argument("2", BOOLEAN, required=True),
            Argument("3", INTEGER, required=True),
        ]
        result = parse(arguments, "true", MissingArgsStrategy.QUICK)
        self.assertMissing(result, "3")

    def test_parsed_prefix_is_discarded_on_miss(self):
        arguments = [
            Argument("1", INTEGER, required=True),
            Argument("2", INTEGER, required=True),
        ]
        self.assertMissing(parse(arguments, "5", MissingArgsStrategy.QUICK), "2")

    def test_unterminated_string(self):
        arguments = [Argument("1", STRING, required=True)]
        self.assertMissing(parse(arguments, '"unterminated'), "1")

    def test_duplicate_declarations(self):
        a = Argument("1", INTEGER, required=True)
        result = parse([a, Argument("1", INTEGER, required=True)], "5")
        self.assertEqual(list(result.unwrap()), [KeyValue("1", 5)])

    def test_optional_miss_consumes_nothing(self):
        arguments = [Argument("1", INTEGER), Argument("2", BOOLEAN, required=True)]
        result = parse(arguments, "true")
        self.assertEqual(result.unwrap().to_dict(), {"2": True})

    def test_match_consumes_leading_text(self):
        arguments = [Argument("1", STRING), Argument("2", INTEGER)]
        result = parse(arguments, 'junk "x" 5')
        self.assertEqual(result.unwrap().to_dict(), {"1": "x", "2": 5})

    def test_numeric_name_order(self):
        arguments = [Argument("10", INTEGER), Argument("2", BOOLEAN)]
        result = parse(arguments, "true 7")
        self.assertEqual(list(result.unwrap().keys()), ["2", "10"])
        self.assertEqual(list(result.unwrap().values()), [True, 7])

    def test_empty_conversion_skips_slot(self):
        skip = ArgumentType("skip", validator=lambda _: True, converter=lambda _: Empty())
        registry = DEFAULT_REGISTRY.register(skip)
        arguments = [Argument("1", "skip", required=True), Argument("2", INTEGER)]
        result = PositionalParser(registry).parse(arguments, "ignored 5")
        self.assertEqual(list(result.unwrap()), [KeyValue("2", 5)])

    def test_conversion_failure_aborts(self):
        broken = ArgumentType("broken", validator=lambda _: True, converter=lambda _: 1 / 0)
        registry = DEFAULT_REGISTRY.register(broken)
        arguments = [Argument("1", INTEGER), Argument("2", "broken")]
        result = parse(arguments, "5 x", registry=registry)
        self.assertIsInstance(result, Error)
        cause = result.cause
        self.assertIsInstance(cause, ConversionError)
        self.assertEqual(cause.argument, Argument("2", "broken"))
        self.assertEqual(cause.candidate, "x")
        self.assertIsInstance(cause.exception, ZeroDivisionError)

    def test_raising_finder_is_trapped(self):
        def find(text: str) -> str:
            raise RuntimeError("finder exploded")

        exploding = ArgumentType("exploding", lambda _: True, str, finder=find)
        registry = DEFAULT_REGISTRY.register(exploding)
        result = parse([Argument("1", "exploding")], "x", registry=registry)
        self.assertIsInstance(result, Error)
        self.assertIsInstance(result.cause, ExceptionError)
        self.assertIsInstance(result.cause.exception, RuntimeError)

    def test_unknown_type_is_reported(self):
        result = parse([Argument("1", "nope")], "x")
        self.assertIsInstance(result, Error)
        self.assertIsInstance(result.cause, UnknownTypeError)
        self.assertEqual(result.cause.kind, "nope")

    def test_required_unit_is_missing(self):
        self.assertMissing(parse([Argument("1", UNIT, required=True)], "x"), "1")

    def test_default_strategy_from_environment(self):
        arguments = [
            Argument("1", INTEGER, required=True),
            Argument("2", INTEGER, required=True),
        ]
        with mock.patch.dict(os.environ, {MISSING_ARGS_ENV: "Quick"}):
            self.assertIs(default_strategy(), MissingArgsStrategy.QUICK)
            self.assertMissing(parse(arguments, ""), "1")
        with mock.patch.dict(os.environ, {MISSING_ARGS_ENV: "bogus"}):
            with self.assertRaises(ValueError):
                default_strategy()
        with mock.patch.dict(os.environ, clear=True):
            self.assertIs(default_strategy(), MissingArgsStrategy.THOROUGH)

    def test_bad_strategy_environment_is_reported(self):
        with mock.patch.dict(os.environ, {MISSING_ARGS_ENV: "bogus"}):
            result = parse([Argument("1", INTEGER, required=True)], "5")
        self.assertIsInstance(result, Error)
        self.assertIsInstance(result.cause, ExceptionError)
        self.assertIsInstance(result.cause.exception, ValueError)

    def test_consumes_across_line_breaks(self):
        arguments = [Argument("1", INTEGER), Argument("2", BOOLEAN)]
        result = parse(arguments, "5\r\n\n  true")
        self.assertEqual(result.unwrap().to_dict(), {"1": 5, "2": True})

    def test_logs_slot_decisions(self):
        arguments = [Argument("1", INTEGER, required=True), Argument("2", BOOLEAN)]
        with self.assertLogs("positional_parse.parser", level="DEBUG") as logs:
            parse(arguments, "5", MissingArgsStrategy.THOROUGH)
        self.assertTrue(any("matched '5'" in line for line in logs.output))


class TestMain(unittest.TestCase):
    def run_main(self, *args):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            status = main.main(*args)
        return status, out.getvalue(), err.getvalue()

    def test_example(self):
        status, out, _ = self.run_main()
        self.assertEqual(status, 0)
        self.assertEqual(
            out.strip(), "{'1': 123, '2': 'Being a jerk to everyone', '3': True}"
        )

    def test_missing_user(self):
        status, _, err = self.run_main("--quick", '"no", "user"')
        self.assertEqual(status, 1)
        self.assertEqual(err.strip(), "The following arguments are required: 1")


if __name__ == "__main__":
    unittest.main()
