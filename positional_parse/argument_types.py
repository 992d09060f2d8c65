"""
Defines :py:class:`ArgumentType <positional_parse.argument_types.ArgumentType>`, the extraction rule,
validator and converter for one kind of value, and the
:py:class:`TypeRegistry <positional_parse.argument_types.TypeRegistry>` that the parser looks kinds up in.
"""
from __future__ import annotations

import re
import struct
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Generic, Iterator, Mapping, TypeVar

from positional_parse.errors import UnknownTypeError
from positional_parse.outcome import Outcome

A_co = TypeVar("A_co", covariant=True)

Finder = Callable[[str], str]

INTEGER = "integer"
LONG = "long"
SHORT = "short"
BYTE = "byte"
DOUBLE = "double"
FLOAT = "float"
BOOLEAN = "boolean"
STRING = "string"
CHAR = "char"
UNIT = "unit"

_DELIMITER = re.compile(r"[ \r\n]")
_DECIMAL = re.compile(r"[+-]?[0-9]+")
_ESCAPE = re.compile(r'\\(["\\])')


def find_token(text: str) -> str:
    """
    Everything up to the first space, carriage return or line feed.

    >>> find_token("123 rest")
    '123'
    >>> find_token("123")
    '123'
    >>> find_token(" 123")
    ''
    """
    match = _DELIMITER.search(text)
    return text if match is None else text[: match.start()]


def find_fixed(width: int) -> Finder:
    """
    >>> find_fixed(3)("'a' rest")
    "'a'"
    >>> find_fixed(3)("ab")
    ''
    """

    def find(text: str) -> str:
        return text[:width] if len(text) >= width else ""

    return find


def find_pattern(pattern: str) -> Finder:
    """
    The first match anywhere in the text.

    >>> find_pattern(r"<@[0-9]+>")("ban <@123> now")
    '<@123>'
    >>> find_pattern(r"<@[0-9]+>")("ban 123 now")
    ''
    """
    regex = re.compile(pattern)

    def find(text: str) -> str:
        match = regex.search(text)
        return "" if match is None else match.group(0)

    return find


def find_quoted(text: str) -> str:
    """
    The first double-quoted run in the text. A backslash escapes the character after it.

    >>> find_quoted('ban "a \\\\"quoted\\\\" reason" now')
    '"a \\\\"quoted\\\\" reason"'
    >>> find_quoted('""')
    '""'
    >>> find_quoted('"unterminated')
    ''
    """
    start = text.find('"')
    if start == -1:
        return ""
    escaped = False
    for end in range(start + 1, len(text)):
        c = text[end]
        if escaped:
            escaped = False
        elif c == "\\":
            escaped = True
        elif c == '"':
            return text[start : end + 1]
    # every later quote was escaped, so none of them can open a match either
    return ""


def find_nothing(text: str) -> str:
    return ""


@dataclass(frozen=True)
class ArgumentType(Generic[A_co]):
    """
    Parameters
    ----------
    name : str
        The kind this type is registered under.
    validator : Callable[[str], bool]
        Returns true if a candidate can be converted. Must not raise.
    converter : Callable[[str], A_co | Outcome[A_co]]
        Turns a validated candidate into a value. Return :py:class:`Empty <positional_parse.outcome.Empty>`
        to decline producing one.
    finder : Callable[[str], str]
        Finds the candidate in the remaining text, returning ``""`` if there is none.
    """

    name: str
    validator: Callable[[str], bool]
    converter: Callable[[str], Any]
    finder: Finder = find_token

    def convert(self, candidate: str) -> Outcome[A_co]:
        return Outcome.attempt(self.converter, candidate)

    def extract(self, text: str) -> str:
        """
        The candidate for this type, or ``""`` if the found text does not validate.

        >>> DEFAULT_REGISTRY[INTEGER].extract("123 abc")
        '123'
        >>> DEFAULT_REGISTRY[INTEGER].extract("abc 123")
        ''
        """
        candidate = self.find(text)
        if candidate and self.validate(candidate):
            return candidate
        return ""

    def find(self, text: str) -> str:
        return self.finder(text)

    def grab(self, text: str) -> Outcome[A_co]:
        """
        >>> DEFAULT_REGISTRY[BOOLEAN].grab("true story")
        Value(get=True)
        >>> DEFAULT_REGISTRY[BOOLEAN].grab("yes")
        Empty()
        """
        candidate = self.extract(text)
        if not candidate:
            return Outcome.zero()
        return self.convert(candidate)

    def validate(self, candidate: str) -> bool:
        return self.validator(candidate)


def _strip_newlines(candidate: str) -> str:
    return candidate.replace("\r", "").replace("\n", "")


def _parses(parse: Callable[[str], Any]) -> Callable[[str], bool]:
    def validator(candidate: str) -> bool:
        try:
            parse(_strip_newlines(candidate))
        except (ValueError, OverflowError):
            return False
        return True

    return validator


def _integer(bits: int) -> Callable[[str], int]:
    low, high = -(2 ** (bits - 1)), 2 ** (bits - 1) - 1

    def parse(candidate: str) -> int:
        if not _DECIMAL.fullmatch(candidate):
            raise ValueError(f"{candidate!r} is not a decimal integer")
        value = int(candidate)
        if not low <= value <= high:
            raise OverflowError(f"{value} is outside [{low}, {high}]")
        return value

    return parse


def _double(candidate: str) -> float:
    if "_" in candidate:
        raise ValueError(f"{candidate!r} is not a number")
    return float(candidate)


def _float(candidate: str) -> float:
    (value,) = struct.unpack("f", struct.pack("f", _double(candidate)))
    return value


def _numeric(name: str, parse: Callable[[str], Any]) -> ArgumentType:
    return ArgumentType(
        name, validator=_parses(parse), converter=lambda x: parse(_strip_newlines(x))
    )


def _string(candidate: str) -> str:
    return _ESCAPE.sub(r"\1", candidate[1:-1])


INTEGER_TYPE: ArgumentType[int] = _numeric(INTEGER, _integer(32))
LONG_TYPE: ArgumentType[int] = _numeric(LONG, _integer(64))
SHORT_TYPE: ArgumentType[int] = _numeric(SHORT, _integer(16))
BYTE_TYPE: ArgumentType[int] = _numeric(BYTE, _integer(8))
DOUBLE_TYPE: ArgumentType[float] = _numeric(DOUBLE, _double)
FLOAT_TYPE: ArgumentType[float] = _numeric(FLOAT, _float)
BOOLEAN_TYPE: ArgumentType[bool] = ArgumentType(
    BOOLEAN,
    validator=lambda x: x in ("true", "false"),
    converter=lambda x: x == "true",
)
STRING_TYPE: ArgumentType[str] = ArgumentType(
    STRING,
    validator=lambda x: find_quoted(x) == x,
    converter=_string,
    finder=find_quoted,
)
CHAR_TYPE: ArgumentType[str] = ArgumentType(
    CHAR,
    validator=lambda x: len(x) == 3,
    converter=lambda x: x[1],
    finder=find_fixed(3),
)
UNIT_TYPE: ArgumentType[None] = ArgumentType(
    UNIT,
    validator=lambda _: True,
    converter=lambda _: None,
    finder=find_nothing,
)


@dataclass(frozen=True)
class TypeRegistry:
    """
    An immutable mapping from kind names to :py:class:`ArgumentType` instances.

    >>> registry = DEFAULT_REGISTRY.register(ArgumentType("word", validator=str.isalpha, converter=str))
    >>> "word" in registry, "word" in DEFAULT_REGISTRY
    (True, False)
    >>> registry["nope"]
    Traceback (most recent call last):
    ...
    positional_parse.errors.UnknownTypeError: Unknown argument type: 'nope'
    """

    types: Mapping[str, ArgumentType]

    def __contains__(self, kind: object) -> bool:
        return kind in self.types

    def __getitem__(self, kind: str) -> ArgumentType:
        try:
            return self.types[kind]
        except KeyError:
            raise UnknownTypeError(f"Unknown argument type: {kind!r}", kind=kind) from None

    def __iter__(self) -> Iterator[str]:
        yield from self.types

    def __len__(self) -> int:
        return len(self.types)

    @classmethod
    def of(cls, *types: ArgumentType) -> "TypeRegistry":
        return cls(MappingProxyType({t.name: t for t in types}))

    def register(self, *types: ArgumentType) -> "TypeRegistry":
        """
        Returns a new registry with ``types`` added, replacing any registered under the same name.
        """
        return TypeRegistry.of(*self.types.values(), *types)


DEFAULT_REGISTRY = TypeRegistry.of(
    INTEGER_TYPE,
    LONG_TYPE,
    SHORT_TYPE,
    BYTE_TYPE,
    DOUBLE_TYPE,
    FLOAT_TYPE,
    BOOLEAN_TYPE,
    STRING_TYPE,
    CHAR_TYPE,
    UNIT_TYPE,
)
