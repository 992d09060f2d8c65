from positional_parse.argument import Argument, arrange
from positional_parse.argument_types import (
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
    ArgumentType,
    TypeRegistry,
    find_fixed,
    find_nothing,
    find_pattern,
    find_quoted,
    find_token,
)
from positional_parse.data_structures import KeyValue, Sequence
from positional_parse.errors import (
    ArgumentError,
    ConversionError,
    ExceptionError,
    MissingArgumentsError,
    UnknownTypeError,
)
from positional_parse.options import MissingArgsStrategy
from positional_parse.outcome import Empty, Error, Outcome, Value
from positional_parse.parser import PositionalParser, parse

__all__ = [
    "Argument",
    "arrange",
    "ArgumentType",
    "TypeRegistry",
    "DEFAULT_REGISTRY",
    "find_fixed",
    "find_nothing",
    "find_pattern",
    "find_quoted",
    "find_token",
    "INTEGER",
    "LONG",
    "SHORT",
    "BYTE",
    "DOUBLE",
    "FLOAT",
    "BOOLEAN",
    "STRING",
    "CHAR",
    "UNIT",
    "KeyValue",
    "Sequence",
    "ArgumentError",
    "ConversionError",
    "ExceptionError",
    "MissingArgumentsError",
    "UnknownTypeError",
    "MissingArgsStrategy",
    "Outcome",
    "Value",
    "Error",
    "Empty",
    "PositionalParser",
    "parse",
]
