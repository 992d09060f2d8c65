"""
Defines errors which can be reported by the positional parser.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from positional_parse.argument import Argument


@dataclass
class ArgumentError(Exception):
    usage: str

    def __str__(self) -> str:
        return self.usage


@dataclass
class ExceptionError(ArgumentError):
    exception: Exception


@dataclass
class ConversionError(ArgumentError):
    argument: "Argument"
    candidate: str
    exception: Exception


@dataclass
class MissingArgumentsError(ArgumentError):
    missing: "List[Argument]"


@dataclass
class UnknownTypeError(ArgumentError):
    kind: str


@dataclass
class EmptyOutcomeError(ArgumentError):
    pass
