"""
Defines :py:class:`Outcome <positional_parse.outcome.Outcome>`, the three-way result
(:py:class:`Value`, :py:class:`Error` or :py:class:`Empty`) produced by conversions and by the parser.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Type, TypeVar

from pytypeclass import Monad, MonadPlus

from positional_parse.errors import EmptyOutcomeError

A_co = TypeVar("A_co", covariant=True)
A = TypeVar("A")
B = TypeVar("B")
E = TypeVar("E", bound=Exception)


class Outcome(MonadPlus[A_co]):
    """
    Base class of the three outcome variants. Use :py:func:`isinstance` against
    :py:class:`Value`, :py:class:`Error` and :py:class:`Empty` to tell them apart.

    >>> Value(1) >= (lambda x: Value(x + 1))
    Value(get=2)
    >>> Empty() >= (lambda x: Value(x + 1))
    Empty()
    >>> Empty() | Value(1)
    Value(get=1)
    >>> Error(ValueError("boom")) | Empty()
    Error(cause=ValueError('boom'))
    """

    def __ge__(self, f: Callable[[A_co], Monad[B]]) -> "Outcome[B]":  # type: ignore[override]
        return self.bind(f)

    def __or__(self, other: "Outcome[B]") -> "Outcome[A_co | B]":  # type: ignore[override]
        for outcome in (self, other):
            if isinstance(outcome, Value):
                return outcome
        for outcome in (self, other):
            if isinstance(outcome, Error):
                return outcome
        return Empty()

    def __add__(self, other: "Outcome[B]") -> "Outcome[A_co | B]":
        return self | other

    def bind(self, f: Callable[[A_co], Monad[B]]) -> "Outcome[B]":  # type: ignore[override]
        if isinstance(self, Value):
            y = f(self.get)
            assert isinstance(y, Outcome), y
            return y
        return self  # type: ignore[return-value]

    def map(self, f: Callable[[A_co], B]) -> "Outcome[B]":
        """
        >>> Value(2).map(str)
        Value(get='2')
        """
        return self >= (lambda a: Value(f(a)))

    @classmethod
    def attempt(cls, f: Callable[..., Any], *args: Any) -> "Outcome[Any]":
        """
        Calls ``f``, capturing whatever it raises as an :py:class:`Error`.
        Outcomes returned by ``f`` are passed through unchanged.

        >>> Outcome.attempt(int, "12")
        Value(get=12)
        >>> Outcome.attempt(lambda _: Empty(), "12")
        Empty()
        >>> Outcome.attempt(int, "twelve")
        Error(cause=ValueError("invalid literal for int() with base 10: 'twelve'"))
        """
        try:
            y = f(*args)
        except Exception as e:
            return Error(e)
        if isinstance(y, Outcome):
            return y
        return Value(y)

    def on_success(self, f: Callable[[A_co], Any]) -> "Outcome[A_co]":
        if isinstance(self, Value):
            f(self.get)
        return self

    def on_error(
        self, f: Callable[[E], Any], kind: Type[E] = Exception  # type: ignore[assignment]
    ) -> "Outcome[A_co]":
        if isinstance(self, Error) and isinstance(self.cause, kind):
            f(self.cause)
        return self

    def on_empty(self, f: Callable[[], Any]) -> "Outcome[A_co]":
        if isinstance(self, Empty):
            f()
        return self

    def unwrap(self) -> A_co:
        """
        >>> Value("x").unwrap()
        'x'
        >>> Empty().unwrap()
        Traceback (most recent call last):
        ...
        positional_parse.errors.EmptyOutcomeError: Outcome was empty.
        """
        if isinstance(self, Value):
            return self.get
        if isinstance(self, Error):
            raise self.cause
        raise EmptyOutcomeError("Outcome was empty.")

    @classmethod
    def return_(cls, a: A) -> "Outcome[A]":  # type: ignore[override]
        return Value(a)

    @classmethod
    def zero(cls) -> "Outcome[Any]":  # type: ignore[override]
        return Empty()


@dataclass(frozen=True)
class Value(Outcome[A_co]):
    get: A_co


@dataclass(frozen=True)
class Error(Outcome[Any]):
    cause: Exception


@dataclass(frozen=True)
class Empty(Outcome[Any]):
    pass
