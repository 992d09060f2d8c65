"""
Defines :py:class:`KeyValue <positional_parse.data_structures.KeyValue>`, one parsed argument,
and :py:class:`Sequence <positional_parse.data_structures.Sequence>`, the read-only list of them
that :py:func:`parse <positional_parse.parser.parse>` returns.
"""
from __future__ import annotations

import typing
from dataclasses import dataclass
from typing import Any, Dict, Generic, Iterator, List, TypeVar, overload

A_co = TypeVar("A_co", covariant=True)
A = TypeVar("A")


@dataclass(frozen=True)
class KeyValue(Generic[A_co]):
    """
    The name of a declared argument paired with its converted value.
    """

    key: str
    value: A_co


@dataclass(frozen=True)
class Sequence(typing.Sequence[A_co]):
    """
    Parsed arguments in the order they were matched.

    >>> s = Sequence([KeyValue("1", 123), KeyValue("3", True)])
    >>> len(s), s[0]
    (2, KeyValue(key='1', value=123))
    >>> s[1:]
    Sequence(get=[KeyValue(key='3', value=True)])
    >>> list(s.keys()), list(s.values())
    (['1', '3'], [123, True])
    """

    get: typing.Sequence[A_co]

    @overload
    def __getitem__(self, i: int) -> "A_co":
        ...

    @overload
    def __getitem__(self, i: slice) -> "Sequence[A_co]":
        ...

    def __getitem__(self, i: "int | slice") -> "A_co | Sequence[A_co]":
        if isinstance(i, slice):
            return Sequence(self.get[i])
        return self.get[i]

    def __iter__(self) -> Iterator[A_co]:
        return iter(self.get)

    def __len__(self) -> int:
        return len(self.get)

    def keys(self: "Sequence[KeyValue[A]]") -> "Sequence[str]":
        return Sequence([kv.key for kv in self])

    def to_dict(self: "Sequence[KeyValue[A]]") -> "Dict[str, A | List[A]]":
        """
        A name matched more than once maps to the list of its values:

        >>> Sequence([KeyValue("1", 123), KeyValue("2", "reason")]).to_dict()
        {'1': 123, '2': 'reason'}
        >>> Sequence([KeyValue("a", 1), KeyValue("b", 2), KeyValue("a", 3)]).to_dict()
        {'a': [1, 3], 'b': 2}
        """
        grouped: Dict[str, List[Any]] = {}
        for kv in self:
            grouped.setdefault(kv.key, []).append(kv.value)
        return {k: v[0] if len(v) == 1 else v for k, v in grouped.items()}

    def values(self: "Sequence[KeyValue[A]]") -> "Sequence[A]":
        return Sequence([kv.value for kv in self])
