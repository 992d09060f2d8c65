"""
Defines :py:class:`Argument <positional_parse.argument.Argument>`, the declaration of one
positional slot, and :py:func:`arrange`, which fixes the order slots are matched in.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

# decimal names longer than this order as plain names
_MAX_POSITION_DIGITS = 18


@dataclass(frozen=True)
class Argument:
    """
    Declares one expected argument.

    Parameters
    ----------
    name : str
        The key the converted value is bound to. Decimal names double as positions.
    type : str
        The name of an :py:class:`ArgumentType <positional_parse.argument_types.ArgumentType>`
        in the registry given to the parser.
    required : bool
        Whether a missing match fails the parse.
    position : Optional[int]
        Explicit position. Takes precedence over the name.
    """

    name: str
    type: str
    required: bool = False
    position: Optional[int] = None

    def sort_key(self) -> Tuple[int, int, str]:
        """
        >>> Argument("10", "integer").sort_key() > Argument("2", "integer").sort_key()
        True
        >>> Argument("reason", "string", position=0).sort_key()
        (0, 0, 'reason')
        >>> Argument("reason", "string").sort_key()
        (1, 0, 'reason')
        """
        if self.position is not None:
            return 0, self.position, self.name
        if self.name.isdecimal() and len(self.name) <= _MAX_POSITION_DIGITS:
            return 0, int(self.name), self.name
        return 1, 0, self.name


def arrange(arguments: Iterable[Argument]) -> List[Argument]:
    """
    Drops exact duplicates (keeping the first) and sorts into matching order.

    >>> args = [Argument("10", "integer"), Argument("2", "integer"), Argument("10", "integer")]
    >>> [a.name for a in arrange(args)]
    ['2', '10']
    """
    return sorted(dict.fromkeys(arguments), key=Argument.sort_key)
