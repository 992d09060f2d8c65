"""
Defines the :py:class:`PositionalParser <positional_parse.parser.PositionalParser>`
and the :py:func:`parse` shortcut that drives it.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from positional_parse.argument import Argument, arrange
from positional_parse.argument_types import DEFAULT_REGISTRY, TypeRegistry
from positional_parse.data_structures import KeyValue, Sequence
from positional_parse.errors import (
    ArgumentError,
    ConversionError,
    ExceptionError,
    MissingArgumentsError,
)
from positional_parse.options import MissingArgsStrategy, default_strategy
from positional_parse.outcome import Empty, Error, Outcome, Value

logger = logging.getLogger(__name__)

ParsedArguments = Sequence[KeyValue[Any]]


def missing_usage(missing: List[Argument]) -> str:
    return "The following arguments are required: " + ", ".join(
        argument.name for argument in missing
    )


class PositionalParser:
    """
    Matches argument declarations, in order, against successive prefixes of a command string.

    Parameters
    ----------
    registry : TypeRegistry
        Where the ``type`` of each :py:class:`Argument <positional_parse.argument.Argument>`
        is looked up.
    """

    def __init__(self, registry: TypeRegistry = DEFAULT_REGISTRY):
        self.registry = registry

    def parse(
        self,
        arguments: Iterable[Argument],
        content: str,
        strategy: Optional[MissingArgsStrategy] = None,
    ) -> Outcome[ParsedArguments]:
        """
        Parses ``content``. Never raises: failures come back as
        :py:class:`Error <positional_parse.outcome.Error>`.

        Parameters
        ----------
        arguments : Iterable[Argument]
            The declarations to match. Exact duplicates are dropped; the rest are matched in
            :py:func:`arrange <positional_parse.argument.arrange>` order.
        content : str
            The text to parse.
        strategy : Optional[MissingArgsStrategy]
            What to do when a required argument has no match. Defaults to
            :py:func:`default_strategy <positional_parse.options.default_strategy>`.

        Examples
        --------

        >>> from positional_parse import Argument, INTEGER, BOOLEAN, STRING
        >>> arguments = [
        ...     Argument("1", INTEGER, required=True),
        ...     Argument("3", BOOLEAN),
        ...     Argument("2", STRING),
        ... ]
        >>> result = PositionalParser().parse(arguments, '123 "Being a jerk to everyone" true')
        >>> result.unwrap().to_dict()
        {'1': 123, '2': 'Being a jerk to everyone', '3': True}
        >>> result = PositionalParser().parse(arguments, '"Being a jerk to everyone" true')
        >>> print(result.cause)
        The following arguments are required: 1
        """
        try:
            _strategy = default_strategy() if strategy is None else strategy
            return self._parse(arguments, content, _strategy)
        except ArgumentError as e:
            logger.debug("Parsing %r failed: %s", content, e)
            return Error(e)
        except Exception as e:
            logger.debug("Parsing %r raised", content, exc_info=True)
            return Error(ExceptionError(f"Parsing {content!r} raised exception {e!r}", e))

    def _parse(
        self,
        arguments: Iterable[Argument],
        content: str,
        strategy: MissingArgsStrategy,
    ) -> Outcome[ParsedArguments]:
        parsed: List[KeyValue[Any]] = []
        missing: List[Argument] = []
        for argument in arrange(arguments):
            type_ = self.registry[argument.type]
            candidate = type_.extract(content)
            if not candidate:
                if argument.required:
                    logger.debug("Missing required argument %r", argument.name)
                    missing.append(argument)
                    if strategy is MissingArgsStrategy.QUICK:
                        break
                continue

            # the candidate may sit past unrelated text, which is consumed with it
            index = content.find(candidate)
            content = content[index + len(candidate) :].strip()

            outcome = type_.convert(candidate)
            if isinstance(outcome, Empty):
                logger.debug("Argument %r declined %r", argument.name, candidate)
                continue
            if isinstance(outcome, Error):
                usage = f"Argument {argument.name} ({argument.type}) could not convert {candidate!r}: {outcome.cause}"
                return Error(ConversionError(usage, argument, candidate, outcome.cause))
            assert isinstance(outcome, Value), outcome
            logger.debug("Argument %r matched %r", argument.name, candidate)
            parsed.append(KeyValue(argument.name, outcome.get))

        if missing:
            return Error(MissingArgumentsError(missing_usage(missing), missing))
        return Value(Sequence(parsed))


def parse(
    arguments: Iterable[Argument],
    content: str,
    strategy: Optional[MissingArgsStrategy] = None,
    registry: TypeRegistry = DEFAULT_REGISTRY,
) -> Outcome[ParsedArguments]:
    """
    A shortcut for ``PositionalParser(registry).parse(arguments, content, strategy)``.

    >>> from positional_parse import Argument, MissingArgsStrategy, INTEGER
    >>> arguments = [Argument("1", INTEGER, required=True), Argument("2", INTEGER, required=True)]
    >>> print(parse(arguments, "", MissingArgsStrategy.QUICK).cause)
    The following arguments are required: 1
    >>> print(parse(arguments, "", MissingArgsStrategy.THOROUGH).cause)
    The following arguments are required: 1, 2
    """
    return PositionalParser(registry).parse(arguments, content, strategy)
