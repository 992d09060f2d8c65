"""
Defines :py:class:`MissingArgsStrategy`, the policy for required arguments that find no match.
"""
import os
from enum import Enum

MISSING_ARGS_ENV = "POSITIONAL_PARSE_MISSING_ARGS"


class MissingArgsStrategy(Enum):
    """
    ``QUICK`` stops scanning at the first missing required argument.
    ``THOROUGH`` visits every argument and reports all that are missing.
    """

    QUICK = "quick"
    THOROUGH = "thorough"


def default_strategy() -> MissingArgsStrategy:
    """
    The strategy named by the ``POSITIONAL_PARSE_MISSING_ARGS`` environment variable,
    ``THOROUGH`` if it is unset. Raises :py:exc:`ValueError` for any other value.
    """
    value = os.environ.get(MISSING_ARGS_ENV, MissingArgsStrategy.THOROUGH.value)
    return MissingArgsStrategy(value.strip().lower())
