import logging
import os
import sys

from positional_parse import (
    BOOLEAN,
    INTEGER,
    STRING,
    Argument,
    MissingArgsStrategy,
    parse,
)

EXAMPLE = '123 "Being a jerk to everyone" true'


def main(*args: str) -> int:
    strategy = MissingArgsStrategy.THOROUGH
    if args and args[0] == "--quick":
        strategy = MissingArgsStrategy.QUICK
        args = args[1:]
    content = " ".join(args) or EXAMPLE

    user = Argument("1", INTEGER, required=True)
    clear = Argument("3", BOOLEAN)
    reason = Argument("2", STRING)

    status = 0

    def fail(error: Exception):
        nonlocal status
        status = 1
        print(error, file=sys.stderr)

    parse([user, clear, reason], content, strategy).on_success(
        lambda parsed: print(parsed.to_dict())
    ).on_error(fail).on_empty(lambda: print("was empty?"))
    return status


if __name__ == "__main__":
    logging.basicConfig(level=os.environ.get("POSITIONAL_PARSE_LOG_LEVEL", "WARNING").upper())
    sys.exit(main(*sys.argv[1:]))
