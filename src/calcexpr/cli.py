"""``calc``: evaluate one expression from the shell.

Example::

    calc -n 16 -text "Shell calculator result:" -pi 3.141 'sprintf("%s %.3f",text,pi*n)'
    Shell calculator result: 50.256

Every ``-key value`` pair before the expression becomes a variable. Numeric
values are stored as floats, ``true``/``false`` as booleans, anything else
as a string. A value that itself starts with ``-`` is masked with a
backslash (``-offset "\\-3"``). A key with no value is set to ``true``.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Sequence

from rich.console import Console
from rich.logging import RichHandler

from .coerce import as_float, parse_number
from .errors import ParseError
from .evaluator import Evaluator

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "CALCEXPR_LOG_LEVEL"

err_console = Console(stderr=True)


def configure_logging() -> None:
    """Send log records to stderr; the level comes from $CALCEXPR_LOG_LEVEL."""
    level = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    numeric = getattr(logging, level, None)
    logging.basicConfig(
        level=numeric if isinstance(numeric, int) else logging.WARNING,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=level == "DEBUG",
            ),
        ],
    )


def _option_value(raw: str) -> object:
    number = parse_number(raw)
    if number is not None:
        return as_float(number)
    if raw == "true":
        return True
    if raw == "false":
        return False
    return raw


def parse_options(args: Sequence[str]) -> dict[str, object]:
    """Map ``-key value`` pairs to initial variables."""
    options: dict[str, object] = {}
    i = 0
    while i < len(args):
        arg = args[i]
        key = arg.lstrip("-").strip() if arg.startswith("-") else ""
        i += 1
        if not key:
            continue
        if i == len(args):
            options[key] = True
            break
        value = args[i]
        if value.startswith("\\"):
            value = value[1:]
            options[key] = _option_value(value) if value else "\\"
            i += 1
            continue
        if value.startswith("-"):
            options[key] = True
            continue
        options[key] = _option_value(value)
        i += 1
    return options


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point of the ``calc`` command."""
    configure_logging()
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        logger.error("usage: calc [-key value ...] EXPRESSION")
        return 2

    expression = args[-1]
    variables = parse_options(args[:-1])
    logger.debug("variables: %r", variables)

    evaluator = Evaluator(expression, variables)
    try:
        evaluator.parse()
    except ParseError as exc:
        logger.error("%s", exc)
        return 1

    result = evaluator.run()
    if result is not None:
        print(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
