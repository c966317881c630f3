"""CalcRepl — stateful calculator shell.

Also provides the ``calc-repl`` CLI entry point via ``main()``.
"""

from __future__ import annotations

import sys
from typing import IO

from .cli import configure_logging
from .errors import ParseError
from .evaluator import Evaluator
from .values import Value, VText


# ---------------------------------------------------------------------------
# CalcRepl class (programmatic use)
# ---------------------------------------------------------------------------

class CalcRepl:
    """Evaluates one expression per call on a shared evaluator.

    Usage::

        repl = CalcRepl()
        repl.eval('setVal("n", 10)')   # → None
        repl.eval("n * 2")             # → VInt(20)

        repl.variables   # the variable store
        repl.reset()     # forget all variables
    """

    def __init__(self) -> None:
        self.evaluator = Evaluator()

    @property
    def variables(self) -> dict[str, Value]:
        return self.evaluator.env.variables

    def eval(self, text: str) -> Value | None:
        """Evaluate *text*; raises ParseError when it is malformed."""
        return self.evaluator.evaluate(text)

    def reset(self) -> None:
        """Clear all variables."""
        self.evaluator = Evaluator()


# ---------------------------------------------------------------------------
# CLI helpers
# ---------------------------------------------------------------------------

def _fmt_inline(value: Value) -> str:
    """Format a single value for compact one-line display."""
    if isinstance(value, VText):
        return f'"{value.value}"'
    return str(value)


def _show_vars(repl: CalcRepl, dest: IO[str]) -> None:
    entries = repl.variables
    if not entries:
        print("  (no variables defined)", file=dest)
        return
    width = max(len(k) for k in entries)
    for name, value in sorted(entries.items()):
        print(f"  {name:<{width}} : {_fmt_inline(value)}", file=dest)


def _eval_expr(repl: CalcRepl, expr: str, dest: IO[str]) -> None:
    try:
        result = repl.eval(expr)
    except ParseError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return
    if result is not None:
        print(_fmt_inline(result), file=dest)


def _process_line(repl: CalcRepl, line: str, dest: IO[str]) -> bool:
    """Process one input line.  Returns False when the session should end."""
    line = line.strip()
    if not line:
        return True

    if line in (":q", ":quit"):
        return False

    if line == ":vars":
        _show_vars(repl, dest)
        return True

    if line == ":reset":
        repl.reset()
        return True

    # ── Batch file ────────────────────────────────────────────────────────
    if line.startswith("?<< "):
        filepath = line[4:].strip()
        try:
            with open(filepath, encoding="utf-8") as fh:
                for file_line in fh:
                    if not _process_line(repl, file_line.rstrip("\n"), dest):
                        return False
        except OSError as exc:
            print(f"Error reading '{filepath}': {exc}", file=sys.stderr)
        return True

    _eval_expr(repl, line, dest)
    return True


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

def main() -> None:
    """Interactive calculator (``calc-repl`` / ``python -m calcexpr.repl``)."""
    configure_logging()
    repl = CalcRepl()
    print("calc  (:q to quit  |  :vars  :reset  |  ?<< <file>)")

    while True:
        try:
            line = input("calc> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print()
            continue

        if not _process_line(repl, line, sys.stdout):
            break


if __name__ == "__main__":
    main()
