"""Terminal output for cluster commands.

Progress goes to stdout, problems to stderr. Colour codes are only written to
terminals, and never when NO_COLOR is set.
"""

import os
import sys
from typing import Optional, Sequence, TextIO

RED = "\033[0;31m"
GREEN = "\033[0;32m"
YELLOW = "\033[1;33m"
NC = "\033[0m"


def _coloured(stream: TextIO) -> bool:
    if "NO_COLOR" in os.environ:
        return False
    return hasattr(stream, "isatty") and stream.isatty()


def _emit(colour: str, text: str, stream: Optional[TextIO] = None) -> None:
    stream = stream or sys.stdout
    if _coloured(stream):
        text = f"{colour}{text}{NC}"
    print(text, file=stream)


def log_step(msg: str) -> None:
    """Announce a cluster action that is starting."""
    _emit(YELLOW, f"-> {msg}")


def log_success(msg: str) -> None:
    _emit(GREEN, f"OK {msg}")


def log_warning(msg: str) -> None:
    """Report a skipped machine or other non-fatal problem."""
    _emit(YELLOW, f"WARNING: {msg}", sys.stderr)


def log_error(msg: str) -> None:
    _emit(RED, f"ERROR: {msg}", sys.stderr)


def die(msg: str) -> None:
    """Report msg and exit with status 1."""
    log_error(msg)
    sys.exit(1)


def print_table(header: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
    """Print rows as left-aligned columns under a header, as ``ps`` does."""
    widths = [len(h) for h in header]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    def fmt(cells: Sequence[str]) -> str:
        return "  ".join(cell.ljust(widths[i]) for i, cell in enumerate(cells)).rstrip()

    print(fmt(header))
    for row in rows:
        print(fmt(row))
