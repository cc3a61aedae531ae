"""Rich console factories.

Command results are written to the command tree's output stream;
everything else (spinners, error messages) goes to stderr so that
machine-friendly output stays parseable.
"""

from __future__ import annotations

from typing import TextIO

from rich.console import Console


def get_rich_console(out: TextIO | None = None) -> Console:
    """Create a Rich console writing to *out*, or to stderr when omitted."""
    if out is None:
        return Console(stderr=True, highlight=False)
    return Console(file=out, highlight=False)


console = get_rich_console()
"""Shared stderr console. Resolves ``sys.stderr`` at write time."""
