"""Allow ``python -m cliweave`` invocation.

This module simply delegates to the demo application's entry point so
that ``python -m cliweave`` behaves identically to the ``cliweave``
console script.
"""

from __future__ import annotations

from cliweave.cli.doctor import cli

if __name__ == "__main__":
    cli()
