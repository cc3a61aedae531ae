"""Visual progress indicator around command execution."""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence

from cliweave.cli.console import console
from cliweave.infra.command import Command

logger = logging.getLogger(__name__)

SPINNERS: tuple[str, ...] = (
    "dots",
    "dots2",
    "dots12",
    "line",
    "arc",
    "bouncingBar",
    "simpleDotsScrolling",
    "point",
)
"""Rich spinner styles picked from at random for each run."""


def execute_with_spinner(root: Command, args: Sequence[str] | None = None, *, text: str = "") -> None:
    """Execute *root* while a spinner runs on stderr.

    The spinner is stopped before this function returns or raises;
    exceptions from the command propagate unchanged.
    """
    spinner = random.choice(SPINNERS)
    logger.debug("Starting %s spinner for %r", spinner, root.name)
    try:
        with console.status(text, spinner=spinner):
            root.execute(args)
    finally:
        logger.debug("Stopped spinner for %r", root.name)
