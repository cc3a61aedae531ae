"""Custom exception hierarchy for cliweave.

Every error raised by the library inherits from :class:`CliweaveError`
so that the process error boundary
(:func:`~cliweave.cli.app.run_and_exit`) can render a clean message
without leaking a stack trace.

Hierarchy
---------
CliweaveError
├── NotBuiltError
├── CommandNotFoundError
├── FlagError
├── SerializationError
└── FriendlyError
"""

from __future__ import annotations


class CliweaveError(Exception):
    """Base exception for all cliweave errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Application lifecycle -------------------------------------------------

class NotBuiltError(CliweaveError):
    """Raised when build-time state is read before the application is built."""


# --- Command tree ----------------------------------------------------------

class CommandNotFoundError(CliweaveError):
    """Raised when arguments name a sub-command that does not exist."""


class FlagError(CliweaveError):
    """Raised for unknown flags, wrong flag kinds and unparsable values."""


# --- Output ----------------------------------------------------------------

class SerializationError(CliweaveError):
    """Raised when a value cannot be encoded or queried as JSON."""


# --- Friendly errors -------------------------------------------------------

class FriendlyError(CliweaveError):
    """User-facing replacement for a raw failure.

    The raw exception is kept on :attr:`original` and chained as
    ``__cause__``.
    """

    def __init__(self, message: str, original: BaseException) -> None:
        super().__init__(message)
        self.original: BaseException = original
        self.__cause__ = original
