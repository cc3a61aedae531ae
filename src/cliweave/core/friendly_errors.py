"""Friendly error translation.

Applications register user-facing messages for the failures they expect
(a missing credential, an unreachable server) and the final exception of
every run is passed through :meth:`FriendlyErrors.translate` once.

Keys may be:

* an exception class — matches instances of that class or a subclass;
* an exception instance — matches that very object;
* a string — matches an exception whose message is exactly that string;
* a compiled regular expression — searched in the exception message.

Entries are tried in insertion order; the first match wins.
"""

from __future__ import annotations

import logging
import re
from typing import Union

from cliweave.exceptions import FriendlyError

logger = logging.getLogger(__name__)

ErrorKey = Union[type[BaseException], BaseException, str, re.Pattern[str]]


class FriendlyErrors(dict[ErrorKey, str]):
    """Mapping of error matchers to display messages."""

    def lookup(self, exc: BaseException) -> str | None:
        """Return the message registered for *exc*, or ``None``."""
        message = str(exc)
        for key, friendly in self.items():
            if isinstance(key, type):
                if isinstance(exc, key):
                    return friendly
            elif isinstance(key, BaseException):
                if key is exc:
                    return friendly
            elif isinstance(key, re.Pattern):
                if key.search(message):
                    return friendly
            elif key == message:
                return friendly
        return None

    def translate(self, exc: BaseException) -> BaseException:
        """Return a :class:`FriendlyError` for *exc*, or *exc* itself.

        An exception that is already a :class:`FriendlyError` is returned
        as-is so a message is never translated twice.
        """
        if isinstance(exc, FriendlyError):
            return exc

        friendly = self.lookup(exc)
        if friendly is None:
            return exc

        logger.debug("Translated %s to friendly message %r", type(exc).__name__, friendly)
        return FriendlyError(friendly, exc)
