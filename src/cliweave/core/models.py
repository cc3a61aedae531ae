"""Value objects shared across layers."""

from __future__ import annotations

import enum
import platform
import time
from dataclasses import dataclass


class OutputMode(enum.Enum):
    """How an application renders results.

    ``UNBUILT`` is the state before :func:`~cliweave.cli.app.build`;
    reading the mode then is an error rather than a silent default.
    """

    UNBUILT = "unbuilt"
    HUMAN_FRIENDLY = "human-friendly"
    MACHINE_FRIENDLY = "machine-friendly"


@dataclass(frozen=True, slots=True)
class HelpTemplate:
    """Renders the ``--version`` text of an application.

    The result is a :class:`string.Template` source; ``$name`` and
    ``$version`` are substituted by the command tree.
    """

    build_time: str = ""
    """Build time as unix seconds. Unparsable or out-of-range values render the epoch."""

    build_revision: str = ""
    """VCS revision the binary was built from."""

    show_python_version: bool = False
    """Append the running interpreter version."""

    template: str = ""
    """Literal template; when non-empty it replaces the generated one."""

    def __str__(self) -> str:
        if self.template:
            return self.template

        build_title = ">>>> build"
        tab = " " * len(build_title)

        # e.g. Thu Mar  2 02:40:53 UTC 2018, always in UTC
        build_time_str = _unix_date(_parse_build_time(self.build_time))

        text = (
            "${name} version ${version}"
            f"\n{build_title}\n"
            f"{tab} revision {self.build_revision}\n"
            f"{tab} datetime {build_time_str}\n"
        )
        if self.show_python_version:
            text += f"{tab} python   {platform.python_version()}\n"
        return text


def _parse_build_time(raw: str) -> time.struct_time:
    """UTC time for *raw* unix seconds; the epoch when it is not representable."""
    try:
        return time.gmtime(int(raw))
    except (ValueError, OverflowError, OSError):
        return time.gmtime(0)


def _unix_date(moment: time.struct_time) -> str:
    # Day of month is space padded, like date(1).
    return (
        time.strftime("%a %b ", moment)
        + f"{moment.tm_mday:>2}"
        + time.strftime(" %H:%M:%S UTC %Y", moment)
    )
