"""cliweave — dual-mode (table / JSON) command-line applications.

Build an :class:`~cliweave.cli.app.Application`, attach commands, and let
leaf commands print through :func:`~cliweave.cli.output.print_object` so
every command answers both humans and scripts.
"""

import logging

from cliweave.cli.app import Application, ApplicationBuilder, build, name, run_and_exit
from cliweave.cli.output import (
    can_be_silent,
    can_print_json,
    get_json_no_pretty_flag,
    get_json_query_flag,
    get_machine_friendly_flag,
    get_machine_friendly_flag_from,
    get_silent_flag,
    print_object,
    register_machine_friendly_flag,
    register_machine_friendly_flag_to,
)
from cliweave.cli.spinner import execute_with_spinner
from cliweave.core.friendly_errors import FriendlyErrors
from cliweave.core.memory import Memory
from cliweave.core.models import HelpTemplate, OutputMode
from cliweave.core.registry import (
    ApplicationRegistry,
    default_registry,
    find_command,
    get,
    get_by_name,
    get_command,
)
from cliweave.infra.command import Command
from cliweave.infra.flags import Flag, FlagSet
from cliweave.version import __version__

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__: list[str] = [
    "Application",
    "ApplicationBuilder",
    "ApplicationRegistry",
    "Command",
    "Flag",
    "FlagSet",
    "FriendlyErrors",
    "HelpTemplate",
    "Memory",
    "OutputMode",
    "__version__",
    "build",
    "can_be_silent",
    "can_print_json",
    "default_registry",
    "execute_with_spinner",
    "find_command",
    "get",
    "get_by_name",
    "get_command",
    "get_json_no_pretty_flag",
    "get_json_query_flag",
    "get_machine_friendly_flag",
    "get_machine_friendly_flag_from",
    "get_silent_flag",
    "name",
    "print_object",
    "register_machine_friendly_flag",
    "register_machine_friendly_flag_to",
    "run_and_exit",
]
