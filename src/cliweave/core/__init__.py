"""Core layer — application registry, friendly errors and shared state.

Rules
-----
* No terminal output.
* No imports from ``cli`` or ``infra``; command trees are consumed
  through the protocols in :mod:`cliweave.core.protocols`.
"""

from cliweave.core.friendly_errors import FriendlyErrors
from cliweave.core.memory import Memory
from cliweave.core.models import HelpTemplate, OutputMode
from cliweave.core.protocols import CommandNode, RegisteredApplication, ResolvableCommand
from cliweave.core.registry import ApplicationRegistry, default_registry

__all__: list[str] = [
    "ApplicationRegistry",
    "CommandNode",
    "FriendlyErrors",
    "HelpTemplate",
    "Memory",
    "OutputMode",
    "RegisteredApplication",
    "ResolvableCommand",
    "default_registry",
]
