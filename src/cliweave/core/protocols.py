"""Protocols (interfaces) consumed by the core layer.

The registry never depends on the concrete command engine: any node
type exposing a name, an optional parent and ordered children
satisfies :class:`CommandNode` structurally.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol


class CommandNode(Protocol):
    """A node of a command tree."""

    @property
    def name(self) -> str:
        """The command's name, as typed on the command line."""
        ...  # pragma: no cover

    @property
    def parent(self) -> CommandNode | None:
        """The parent node, or ``None`` for the root."""
        ...  # pragma: no cover

    def commands(self) -> Sequence[CommandNode]:
        """Direct children, in registration order."""
        ...  # pragma: no cover


class ResolvableCommand(CommandNode, Protocol):
    """A command tree root able to resolve arguments to a node."""

    def find(self, args: Sequence[str]) -> tuple[ResolvableCommand, list[str]]:
        """Match *args* against the tree.

        Returns the deepest matching node and the arguments left over
        once the sub-command names are consumed.

        Raises
        ------
        CommandNotFoundError
            When *args* name a sub-command that does not exist.
        """
        ...  # pragma: no cover


class RegisteredApplication(Protocol):
    """What the registry needs to know about an application."""

    name: str

    @property
    def command(self) -> ResolvableCommand | None:
        """The built command tree root, ``None`` before build."""
        ...  # pragma: no cover
