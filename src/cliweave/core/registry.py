"""Application registry — which application owns which command tree.

Applications enter the registry when they are built. Package-level
helpers (friendly errors, :func:`get`) use it to map an arbitrary
command node back to its application.

Concurrency
-----------
The registry is not synchronised. It is meant to be populated during
program start-up, one ``build`` at a time. Concurrent builds touching
the same registry are undefined behaviour; wrap the registry in a lock
at the composition root if that is ever needed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

from cliweave.core.protocols import CommandNode, RegisteredApplication, ResolvableCommand
from cliweave.exceptions import CommandNotFoundError

logger = logging.getLogger(__name__)


class ApplicationRegistry:
    """Ordered table of built applications keyed by name.

    Registering a name that already exists replaces the previous entry
    in the same slot; there is no per-application removal.
    """

    def __init__(self) -> None:
        self._applications: list[RegisteredApplication] = []

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def register(self, app: RegisteredApplication) -> None:
        for i, existing in enumerate(self._applications):
            if existing.name == app.name:
                logger.debug("Replacing registered application %r", app.name)
                self._applications[i] = app
                return

        logger.debug("Registering application %r", app.name)
        self._applications.append(app)

    def clear(self) -> None:
        """Forget every application. Intended for composition roots and tests."""
        self._applications.clear()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_by_name(self, application_name: str) -> RegisteredApplication | None:
        for app in self._applications:
            if app.name == application_name:
                return app
        return None

    def get(self, command: CommandNode) -> RegisteredApplication | None:
        """Return the application owning *command*.

        Only the root (or sometimes an intermediate alias) carries the
        registered name, so the search walks up through the parents.
        """
        node: CommandNode | None = command
        while node is not None:
            app = self.get_by_name(node.name)
            if app is not None:
                return app
            node = node.parent
        return None

    def find_command(
        self,
        application_name: str,
        args: Sequence[str],
    ) -> tuple[ResolvableCommand, list[str]] | None:
        """Resolve *args* against an application's tree.

        Returns ``(command, remaining_args)`` or ``None`` when either the
        application or the command cannot be found.
        """
        app = self.get_by_name(application_name)
        if app is None or app.command is None:
            return None

        try:
            return app.command.find(args)
        except CommandNotFoundError as exc:
            logger.debug("No command of %r matches %r: %s", application_name, list(args), exc)
            return None

    def get_command(self, application_name: str, command_name: str) -> CommandNode | None:
        """Search an application's tree for *command_name*.

        The walk is depth-first but only ever descends into the *first*
        child of each node: siblings of that first child are compared by
        name and never explored. A command nested under a later sibling
        is therefore not found.
        """
        app = self.get_by_name(application_name)
        if app is None or app.command is None:
            return None
        return _first_child_search(app.command, command_name)

    # ------------------------------------------------------------------
    # Container protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._applications)

    def __iter__(self) -> Iterator[RegisteredApplication]:
        return iter(list(self._applications))

    def __contains__(self, application_name: object) -> bool:
        return any(app.name == application_name for app in self._applications)


def _first_child_search(node: CommandNode, command_name: str) -> CommandNode | None:
    for child in node.commands():
        if child.name == command_name:
            return child
        return _first_child_search(child, command_name)
    return None


# ---------------------------------------------------------------------------
# Process-wide default registry
# ---------------------------------------------------------------------------

default_registry = ApplicationRegistry()
"""Registry used by applications that are not given one explicitly."""


def get(command: CommandNode) -> RegisteredApplication | None:
    return default_registry.get(command)


def get_by_name(application_name: str) -> RegisteredApplication | None:
    return default_registry.get_by_name(application_name)


def find_command(
    application_name: str,
    args: Sequence[str],
) -> tuple[ResolvableCommand, list[str]] | None:
    return default_registry.find_command(application_name, args)


def get_command(application_name: str, command_name: str) -> CommandNode | None:
    return default_registry.get_command(application_name, command_name)
