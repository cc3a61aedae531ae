"""Applications: configuration, build lifecycle and the error boundary.

An :class:`Application` describes a command-line program: its name,
help text, lifecycle hooks and commands. :func:`build` turns it into a
:class:`~cliweave.infra.command.Command` tree exactly once and records
it in an :class:`~cliweave.core.registry.ApplicationRegistry`;
:meth:`Application.run` executes that tree.

Lifecycle
---------
1. Construct an :class:`Application` (directly or via :func:`name`).
2. :func:`build` — registers ``--machine-friendly`` and the persistent
   flags, wires ``setup``/``shutdown`` to the root's pre/post-run hooks,
   attaches pending commands, registers the application. A second call
   returns the same root.
3. :meth:`Application.run` — parses, executes and passes the final
   exception through the friendly-error table once.

A single application is not meant to run concurrently: the current
command is one field overwritten by every run.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, NoReturn, TextIO

from rich.markup import escape

from cliweave.cli import exit_codes
from cliweave.cli.console import console
from cliweave.cli.output import get_silent_flag, print_object, register_machine_friendly_flag_to
from cliweave.cli.spinner import execute_with_spinner
from cliweave.cli.table import RowFilter
from cliweave.core.friendly_errors import FriendlyErrors
from cliweave.core.memory import Memory
from cliweave.core.models import OutputMode
from cliweave.core.registry import ApplicationRegistry, default_registry
from cliweave.exceptions import CliweaveError, NotBuiltError
from cliweave.infra.command import Command, Runner
from cliweave.infra.flags import FlagSet

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Application:
    """A command-line application with dual (table / JSON) output."""

    name: str
    """Registry key and root command name. May carry usage text, e.g. ``"app [file]"``."""

    version: str = ""
    description: str = ""
    long: str = ""
    """Long help text; defaults to :attr:`description` at build time."""

    help_template: object | None = None
    """Anything whose ``str()`` is a version template, usually a
    :class:`~cliweave.core.models.HelpTemplate`."""

    show_spinner: bool = False
    """Spin while a command runs, unless in machine-friendly mode."""

    disable_output_format_controller: bool = False
    """Do not register ``--machine-friendly``."""

    persistent_flags: Callable[[FlagSet], None] | None = None
    """Called with the root's persistent flag set at build time."""

    setup: Runner | None = None
    shutdown: Runner | None = None
    friendly_errors: FriendlyErrors | None = None
    memory: Memory | None = None
    registry: ApplicationRegistry | None = None
    """Where :func:`build` registers the application; the process-wide
    :data:`~cliweave.core.registry.default_registry` when omitted."""

    command: Command | None = field(default=None, init=False)
    """The root command, ``None`` until built."""

    _commands: list[Command] = field(default_factory=list, init=False, repr=False)
    _current_command: Command | None = field(default=None, init=False, repr=False)
    _mode: OutputMode = field(default=OutputMode.UNBUILT, init=False, repr=False)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def mode(self) -> OutputMode:
        return self._mode

    @property
    def machine_friendly(self) -> bool:
        """Whether the last parse selected machine-friendly output.

        Raises
        ------
        NotBuiltError
            Before :func:`build`.
        """
        if self._mode is OutputMode.UNBUILT:
            raise NotBuiltError(f"application {self.name!r} has not been built")
        return self._mode is OutputMode.MACHINE_FRIENDLY

    @property
    def current_command(self) -> Command:
        """The command being executed, the root between runs."""
        if self._current_command is None:
            raise NotBuiltError(f"application {self.name!r} has not been built")
        return self._current_command

    def _set_machine_friendly(self, value: Any) -> None:
        self._mode = OutputMode.MACHINE_FRIENDLY if value else OutputMode.HUMAN_FRIENDLY

    def _pre_run(self, cmd: Command, args: list[str]) -> None:
        self._current_command = cmd
        if self.setup is not None:
            self.setup(cmd, args)

    def _post_run(self, cmd: Command, args: list[str]) -> None:
        if self.shutdown is not None:
            self.shutdown(cmd, args)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def build(self) -> Command:
        return build(self)

    def add_command(self, *commands: Command) -> None:
        """Attach *commands* now if built, otherwise at build time."""
        if self.command is None:
            self._commands.extend(commands)
        else:
            self.command.add_command(*commands)

    def find_command(self, args: Sequence[str]) -> tuple[Command, list[str]] | None:
        found = (self.registry or default_registry).find_command(self.name, args)
        return found  # type: ignore[return-value]

    def get_command(self, command_name: str) -> Command | None:
        found = (self.registry or default_registry).get_command(self.name, command_name)
        return found  # type: ignore[return-value]

    def example_text(self, text: str) -> str:
        return f"{self.name} {text}"

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def write(self, text: str) -> int:
        if self.command is None:
            return sys.stdout.write(text)
        return self.command.out_or_stdout().write(text)

    def print(self, fmt: str, *args: Any) -> None:
        """Write ``fmt % args`` as a line, ending it with ``\\r\\n`` unless *fmt* ends in ``\\n``.

        *fmt* is always a ``%`` format, so a literal percent sign is ``%%``.
        """
        if not fmt.endswith("\n"):
            fmt += "\r\n"
        self.write(fmt % args)

    def print_info(self, fmt: str, *args: Any) -> None:
        """Like :meth:`print`, muted by ``--machine-friendly`` or ``--silent``."""
        if self.machine_friendly or get_silent_flag(self._current_command):
            return
        self.print(fmt, *args)

    def print_object(self, value: Any, *table_filters: RowFilter) -> None:
        print_object(self.current_command, value, *table_filters)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def run(self, output: TextIO | None = None, args: Sequence[str] | None = None) -> None:
        """Build if needed and execute the command named by *args*.

        *output* defaults to ``sys.stdout`` and *args* to ``sys.argv[1:]``.
        The final exception, if any, is translated by
        :attr:`friendly_errors` once and re-raised.
        """
        root = build(self)
        root.set_output(output)
        if args is None:
            args = sys.argv[1:]

        self._commands = []

        try:
            if not root.disable_flag_parsing:
                root.parse_flags(args, known_only=True)

            if self.show_spinner and not self.machine_friendly:
                execute_with_spinner(root, args)
            else:
                root.execute(args)
        except Exception as exc:
            translated = (self.friendly_errors or FriendlyErrors()).translate(exc)
            if translated is exc:
                raise
            raise translated from exc


def build(app: Application) -> Command:
    """Finalize *app* into its root command. Idempotent."""
    if app.command is not None:
        return app.command

    if app.friendly_errors is None:
        app.friendly_errors = FriendlyErrors()
    if app.memory is None:
        app.memory = Memory()
    if app.registry is None:
        app.registry = default_registry

    use_text = app.name
    if app.name.rfind("[") < len(app.name.split(" ")[0]):
        use_text = f"{app.name} [command] [flags]"

    if not app.long:
        app.long = app.description

    root = Command(use_text, short=app.description, long=app.long, version=app.version)

    app._mode = OutputMode.HUMAN_FRIENDLY
    if not app.disable_output_format_controller:
        register_machine_friendly_flag_to(root.persistent_flags, app._set_machine_friendly)

    if app.persistent_flags is not None:
        app.persistent_flags(root.persistent_flags)

    root.persistent_pre_run = app._pre_run
    root.persistent_post_run = app._post_run

    if app._commands:
        root.add_command(*app._commands)
        app._commands = []

    if root.has_available_sub_commands():
        root.example = root.commands()[0].example

    if app.help_template is not None:
        template = str(app.help_template)
        if template:
            root.set_version_template(template)

    app._current_command = root
    app.command = root

    app.registry.register(app)
    logger.debug("Built application %r with %d command(s)", app.name, len(root.commands()))
    return root


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

class ApplicationBuilder:
    """Fluent construction of an :class:`Application`.

    Usage::

        app = cliweave.name("todo").description("Todo list").version("1.0.0").get()
    """

    def __init__(self, app: Application) -> None:
        self._app = app

    def get(self) -> Application:
        return self._app

    def description(self, description: str) -> ApplicationBuilder:
        self._app.description = description
        return self

    def version(self, version: str) -> ApplicationBuilder:
        self._app.version = version
        return self

    def setup(self, setup: Runner) -> ApplicationBuilder:
        self._app.setup = setup
        return self

    def shutdown(self, shutdown: Runner) -> ApplicationBuilder:
        self._app.shutdown = shutdown
        return self

    def flags(self, configure: Callable[[FlagSet], None]) -> ApplicationBuilder:
        self._app.persistent_flags = configure
        return self

    def get_flags(self) -> FlagSet:
        return build(self._app).flags()

    def parse(self, *args: str) -> list[str]:
        """Parse *args* against the root flags; return the positionals."""
        return build(self._app).parse_flags(args)

    def run(self, output: TextIO | None = None, args: Sequence[str] | None = None) -> None:
        self._app.run(output, args)


def name(application_name: str) -> ApplicationBuilder:
    """Start building an application called *application_name*."""
    return ApplicationBuilder(Application(name=application_name))


# ---------------------------------------------------------------------------
# Process error boundary
# ---------------------------------------------------------------------------

def main(app: Application, argv: Sequence[str] | None = None) -> int:
    """Run *app* and map the outcome to a process exit code.

    Errors are rendered on stderr; nothing propagates except
    ``SystemExit``.
    """
    try:
        app.run(args=argv)
    except CliweaveError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}")
        return exit_codes.GENERAL_ERROR
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        return exit_codes.KEYBOARD_INTERRUPT
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {escape(str(exc))}"
        )
        return exit_codes.UNEXPECTED_ERROR
    return exit_codes.SUCCESS


def run_and_exit(app: Application, argv: Sequence[str] | None = None) -> NoReturn:
    """Console-script entry point: :func:`main` followed by ``sys.exit``."""
    sys.exit(main(app, argv))
