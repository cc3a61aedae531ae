"""Command tree engine built on :mod:`argparse`.

A :class:`Command` is a named node with optional children, local and
persistent flags, lifecycle hooks and a ``run`` callable. The root of a
tree resolves an argument vector to the deepest matching command,
parses that command's flags (its own plus every persistent flag of its
ancestors) and runs it.

Execution order for the resolved command ``cmd``::

    nearest persistent_pre_run  ->  cmd.run  ->  nearest persistent_post_run

where *nearest* means the first hook found walking from ``cmd`` up to
the root.
"""

from __future__ import annotations

import argparse
import logging
import string
import sys
from collections.abc import Callable, Iterable, Sequence
from typing import NoReturn, TextIO

from cliweave.exceptions import CommandNotFoundError, FlagError
from cliweave.infra.flags import FlagSet

logger = logging.getLogger(__name__)

Runner = Callable[["Command", list[str]], None]
"""Signature of ``run`` and lifecycle hooks: ``(command, positional_args)``."""

DEFAULT_VERSION_TEMPLATE = "${name} version ${version}\n"


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of printing usage and exiting."""

    def error(self, message: str) -> NoReturn:
        raise FlagError(message, hint=f"Run '{self.prog} --help' for usage.")


class Command:
    """A node of a command tree.

    Parameters
    ----------
    use:
        One-line usage text; its first word is the command name.
    short, long:
        Short and long help text.
    example:
        Example invocations shown in help output.
    run:
        Callable invoked with ``(command, positional_args)``. Commands
        without ``run`` only group children and print help.
    aliases:
        Alternative names accepted on the command line.
    version:
        When set on the root, a ``--version`` flag is added.
    """

    def __init__(
        self,
        use: str,
        short: str = "",
        long: str = "",
        example: str = "",
        run: Runner | None = None,
        *,
        aliases: Iterable[str] = (),
        version: str = "",
    ) -> None:
        self.use = use
        self.short = short
        self.long = long
        self.example = example
        self.run = run
        self.aliases: tuple[str, ...] = tuple(aliases)
        self.version = version

        self.persistent_pre_run: Runner | None = None
        self.persistent_post_run: Runner | None = None
        self.disable_flag_parsing: bool = False

        self.local_flags = FlagSet(self.name)
        self.persistent_flags = FlagSet(self.name)
        self.local_flags.add_bool("help", False, f"help for {self.name}", shorthand="h")

        self._parent: Command | None = None
        self._commands: list[Command] = []
        self._output: TextIO | None = None
        self._version_template: str = ""

    def __repr__(self) -> str:
        return f"Command(use={self.use!r})"

    # ------------------------------------------------------------------
    # Tree
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self.use.split(" ", 1)[0]

    @property
    def parent(self) -> Command | None:
        return self._parent

    def has_parent(self) -> bool:
        return self._parent is not None

    def root(self) -> Command:
        node = self
        while node._parent is not None:
            node = node._parent
        return node

    def commands(self) -> list[Command]:
        return list(self._commands)

    def add_command(self, *commands: Command) -> None:
        for cmd in commands:
            if cmd is self:
                raise ValueError("command can't be a child of itself")
            cmd._parent = self
            self._commands.append(cmd)

    def has_available_sub_commands(self) -> bool:
        return bool(self._commands)

    def is_runnable(self) -> bool:
        return self.run is not None

    def command_path(self) -> str:
        names: list[str] = []
        node: Command | None = self
        while node is not None:
            names.append(node.name)
            node = node._parent
        return " ".join(reversed(names))

    def _find_next(self, name: str) -> Command | None:
        for cmd in self._commands:
            if cmd.name == name or name in cmd.aliases:
                return cmd
        return None

    # ------------------------------------------------------------------
    # Flags
    # ------------------------------------------------------------------

    def inherited_flags(self) -> FlagSet:
        """Persistent flags of every ancestor, nearest first."""
        inherited = FlagSet(self.name)
        node = self._parent
        while node is not None:
            inherited = inherited.merged(node.persistent_flags)
            node = node._parent
        return inherited

    def flags(self) -> FlagSet:
        """Every flag this command accepts: local, own persistent, inherited."""
        return self.local_flags.merged(self.persistent_flags, self.inherited_flags())

    def parse_flags(self, args: Sequence[str], *, known_only: bool = False) -> list[str]:
        """Parse *args* into this command's flags and return the positionals.

        With ``known_only`` unknown flags are ignored; that mode is used to
        peek at root flags before the target command is resolved.

        Raises
        ------
        FlagError
            On unknown flags (unless ``known_only``) or invalid values.
        """
        flag_set = self.flags()
        parser = _ArgumentParser(prog=self.command_path(), add_help=False, allow_abbrev=False)
        for flag in flag_set:
            options = [f"--{flag.name}"]
            if flag.shorthand:
                options.append(f"-{flag.shorthand}")
            if flag.kind is bool:
                parser.add_argument(
                    *options, dest=flag.name, action="store_true",
                    default=argparse.SUPPRESS, help=flag.usage,
                )
            else:
                parser.add_argument(
                    *options, dest=flag.name, default=argparse.SUPPRESS,
                    metavar=flag.kind.__name__, help=flag.usage,
                )
        parser.add_argument("args", nargs="*", help=argparse.SUPPRESS)

        if known_only:
            namespace, _unknown = parser.parse_known_args(list(args))
        else:
            namespace = parser.parse_intermixed_args(list(args))

        parsed = vars(namespace)
        for flag in flag_set:
            if flag.name in parsed:
                flag.set(parsed[flag.name])
            else:
                flag.reset()
        return list(parsed.get("args") or [])

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def set_output(self, output: TextIO | None) -> None:
        self._output = output

    def out_or_stdout(self) -> TextIO:
        node: Command | None = self
        while node is not None:
            if node._output is not None:
                return node._output
            node = node._parent
        return sys.stdout

    def set_version_template(self, template: str) -> None:
        self._version_template = template

    def version_string(self) -> str:
        template = string.Template(self._version_template or DEFAULT_VERSION_TEMPLATE)
        return template.safe_substitute(name=self.name, version=self.version)

    def usage_string(self) -> str:
        """Render help text for this command."""
        lines: list[str] = []
        description = self.long or self.short
        if description:
            lines += [description.rstrip(), ""]

        lines.append("Usage:")
        if self.is_runnable():
            lines.append(f"  {self.command_path()} [flags]")
        if self.has_available_sub_commands():
            lines.append(f"  {self.command_path()} [command]")

        if self._commands:
            width = max(len(cmd.name) for cmd in self._commands)
            lines += ["", "Available Commands:"]
            lines += [f"  {cmd.name:<{width}}   {cmd.short}".rstrip() for cmd in self._commands]

        if self.example:
            lines += ["", "Examples:", self.example.rstrip()]

        local = self.local_flags.merged(self.persistent_flags)
        if len(local):
            lines += ["", "Flags:", *_flag_lines(local)]
        inherited = self.inherited_flags()
        if len(inherited):
            lines += ["", "Global Flags:", *_flag_lines(inherited)]

        if self.has_available_sub_commands():
            lines += [
                "",
                f'Use "{self.command_path()} [command] --help" '
                "for more information about a command.",
            ]
        return "\n".join(lines) + "\n"

    def print_help(self) -> None:
        self.out_or_stdout().write(self.usage_string())

    # ------------------------------------------------------------------
    # Resolution and execution
    # ------------------------------------------------------------------

    def find(self, args: Sequence[str]) -> tuple[Command, list[str]]:
        """Resolve *args* to a command of this tree.

        Returns the deepest command whose names were consumed and the
        remaining arguments (flags included).

        Raises
        ------
        CommandNotFoundError
            When a non-runnable command with children is followed by an
            argument that names none of them.
        """
        cmd = self
        remaining = list(args)
        while True:
            positionals = _strip_flags(remaining, cmd.flags())
            if not positionals:
                break
            child = cmd._find_next(positionals[0])
            if child is None:
                break
            remaining = _args_minus_first(remaining, positionals[0], cmd.flags())
            cmd = child

        if not cmd.is_runnable() and cmd.has_available_sub_commands():
            positionals = _strip_flags(remaining, cmd.flags())
            if positionals:
                raise CommandNotFoundError(
                    f'unknown command "{positionals[0]}" for "{cmd.command_path()}"',
                    hint=f"Run '{cmd.command_path()} --help' for usage.",
                )
        return cmd, remaining

    def execute(self, args: Sequence[str] | None = None) -> None:
        """Resolve, parse and run a command of this command's tree.

        Exceptions raised by hooks or ``run`` propagate unchanged.
        """
        root = self.root()
        if args is None:
            args = sys.argv[1:]
        if root.version and "version" not in root.local_flags:
            root.local_flags.add_bool("version", False, f"version for {root.name}")

        cmd, remaining = root.find(args)
        logger.debug("Executing %r with %r", cmd.command_path(), remaining)

        if cmd.disable_flag_parsing:
            positionals = list(remaining)
        else:
            positionals = cmd.parse_flags(remaining)
            if cmd.local_flags.get_bool("help"):
                cmd.print_help()
                return
            if cmd is root and root.version and root.local_flags.get_bool("version"):
                root.out_or_stdout().write(root.version_string())
                return

        run = cmd.run
        if run is None:
            cmd.print_help()
            return

        pre_run = cmd._nearest_hook("persistent_pre_run")
        if pre_run is not None:
            pre_run(cmd, positionals)

        run(cmd, positionals)

        post_run = cmd._nearest_hook("persistent_post_run")
        if post_run is not None:
            post_run(cmd, positionals)

    def _nearest_hook(self, attribute: str) -> Runner | None:
        node: Command | None = self
        while node is not None:
            hook: Runner | None = getattr(node, attribute)
            if hook is not None:
                return hook
            node = node._parent
        return None


# ---------------------------------------------------------------------------
# Argument helpers
# ---------------------------------------------------------------------------

def _positional_indexes(args: Sequence[str], flag_set: FlagSet) -> list[int]:
    """Indexes of *args* that are neither flags nor flag values."""
    indexes: list[int] = []
    i = 0
    while i < len(args):
        token = args[i]
        if token == "--":
            break
        if token.startswith("--"):
            flag = flag_set.lookup(token[2:])
            if "=" not in token and flag is not None and flag.kind is not bool:
                i += 1
        elif token.startswith("-") and token != "-":
            flag = flag_set.lookup_shorthand(token[1:2])
            if len(token) == 2 and flag is not None and flag.kind is not bool:
                i += 1
        else:
            indexes.append(i)
        i += 1
    return indexes


def _strip_flags(args: Sequence[str], flag_set: FlagSet) -> list[str]:
    return [args[i] for i in _positional_indexes(args, flag_set)]


def _args_minus_first(args: Sequence[str], name: str, flag_set: FlagSet) -> list[str]:
    remaining = list(args)
    for i in _positional_indexes(args, flag_set):
        if args[i] == name:
            del remaining[i]
            break
    return remaining


def _flag_lines(flag_set: FlagSet) -> list[str]:
    rendered: list[tuple[str, str]] = []
    for flag in flag_set:
        head = f"-{flag.shorthand}, --{flag.name}" if flag.shorthand else f"    --{flag.name}"
        if flag.kind is not bool:
            head += f" {flag.kind.__name__}"
        rendered.append((head, flag.usage))
    width = max(len(head) for head, _ in rendered)
    return [f"  {head:<{width}}   {usage}".rstrip() for head, usage in rendered]
