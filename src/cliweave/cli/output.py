"""Output-format controller.

Every command answers in one of two modes:

* **human-friendly** (default) — values are rendered as Rich tables;
* **machine-friendly** (``--machine-friendly``) — values are written as
  JSON, pretty-printed unless ``--no-pretty`` is given and filtered by a
  JMESPath ``--query`` when one is given.

Flags are read with the ``get_*_flag`` helpers below, which never fail:
a flag that is not defined on a command reads as ``False`` / ``""``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from cliweave.cli.table import RowFilter, print_table
from cliweave.exceptions import FlagError
from cliweave.infra.command import Command
from cliweave.infra.flags import Flag, FlagSet
from cliweave.infra.jsonout import write_json

MACHINE_FRIENDLY_FLAG = "machine-friendly"
SILENT_FLAG = "silent"
JSON_NO_PRETTY_FLAG = "no-pretty"
JSON_QUERY_FLAG = "query"


# ---------------------------------------------------------------------------
# --machine-friendly
# ---------------------------------------------------------------------------

def get_machine_friendly_flag_from(flag_set: FlagSet) -> bool:
    try:
        return flag_set.get_bool(MACHINE_FRIENDLY_FLAG)
    except FlagError:
        return False


def get_machine_friendly_flag(cmd: Command) -> bool:
    return get_machine_friendly_flag_from(cmd.flags())


def register_machine_friendly_flag_to(
    flag_set: FlagSet,
    on_set: Callable[[Any], None] | None = None,
) -> Flag:
    """Add ``--machine-friendly`` to *flag_set* unless it is already there."""
    existing = flag_set.lookup(MACHINE_FRIENDLY_FLAG)
    if existing is not None:
        return existing
    return flag_set.add_bool(
        MACHINE_FRIENDLY_FLAG,
        False,
        f"--{MACHINE_FRIENDLY_FLAG} to output JSON results and hide all the info messages",
        on_set=on_set,
    )


def register_machine_friendly_flag(
    cmd: Command,
    on_set: Callable[[Any], None] | None = None,
) -> Flag:
    return register_machine_friendly_flag_to(cmd.local_flags, on_set)


# ---------------------------------------------------------------------------
# --silent
# ---------------------------------------------------------------------------

def can_be_silent(cmd: Command) -> Flag:
    """Give *cmd* a ``--silent``/``-s`` flag that mutes info messages."""
    existing = cmd.local_flags.lookup(SILENT_FLAG)
    if existing is not None:
        return existing
    return cmd.local_flags.add_bool(
        SILENT_FLAG, False, "run in silent mode, no info output", shorthand="s",
    )


def get_silent_flag(cmd: Command | None) -> bool:
    if cmd is None:
        return False
    try:
        return cmd.flags().get_bool(SILENT_FLAG)
    except FlagError:
        return False


# ---------------------------------------------------------------------------
# --no-pretty / --query
# ---------------------------------------------------------------------------

def can_print_json(cmd: Command) -> tuple[Flag, Flag]:
    """Give *cmd* the ``--no-pretty`` and ``--query``/``-q`` flags."""
    flags = cmd.local_flags
    no_pretty = flags.lookup(JSON_NO_PRETTY_FLAG) or flags.add_bool(
        JSON_NO_PRETTY_FLAG, False, f"--{JSON_NO_PRETTY_FLAG} to disable pretty JSON output",
    )
    query = flags.lookup(JSON_QUERY_FLAG) or flags.add_string(
        JSON_QUERY_FLAG, "", "a JMESPath query expression to filter the JSON output",
        shorthand="q",
    )
    return no_pretty, query


def get_json_no_pretty_flag(cmd: Command) -> bool:
    try:
        return cmd.flags().get_bool(JSON_NO_PRETTY_FLAG)
    except FlagError:
        return False


def get_json_query_flag(cmd: Command) -> str:
    try:
        return cmd.flags().get_string(JSON_QUERY_FLAG)
    except FlagError:
        return ""


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def print_object(cmd: Command, value: Any, *table_filters: RowFilter) -> None:
    """Render *value* on the output of *cmd*'s tree.

    *table_filters* only apply to the table; ``--no-pretty`` and
    ``--query`` only apply to JSON.

    Raises
    ------
    SerializationError
        When *value* cannot be encoded or the query is invalid.
    """
    out = cmd.root().out_or_stdout()
    if get_machine_friendly_flag(cmd):
        pretty = not get_json_no_pretty_flag(cmd)
        query = get_json_query_flag(cmd)
        write_json(out, value, pretty, query)
        return

    print_table(out, value, *table_filters)
