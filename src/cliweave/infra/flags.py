"""Typed command-line flags and flag sets.

A :class:`FlagSet` only *describes* flags and holds their current
values; parsing is done by :class:`~cliweave.infra.command.Command`,
which feeds the parsed values back through :meth:`Flag.set`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

from cliweave.exceptions import FlagError

_TRUE_STRINGS = frozenset({"1", "t", "true", "y", "yes", "on"})
_FALSE_STRINGS = frozenset({"0", "f", "false", "n", "no", "off", ""})


def _convert(kind: type, name: str, raw: Any) -> Any:
    """Coerce *raw* to *kind* or raise :class:`FlagError`."""
    if kind is bool:
        if isinstance(raw, bool):
            return raw
        text = str(raw).strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        raise FlagError(f'invalid argument "{raw}" for "--{name}" flag: not a boolean')
    if kind is int:
        try:
            return int(raw)
        except (TypeError, ValueError) as exc:
            raise FlagError(f'invalid argument "{raw}" for "--{name}" flag: not an integer') from exc
    return str(raw)


# ---------------------------------------------------------------------------
# Flag
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class Flag:
    """A single named flag.

    ``on_set`` is called with the new value every time the flag is set
    or reset, which lets an owner mirror the flag into its own state.
    """

    name: str
    kind: type
    default: Any
    usage: str = ""
    shorthand: str | None = None
    on_set: Callable[[Any], None] | None = None
    value: Any = field(init=False)
    changed: bool = field(init=False, default=False)

    def __post_init__(self) -> None:
        self.value = self.default

    def set(self, raw: Any) -> None:
        self.value = _convert(self.kind, self.name, raw)
        self.changed = True
        if self.on_set is not None:
            self.on_set(self.value)

    def reset(self) -> None:
        """Restore the default value and clear :attr:`changed`."""
        self.value = self.default
        self.changed = False
        if self.on_set is not None:
            self.on_set(self.value)


# ---------------------------------------------------------------------------
# FlagSet
# ---------------------------------------------------------------------------

class FlagSet:
    """An ordered collection of uniquely named flags."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._flags: dict[str, Flag] = {}

    # ------------------------------------------------------------------
    # Definition
    # ------------------------------------------------------------------

    def add(self, flag: Flag) -> Flag:
        if flag.name in self._flags:
            raise FlagError(f"{self.name} flag redefined: {flag.name}")
        if flag.shorthand and self.lookup_shorthand(flag.shorthand) is not None:
            raise FlagError(
                f"unable to redefine {flag.shorthand!r} shorthand in {self.name!r} flagset",
            )
        self._flags[flag.name] = flag
        return flag

    def add_bool(
        self,
        name: str,
        default: bool = False,
        usage: str = "",
        *,
        shorthand: str | None = None,
        on_set: Callable[[Any], None] | None = None,
    ) -> Flag:
        return self.add(Flag(name, bool, default, usage, shorthand, on_set))

    def add_string(
        self,
        name: str,
        default: str = "",
        usage: str = "",
        *,
        shorthand: str | None = None,
        on_set: Callable[[Any], None] | None = None,
    ) -> Flag:
        return self.add(Flag(name, str, default, usage, shorthand, on_set))

    def add_int(
        self,
        name: str,
        default: int = 0,
        usage: str = "",
        *,
        shorthand: str | None = None,
        on_set: Callable[[Any], None] | None = None,
    ) -> Flag:
        return self.add(Flag(name, int, default, usage, shorthand, on_set))

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def lookup(self, name: str) -> Flag | None:
        return self._flags.get(name)

    def lookup_shorthand(self, shorthand: str) -> Flag | None:
        for flag in self._flags.values():
            if flag.shorthand == shorthand:
                return flag
        return None

    def _typed(self, name: str, kind: type) -> Flag:
        flag = self.lookup(name)
        if flag is None:
            raise FlagError(f"flag accessed but not defined: {name}")
        if flag.kind is not kind:
            raise FlagError(
                f"trying to get {kind.__name__} value of flag of type {flag.kind.__name__}",
            )
        return flag

    def get_bool(self, name: str) -> bool:
        return bool(self._typed(name, bool).value)

    def get_string(self, name: str) -> str:
        return str(self._typed(name, str).value)

    def get_int(self, name: str) -> int:
        return int(self._typed(name, int).value)

    def set(self, name: str, value: Any) -> None:
        flag = self.lookup(name)
        if flag is None:
            raise FlagError(f"no such flag -{name}")
        flag.set(value)

    def merged(self, *others: FlagSet) -> FlagSet:
        """Return a view over this set and *others*.

        The view shares :class:`Flag` objects with its sources, so values
        set through either side are visible on both. When a name is
        defined more than once the earliest set wins.
        """
        view = FlagSet(self.name)
        for flag_set in (self, *others):
            for flag in flag_set:
                if flag.name not in view._flags:
                    view._flags[flag.name] = flag
        return view

    def __iter__(self) -> Iterator[Flag]:
        return iter(list(self._flags.values()))

    def __len__(self) -> int:
        return len(self._flags)

    def __contains__(self, name: object) -> bool:
        return name in self._flags
