"""Per-application scratch storage shared between setup, commands and shutdown."""

from __future__ import annotations

from collections.abc import Hashable
from typing import Any


class Memory:
    """A small key/value store.

    Setup hooks typically stash clients or parsed configuration here so
    that leaf commands can pick them up without globals.
    """

    def __init__(self) -> None:
        self._values: dict[Hashable, Any] = {}

    def set(self, key: Hashable, value: Any) -> None:
        self._values[key] = value

    def get(self, key: Hashable, default: Any = None) -> Any:
        return self._values.get(key, default)

    def has(self, key: Hashable) -> bool:
        return key in self._values

    def unset(self, key: Hashable) -> bool:
        """Remove *key*; return whether it was present."""
        return self._values.pop(key, _MISSING) is not _MISSING

    def clear(self) -> None:
        self._values.clear()

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values


_MISSING = object()
