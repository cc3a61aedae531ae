"""Structured (JSON) output with optional JMESPath filtering."""

from __future__ import annotations

import dataclasses
import enum
import json
from typing import Any, TextIO

import jmespath
from jmespath.exceptions import JMESPathError

from cliweave.exceptions import SerializationError


def _default(value: Any) -> Any:
    """``json.dumps`` fallback for values the encoder does not know."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    if callable(value):
        raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
    if hasattr(value, "__dict__"):
        return {k: v for k, v in vars(value).items() if not k.startswith("_")}
    return str(value)


def encode_json(value: Any, pretty: bool = True, query: str = "") -> str:
    """Encode *value* as JSON text, applying a JMESPath *query* if given.

    Raises
    ------
    SerializationError
        If *value* cannot be encoded or *query* is not a valid expression.
    """
    try:
        if query:
            # Round-trip first so the query sees plain JSON types only.
            data = json.loads(json.dumps(value, default=_default))
            value = jmespath.search(query, data)

        if pretty:
            return json.dumps(value, default=_default, indent=2)
        return json.dumps(value, default=_default, separators=(",", ":"))
    except JMESPathError as exc:
        raise SerializationError(
            f"invalid query {query!r}: {exc}",
            hint="See https://jmespath.org for the query syntax.",
        ) from exc
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"unable to encode {type(value).__name__} as JSON: {exc}") from exc


def write_json(out: TextIO, value: Any, pretty: bool = True, query: str = "") -> None:
    """Write *value* to *out* as JSON followed by a newline."""
    out.write(encode_json(value, pretty, query) + "\n")
