"""Infrastructure layer — command tree engine and JSON encoding.

Rules
-----
* No imports from ``cli``.
* No Rich rendering.
"""

from cliweave.infra.command import Command, Runner
from cliweave.infra.flags import Flag, FlagSet
from cliweave.infra.jsonout import encode_json, write_json

__all__: list[str] = [
    "Command",
    "Flag",
    "FlagSet",
    "Runner",
    "encode_json",
    "write_json",
]
