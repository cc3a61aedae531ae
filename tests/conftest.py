"""Shared pytest fixtures and configuration for the cliweave test suite.

Guidelines
----------
* Output is captured through ``io.StringIO`` or ``capsys`` — never a TTY.
* Every test starts and ends with an empty default registry.
* Applications under test prefer their own ``ApplicationRegistry``.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from cliweave.core.registry import default_registry


@pytest.fixture(autouse=True)
def _clean_default_registry() -> Iterator[None]:
    default_registry.clear()
    yield
    default_registry.clear()
