"""Tests for the application registry (core/registry.py).

Coverage:
* Registration order and same-name overwrite.
* Upward resolution of a command to its application.
* ``find_command`` and the first-child-only ``get_command`` walk.
* Module-level helpers bound to the default registry.
"""

from __future__ import annotations

from cliweave.cli.app import Application
from cliweave.core import registry as registry_module
from cliweave.core.registry import ApplicationRegistry, default_registry
from cliweave.infra.command import Command


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _noop(cmd: Command, args: list[str]) -> None:
    return None


def _built(name: str, registry: ApplicationRegistry, *commands: Command) -> Application:
    app = Application(name=name, registry=registry)
    app.add_command(*commands)
    app.build()
    return app


# ---------------------------------------------------------------------------
# register / get_by_name
# ---------------------------------------------------------------------------

class TestRegister:
    def test_build_registers(self) -> None:
        registry = ApplicationRegistry()
        app = _built("tool", registry)
        assert registry.get_by_name("tool") is app
        assert "tool" in registry

    def test_same_name_overwrites_in_place(self) -> None:
        registry = ApplicationRegistry()
        first = _built("alpha", registry)
        beta = _built("beta", registry)
        replacement = _built("alpha", registry)

        assert len(registry) == 2
        assert list(registry) == [replacement, beta]
        assert registry.get_by_name("alpha") is replacement
        assert registry.get_by_name("alpha") is not first
        assert registry.get_by_name("beta") is beta

    def test_unknown_name_is_none(self) -> None:
        assert ApplicationRegistry().get_by_name("missing") is None

    def test_default_registry_used_when_none_given(self) -> None:
        app = Application(name="tool")
        app.build()
        assert default_registry.get_by_name("tool") is app
        assert registry_module.get_by_name("tool") is app

    def test_clear(self) -> None:
        registry = ApplicationRegistry()
        _built("tool", registry)
        registry.clear()
        assert len(registry) == 0


# ---------------------------------------------------------------------------
# get (upward resolution)
# ---------------------------------------------------------------------------

class TestGet:
    def test_three_levels_deep_resolves_to_root_app(self) -> None:
        registry = ApplicationRegistry()
        level3 = Command("c", run=_noop)
        level2 = Command("b")
        level2.add_command(level3)
        level1 = Command("a")
        level1.add_command(level2)
        app = _built("tool", registry, level1)

        assert registry.get(level3) is app
        assert registry.get(level1) is app
        assert registry.get(app.command) is app  # type: ignore[arg-type]

    def test_unregistered_tree_is_none(self) -> None:
        registry = ApplicationRegistry()
        _built("tool", registry)
        orphan_root = Command("other")
        orphan = Command("leaf", run=_noop)
        orphan_root.add_command(orphan)

        assert registry.get(orphan) is None

    def test_intermediate_name_matches_first(self) -> None:
        registry = ApplicationRegistry()
        inner_leaf = Command("leaf", run=_noop)
        inner = Command("inner")
        inner.add_command(inner_leaf)
        outer = _built("outer", registry, inner)
        inner_app = Application(name="inner", registry=registry)
        registry.register(inner_app)

        assert registry.get(inner_leaf) is inner_app
        assert registry.get(outer.command) is outer  # type: ignore[arg-type]

    def test_module_level_get_uses_default_registry(self) -> None:
        leaf = Command("leaf", run=_noop)
        app = Application(name="tool")
        app.add_command(leaf)
        app.build()
        assert registry_module.get(leaf) is app


# ---------------------------------------------------------------------------
# find_command
# ---------------------------------------------------------------------------

class TestFindCommand:
    def test_resolves_sub_command_and_remaining_args(self) -> None:
        registry = ApplicationRegistry()
        sub = Command("sub", run=_noop)
        _built("tool", registry, sub)

        found = registry.find_command("tool", ["sub", "x", "y"])
        assert found is not None
        cmd, rest = found
        assert cmd is sub
        assert rest == ["x", "y"]

    def test_unknown_application_is_none(self) -> None:
        assert ApplicationRegistry().find_command("missing", ["sub"]) is None

    def test_unknown_command_is_none(self) -> None:
        registry = ApplicationRegistry()
        _built("tool", registry, Command("sub", run=_noop))
        assert registry.find_command("tool", ["nope"]) is None

    def test_application_method_delegates(self) -> None:
        registry = ApplicationRegistry()
        sub = Command("sub", run=_noop)
        app = _built("tool", registry, sub)
        assert app.find_command(["sub"]) == (sub, [])


# ---------------------------------------------------------------------------
# get_command (first-child-only depth-first walk)
# ---------------------------------------------------------------------------

class TestGetCommand:
    def test_direct_first_child(self) -> None:
        registry = ApplicationRegistry()
        first = Command("first", run=_noop)
        _built("tool", registry, first, Command("second", run=_noop))
        assert registry.get_command("tool", "first") is first

    def test_first_child_chain(self) -> None:
        registry = ApplicationRegistry()
        target = Command("target", run=_noop)
        first = Command("first")
        first.add_command(target, Command("other", run=_noop))
        _built("tool", registry, first)
        assert registry.get_command("tool", "target") is target

    def test_second_child_of_first_child_is_not_found(self) -> None:
        registry = ApplicationRegistry()
        target = Command("target", run=_noop)
        first = Command("first")
        first.add_command(Command("decoy", run=_noop), target)
        _built("tool", registry, first, Command("second", run=_noop))

        assert registry.get_command("tool", "target") is None

    def test_second_child_of_root_is_not_found(self) -> None:
        registry = ApplicationRegistry()
        _built("tool", registry, Command("first", run=_noop), Command("second", run=_noop))
        assert registry.get_command("tool", "second") is None

    def test_unknown_application_is_none(self) -> None:
        assert ApplicationRegistry().get_command("missing", "sub") is None

    def test_application_method_and_module_helper(self) -> None:
        first = Command("first", run=_noop)
        app = Application(name="tool")
        app.add_command(first)
        app.build()
        assert app.get_command("first") is first
        assert registry_module.get_command("tool", "first") is first
        assert registry_module.find_command("tool", ["first"]) == (first, [])
