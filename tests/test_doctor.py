"""Tests for the bundled ``cliweave doctor`` application (cli/doctor.py).

Coverage:
* Individual check functions return correct rows.
* The command renders a table or JSON depending on the flags.
* Failing checks surface as a CliweaveError / exit code 1.
"""

from __future__ import annotations

import io
import json
from importlib import metadata
from unittest.mock import MagicMock, patch

import pytest

from cliweave.cli import exit_codes
from cliweave.cli.app import Application, main
from cliweave.cli.doctor import (
    FAIL,
    OK,
    Check,
    _os_check,
    _package_check,
    _python_version_check,
    build_doctor_app,
    cli,
    collect_checks,
)
from cliweave.core.registry import ApplicationRegistry
from cliweave.exceptions import CliweaveError
from cliweave.version import __version__


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _doctor() -> Application:
    return build_doctor_app(ApplicationRegistry())


def _run(*args: str) -> str:
    out = io.StringIO()
    _doctor().run(out, list(args))
    return out.getvalue()


# ---------------------------------------------------------------------------
# Individual check functions
# ---------------------------------------------------------------------------

class TestChecks:
    def test_python(self) -> None:
        check = _python_version_check()
        assert check.component == "Python"
        assert check.status == OK

    def test_installed_package(self) -> None:
        check = _package_check("rich")
        assert check.value == metadata.version("rich")
        assert check.status == OK

    @patch("cliweave.cli.doctor.metadata.version", side_effect=metadata.PackageNotFoundError)
    def test_missing_package(self, _mock_version: MagicMock) -> None:
        check = _package_check("jmespath")
        assert check.value == "NOT INSTALLED"
        assert check.status == FAIL

    @patch("cliweave.cli.doctor.platform.machine", return_value="arm64")
    @patch("cliweave.cli.doctor.platform.release", return_value="23.4.0")
    @patch("cliweave.cli.doctor.platform.system", return_value="Darwin")
    def test_darwin_is_displayed_as_macos(
        self,
        _mock_system: MagicMock,
        _mock_release: MagicMock,
        _mock_machine: MagicMock,
    ) -> None:
        assert _os_check().value == "macOS 23.4.0 (arm64)"

    def test_collect_starts_with_own_version(self) -> None:
        checks = collect_checks()
        assert checks[0] == Check("cliweave", __version__, OK)
        assert [c.component for c in checks] == ["cliweave", "Python", "rich", "jmespath", "OS"]


# ---------------------------------------------------------------------------
# Command output
# ---------------------------------------------------------------------------

class TestDoctorCommand:
    def test_table_output(self) -> None:
        output = _run("doctor")
        for expected in ("COMPONENT", "DETAIL", "STATUS", "rich", "jmespath"):
            assert expected in output
        assert output.endswith("All checks passed.\r\n")

    def test_silent_mutes_summary(self) -> None:
        assert "All checks passed." not in _run("doctor", "--silent")

    def test_machine_friendly_json(self) -> None:
        output = _run("doctor", "--machine-friendly")
        rows = json.loads(output)
        assert [row["component"] for row in rows] == [
            "cliweave", "Python", "rich", "jmespath", "OS",
        ]
        assert set(rows[0]) == {"component", "value", "status"}
        assert "All checks passed." not in output

    def test_machine_friendly_compact_query(self) -> None:
        output = _run("doctor", "--machine-friendly", "--no-pretty", "-q", "[?status!='OK'].component")
        assert output == "[]\n"

    @patch("cliweave.cli.doctor.collect_checks", return_value=[Check("rich", "NOT INSTALLED", FAIL)])
    def test_failure_raises(self, _mock_checks: MagicMock) -> None:
        with pytest.raises(CliweaveError, match="Some checks failed: rich."):
            _run("doctor")

    def test_version_output(self) -> None:
        output = _run("--version")
        assert output.startswith(f"cliweave version {__version__}\n>>>> build\n")
        assert "python" in output

    def test_root_help_shows_example(self) -> None:
        output = _run()
        assert "Available Commands:" in output
        assert "cliweave doctor --machine-friendly" in output


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

class TestEntryPoints:
    def test_main_success(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(_doctor(), ["doctor", "--machine-friendly"]) == exit_codes.SUCCESS
        assert json.loads(capsys.readouterr().out)[0]["component"] == "cliweave"

    @patch("cliweave.cli.doctor.collect_checks", return_value=[Check("rich", "NOT INSTALLED", FAIL)])
    def test_main_failure(
        self, _mock_checks: MagicMock, capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert main(_doctor(), ["doctor"]) == exit_codes.GENERAL_ERROR
        err = capsys.readouterr().err
        assert "Some checks failed" in err
        assert "pip install --upgrade cliweave" in err

    def test_cli_exits(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.argv", ["cliweave", "doctor", "--silent"])
        with pytest.raises(SystemExit) as exc_info:
            cli()
        assert exc_info.value.code == exit_codes.SUCCESS
