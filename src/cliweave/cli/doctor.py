"""``cliweave doctor`` — environment diagnostics, in both output modes.

The bundled application doubles as a working example: its single
command renders through :meth:`Application.print_object`, so it answers
``--machine-friendly``, ``--no-pretty``, ``--query`` and ``--silent``.
"""

from __future__ import annotations

import platform
import sys
from dataclasses import dataclass, field
from importlib import metadata

from cliweave.cli.app import Application, run_and_exit
from cliweave.cli.output import can_be_silent, can_print_json
from cliweave.core.models import HelpTemplate
from cliweave.core.registry import ApplicationRegistry
from cliweave.exceptions import CliweaveError
from cliweave.infra.command import Command
from cliweave.version import __version__

OK = "OK"
WARN = "WARN"
FAIL = "FAIL"


@dataclass(frozen=True, slots=True)
class Check:
    """One row of the doctor report."""

    component: str
    value: str = field(metadata={"header": "DETAIL"})
    status: str


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _python_version_check() -> Check:
    major, minor = sys.version_info[:2]
    ok = (major, minor) >= (3, 10)
    return Check("Python", platform.python_version(), OK if ok else FAIL)


def _package_check(distribution: str) -> Check:
    """Report an installed distribution's version; missing is a failure."""
    try:
        return Check(distribution, metadata.version(distribution), OK)
    except metadata.PackageNotFoundError:
        return Check(distribution, "NOT INSTALLED", FAIL)


def _os_check() -> Check:
    system_raw = platform.system()
    system_display = {
        "Windows": "Windows",
        "Linux": "Linux",
        "Darwin": "macOS",
    }.get(system_raw, system_raw)
    return Check("OS", f"{system_display} {platform.release()} ({platform.machine()})", OK)


def collect_checks() -> list[Check]:
    return [
        Check("cliweave", __version__, OK),
        _python_version_check(),
        _package_check("rich"),
        _package_check("jmespath"),
        _os_check(),
    ]


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

def build_doctor_app(registry: ApplicationRegistry | None = None) -> Application:
    """Create the ``cliweave`` demo application (unbuilt)."""
    app = Application(
        name="cliweave",
        version=__version__,
        description="Diagnostics for cliweave-based applications.",
        help_template=HelpTemplate(show_python_version=True),
        registry=registry,
    )

    def run_doctor(cmd: Command, args: list[str]) -> None:
        checks = collect_checks()
        app.print_object(checks)

        failed = [check.component for check in checks if check.status == FAIL]
        if failed:
            raise CliweaveError(
                f"Some checks failed: {', '.join(failed)}.",
                hint="Reinstall with: pip install --upgrade cliweave",
            )
        app.print_info("All checks passed.")

    doctor = Command(
        "doctor",
        short="Report the runtime environment",
        example=app.example_text("doctor --machine-friendly --query \"[?status!='OK']\""),
        run=run_doctor,
    )
    can_be_silent(doctor)
    can_print_json(doctor)
    app.add_command(doctor)
    return app


def cli() -> None:
    """Console-script entry point for ``cliweave``."""
    run_and_exit(build_doctor_app())
