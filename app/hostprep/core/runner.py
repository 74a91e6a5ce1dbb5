"""Provisioning runner.

Runs the provisioning steps in a fixed order:

    init -> privilege check -> system update -> packages -> MOTD
         -> shell rc -> editor rc -> SSH key -> SSH hardening -> done

Only the privilege check can stop a run. Every later step is
best-effort: its outcome is logged and recorded in the RunReport, and
the next step runs regardless.
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Callable
from dataclasses import dataclass

from hostprep.core.config import RunContext
from hostprep.core.fragments import ConfigApplier
from hostprep.core.packages import PackageInstaller, PackageListProcessor
from hostprep.core.session_log import SessionLog
from hostprep.core.ssh_keys import SSHKeyProvisioner
from hostprep.core.sshd import SSHHardener
from hostprep.models.step import RunReport, StepResult, StepStatus
from hostprep.operators.apt import AptOperator
from hostprep.operators.base import Operator

logger = logging.getLogger(__name__)

# Raised by host files and commands; a step hitting one fails on its own
STEP_ERRORS = (OSError, RuntimeError, UnicodeError, subprocess.SubprocessError)


def is_superuser() -> bool:
    """Check if the process runs with effective uid 0."""
    return os.geteuid() == 0


@dataclass(slots=True)
class Components:
    """The collaborators a Runner drives, built from one RunContext."""

    operator: Operator
    packages: PackageListProcessor
    fragments: ConfigApplier
    ssh_keys: SSHKeyProvisioner
    sshd: SSHHardener

    @classmethod
    def build(
        cls,
        context: RunContext,
        session: SessionLog,
        operator: Operator | None = None,
    ) -> Components:
        """Wire up default components for a context.

        Args:
            context: Run context shared by every component.
            session: Session transcript shared by every component.
            operator: Package operator. Defaults to AptOperator.

        Returns:
            Components ready for a Runner.
        """
        operator = operator or AptOperator()
        installer = PackageInstaller(operator, session)
        return cls(
            operator=operator,
            packages=PackageListProcessor(installer, session),
            fragments=ConfigApplier(context, session),
            ssh_keys=SSHKeyProvisioner(context, session),
            sshd=SSHHardener(context, session),
        )


class Runner:
    """Runs every provisioning step against one host."""

    def __init__(
        self,
        context: RunContext,
        session: SessionLog,
        components: Components | None = None,
        privileged: Callable[[], bool] = is_superuser,
    ) -> None:
        """Initialize the runner.

        Args:
            context: Run context.
            session: Session transcript. Opened by run() if not yet open.
            components: Step implementations. Built from context if None.
            privileged: Privilege check.
        """
        self._context = context
        self._session = session
        self._components = components or Components.build(context, session)
        self._privileged = privileged

    def run(self) -> RunReport:
        """Run the full provisioning sequence.

        Returns:
            RunReport with one StepResult per step. ``aborted`` is set
            when the privilege check failed; nothing was mutated then.
        """
        report = RunReport()
        self._session.open()
        self._session.log(
            f"Starting post-installation script. Logged user: {self._context.username}"
        )

        if not self._privileged():
            self._session.log("This script must be run as root.")
            report.aborted = True
            return report

        c = self._components
        steps: list[tuple[str, Callable[[], StepResult]]] = [
            ("System update", self._system_update),
            ("Packages", self._install_packages),
            ("MOTD", c.fragments.apply_motd),
            ("Shell rc", c.fragments.append_shell_rc),
            ("Editor rc", c.fragments.append_editor_rc),
            ("SSH key", c.ssh_keys.provision),
            ("SSH hardening", c.sshd.harden),
        ]
        for name, step in steps:
            report.add(self._run_step(name, step))

        self._session.log("Post-installation script completed.")
        return report

    def _run_step(self, name: str, step: Callable[[], StepResult]) -> StepResult:
        """Run one step, turning unexpected host errors into a failed result."""
        try:
            return step()
        except STEP_ERRORS as e:
            logger.debug("Step %s raised", name, exc_info=True)
            self._session.log(f"{name} failed: {e}")
            return StepResult(name, StepStatus.FAILED, str(e))

    def _system_update(self) -> StepResult:
        """Refresh package indexes and upgrade installed packages."""
        self._session.log("Updating system packages...")
        results = self._components.operator.upgrade_system()
        for result in results:
            self._session.write_raw(result.output)

        failed = next((r for r in results if not r.success), None)
        if failed is not None:
            self._session.log("System update failed.")
            return StepResult(
                "System update", StepStatus.FAILED, f"exited with {failed.returncode}"
            )
        return StepResult("System update", StepStatus.SUCCESS, "packages upgraded")

    def _install_packages(self) -> StepResult:
        """Install every package from the package list."""
        results = self._components.packages.process_list(self._context.config.package_list)
        if results is None:
            return StepResult("Packages", StepStatus.SKIPPED, "package list not found")

        failed = [r.package for r in results if r.failed]
        done = len(results) - len(failed)
        if failed:
            return StepResult(
                "Packages",
                StepStatus.FAILED,
                f"{done} ok, {len(failed)} failed: {', '.join(failed)}",
            )
        return StepResult("Packages", StepStatus.SUCCESS, f"{done} package(s) present")
