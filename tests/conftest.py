"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules. Every
system path in the provisioning config is redirected under tmp_path.
"""

import io
import os
from collections.abc import Iterator
from datetime import datetime
from pathlib import Path

import pytest
from hostprep.core.config import ProvisionConfig, RunContext
from hostprep.core.session_log import SessionLog
from hostprep.operators.base import Operator
from hostprep.utils.shell import CommandResult
from rich.console import Console

FIXED_NOW = datetime(2026, 10, 19, 8, 30, 0)


class FakeOperator(Operator):
    """In-memory package operator recording every call."""

    def __init__(self) -> None:
        self.installed: set[str] = set()
        self.failing: set[str] = set()
        self.install_calls: list[str] = []
        self.upgrade_results: list[CommandResult] = [
            CommandResult(stdout="Hit:1 http://deb.debian.org\n", stderr="", returncode=0),
            CommandResult(stdout="0 upgraded\n", stderr="", returncode=0),
        ]
        self.upgrade_calls = 0

    @property
    def name(self) -> str:
        return "fake"

    def is_available(self) -> bool:
        return True

    def is_installed(self, package: str) -> bool:
        return package in self.installed

    def install(self, package: str) -> CommandResult:
        self.install_calls.append(package)
        if package in self.failing:
            return CommandResult(
                stdout="", stderr=f"E: Unable to locate package {package}", returncode=100
            )
        self.installed.add(package)
        return CommandResult(stdout=f"Setting up {package} ...\n", stderr="", returncode=0)

    def upgrade_system(self) -> list[CommandResult]:
        self.upgrade_calls += 1
        return self.upgrade_results


@pytest.fixture
def provision_config(tmp_path: Path) -> ProvisionConfig:
    """Config with every path under tmp_path."""
    (tmp_path / "config").mkdir()
    (tmp_path / "lists").mkdir()
    (tmp_path / "etc" / "ssh").mkdir(parents=True)
    return ProvisionConfig(
        log_dir=tmp_path / "logs",
        config_dir=tmp_path / "config",
        package_list=tmp_path / "lists" / "packages.txt",
        motd_path=tmp_path / "etc" / "motd",
        sshd_config=tmp_path / "etc" / "ssh" / "sshd_config",
    )


@pytest.fixture
def run_context(tmp_path: Path, provision_config: ProvisionConfig) -> RunContext:
    """Run context for user 'alice' owned by the test process."""
    home = tmp_path / "home" / "alice"
    home.mkdir(parents=True)
    return RunContext(
        config=provision_config,
        started=FIXED_NOW,
        username="alice",
        home=home,
        uid=os.getuid(),
        gid=os.getgid(),
    )


@pytest.fixture
def console_output() -> io.StringIO:
    """Buffer receiving mirrored console output."""
    return io.StringIO()


@pytest.fixture
def session(run_context: RunContext, console_output: io.StringIO) -> Iterator[SessionLog]:
    """Open session log with a fixed clock and captured console."""
    log = SessionLog(
        run_context.log_path,
        console=Console(file=console_output, width=200, color_system=None),
        clock=lambda: FIXED_NOW,
    )
    log.open()
    yield log
    log.close()


@pytest.fixture
def fake_operator() -> FakeOperator:
    """Package operator with nothing installed."""
    return FakeOperator()


@pytest.fixture
def sample_sshd_config() -> str:
    """Excerpt of a stock Debian sshd_config."""
    return """\
Include /etc/ssh/sshd_config.d/*.conf

#Port 22
#PermitRootLogin prohibit-password
#PubkeyAuthentication yes

# To disable tunneled clear text passwords, change to no here!
#PasswordAuthentication yes
#PermitEmptyPasswords no

# Change to yes to enable challenge-response passwords (beware issues with
# some PAM modules and threads)
KbdInteractiveAuthentication no
ChallengeResponseAuthentication yes

UsePAM yes
"""
