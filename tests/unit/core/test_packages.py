"""Unit tests for list-driven package installation."""

import subprocess
from pathlib import Path
from typing import Any

import pytest
from hostprep.core.config import RunContext
from hostprep.core.packages import PackageInstaller, PackageListProcessor, parse_package_list
from hostprep.core.session_log import SessionLog
from hostprep.models.package import PackageOutcome


def _log_text(run_context: RunContext) -> str:
    return run_context.log_path.read_text()


class TestParsePackageList:
    """Tests for parse_package_list function."""

    def test_skips_comments_and_blank_lines(self) -> None:
        """Comment and blank lines never become package names."""
        text = "curl\n# comment\n\ngit\n"

        assert parse_package_list(text) == ["curl", "git"]

    def test_trims_whitespace(self) -> None:
        """Names are trimmed; indented comments are still comments."""
        text = "  htop  \n   # indented comment\n\t\nvim\t\n"

        assert parse_package_list(text) == ["htop", "vim"]

    def test_keeps_order_and_duplicates(self) -> None:
        """File order is preserved and duplicates are kept."""
        assert parse_package_list("git\ncurl\ngit") == ["git", "curl", "git"]

    def test_missing_trailing_newline(self) -> None:
        """The last line is read even without a newline."""
        assert parse_package_list("curl\ngit") == ["curl", "git"]


class TestPackageInstaller:
    """Tests for PackageInstaller class."""

    def test_already_installed(
        self, fake_operator: Any, session: SessionLog, run_context: RunContext
    ) -> None:
        """Installed packages are not reinstalled."""
        fake_operator.installed.add("curl")

        result = PackageInstaller(fake_operator, session).ensure_installed("curl")

        assert result.outcome == PackageOutcome.ALREADY_INSTALLED
        assert fake_operator.install_calls == []
        assert "curl is already installed." in _log_text(run_context)

    def test_installs_missing_package(
        self, fake_operator: Any, session: SessionLog, run_context: RunContext
    ) -> None:
        """Missing packages are installed and the output is logged."""
        result = PackageInstaller(fake_operator, session).ensure_installed("git")

        assert result.outcome == PackageOutcome.INSTALLED
        assert fake_operator.install_calls == ["git"]
        log = _log_text(run_context)
        assert "Installing git..." in log
        assert "Setting up git ..." in log
        assert "git successfully installed." in log

    def test_failure_is_recorded_not_raised(
        self, fake_operator: Any, session: SessionLog, run_context: RunContext
    ) -> None:
        """A failed install returns FAILED with the apt error."""
        fake_operator.failing.add("nope")

        result = PackageInstaller(fake_operator, session).ensure_installed("nope")

        assert result.outcome == PackageOutcome.FAILED
        assert result.error == "E: Unable to locate package nope"
        assert "Failed to install nope." in _log_text(run_context)

    def test_single_attempt(self, fake_operator: Any, session: SessionLog) -> None:
        """Failures are not retried."""
        fake_operator.failing.add("nope")

        PackageInstaller(fake_operator, session).ensure_installed("nope")

        assert fake_operator.install_calls == ["nope"]

    def test_unavailable_package_manager(
        self, fake_operator: Any, session: SessionLog, run_context: RunContext
    ) -> None:
        """An operator that cannot run yields a FAILED result."""

        def boom(package: str) -> None:
            raise RuntimeError("APT package manager is not available on this system")

        fake_operator.install = boom

        result = PackageInstaller(fake_operator, session).ensure_installed("git")

        assert result.failed
        assert "not available" in (result.error or "")
        assert "Failed to install git." in _log_text(run_context)


class TestPackageListProcessor:
    """Tests for PackageListProcessor class."""

    @pytest.fixture
    def processor(self, fake_operator: Any, session: SessionLog) -> PackageListProcessor:
        """Processor backed by the fake operator."""
        return PackageListProcessor(PackageInstaller(fake_operator, session), session)

    def test_installs_listed_packages_in_order(
        self,
        processor: PackageListProcessor,
        fake_operator: Any,
        run_context: RunContext,
    ) -> None:
        """Only real entries reach the installer, in file order."""
        path = run_context.config.package_list
        path.write_text("curl\n# comment\n\ngit\n")

        results = processor.process_list(path)

        assert fake_operator.install_calls == ["curl", "git"]
        assert results is not None
        assert [r.package for r in results] == ["curl", "git"]
        assert f"Reading package list from {path}" in _log_text(run_context)

    def test_missing_list_is_skipped(
        self,
        processor: PackageListProcessor,
        fake_operator: Any,
        run_context: RunContext,
        tmp_path: Path,
    ) -> None:
        """A missing list file logs and installs nothing."""
        path = tmp_path / "lists" / "absent.txt"

        results = processor.process_list(path)

        assert results is None
        assert fake_operator.install_calls == []
        assert (
            f"Package list file {path} not found. Skipping package installation."
            in _log_text(run_context)
        )

    def test_failures_do_not_stop_the_list(
        self,
        processor: PackageListProcessor,
        fake_operator: Any,
        run_context: RunContext,
    ) -> None:
        """A failing package doesn't prevent later ones."""
        fake_operator.failing.add("broken")
        path = run_context.config.package_list
        path.write_text("broken\ncurl\n")

        results = processor.process_list(path)

        assert results is not None
        assert [r.outcome for r in results] == [PackageOutcome.FAILED, PackageOutcome.INSTALLED]
        assert fake_operator.install_calls == ["broken", "curl"]

    def test_query_error_fails_only_that_package(
        self,
        processor: PackageListProcessor,
        fake_operator: Any,
        run_context: RunContext,
    ) -> None:
        """A dpkg query that cannot run fails its package; the next still installs."""
        query = fake_operator.is_installed

        def flaky(package: str) -> bool:
            if package == "locked":
                raise subprocess.TimeoutExpired(["dpkg", "-s", package], 60)
            return query(package)

        fake_operator.is_installed = flaky
        path = run_context.config.package_list
        path.write_text("locked\ncurl\n")

        results = processor.process_list(path)

        assert results is not None
        assert [r.outcome for r in results] == [PackageOutcome.FAILED, PackageOutcome.INSTALLED]
        assert fake_operator.install_calls == ["curl"]
        assert "Failed to install locked." in _log_text(run_context)

    def test_non_utf8_comment_is_skipped(
        self,
        processor: PackageListProcessor,
        fake_operator: Any,
        run_context: RunContext,
    ) -> None:
        """A Latin-1 byte in a comment doesn't stop the list."""
        path = run_context.config.package_list
        path.write_bytes(b"curl\n# caf\xe9\ngit\n")

        results = processor.process_list(path)

        assert results is not None
        assert fake_operator.install_calls == ["curl", "git"]
