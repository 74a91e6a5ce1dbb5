"""List-driven package installation.

PackageInstaller ensures one package is installed. PackageListProcessor
reads a package list file and hands each entry to the installer. Install
failures are logged and returned, never raised, so one bad package
doesn't stop the rest.
"""

import logging
import subprocess
from pathlib import Path

from hostprep.core.session_log import SessionLog
from hostprep.models.package import PackageOutcome, PackageResult
from hostprep.operators.base import Operator

logger = logging.getLogger(__name__)


def parse_package_list(text: str) -> list[str]:
    """Extract package names from package list text.

    Blank lines and lines whose first non-whitespace character is ``#``
    are ignored. Order is preserved and duplicates are kept.

    Args:
        text: Raw file contents.

    Returns:
        Package names in file order.
    """
    packages: list[str] = []
    for line in text.splitlines():
        name = line.strip()
        if not name or name.startswith("#"):
            continue
        packages.append(name)
    return packages


class PackageInstaller:
    """Installs a package if the package manager reports it missing.

    A single install attempt is made per call; there are no retries.
    """

    def __init__(self, operator: Operator, session: SessionLog) -> None:
        """Initialize the installer.

        Args:
            operator: Package manager operator to query and install with.
            session: Session transcript.
        """
        self._operator = operator
        self._session = session

    def ensure_installed(self, package: str) -> PackageResult:
        """Install package unless it is already present.

        Args:
            package: Package name.

        Returns:
            PackageResult describing what happened.
        """
        try:
            if self._operator.is_installed(package):
                self._session.log(f"{package} is already installed.")
                return PackageResult(package=package, outcome=PackageOutcome.ALREADY_INSTALLED)

            self._session.log(f"Installing {package}...")
            result = self._operator.install(package)
        except (OSError, RuntimeError, subprocess.SubprocessError) as e:
            logger.warning("Package manager could not run for %s: %s", package, e)
            self._session.log(f"Failed to install {package}.")
            return PackageResult(package=package, outcome=PackageOutcome.FAILED, error=str(e))

        self._session.write_raw(result.output)

        if result.success:
            self._session.log(f"{package} successfully installed.")
            return PackageResult(package=package, outcome=PackageOutcome.INSTALLED)

        self._session.log(f"Failed to install {package}.")
        error = result.stderr.strip() or f"{self._operator.name} exited with {result.returncode}"
        return PackageResult(package=package, outcome=PackageOutcome.FAILED, error=error)


class PackageListProcessor:
    """Drives a PackageInstaller over every entry of a package list file."""

    def __init__(self, installer: PackageInstaller, session: SessionLog) -> None:
        self._installer = installer
        self._session = session

    def process_list(self, path: Path) -> list[PackageResult] | None:
        """Install every package named in the list file.

        Args:
            path: Package list file.

        Returns:
            One PackageResult per listed package in file order, or None
            if the list file doesn't exist.
        """
        if not path.is_file():
            self._session.log(
                f"Package list file {path} not found. Skipping package installation."
            )
            return None

        self._session.log(f"Reading package list from {path}")
        # Stray bytes in comments must not stop the list
        packages = parse_package_list(path.read_text(encoding="utf-8", errors="surrogateescape"))
        logger.debug("Package list %s has %d entries", path, len(packages))

        return [self._installer.ensure_installed(name) for name in packages]
