"""APT package operator implementation.

Queries package state with dpkg and installs or upgrades with apt-get.
"""

import logging

from hostprep.operators.base import Operator
from hostprep.utils.shell import CommandResult, command_exists, run_command

logger = logging.getLogger(__name__)


class AptOperator(Operator):
    """Operator for APT/dpkg packages.

    Runs apt-get directly; provisioning already runs as root so no
    sudo escalation is added. apt-get calls have no timeout since a
    full upgrade on a fresh host can take a long time.
    """

    # Keep apt-get and debconf from prompting on the terminal
    _APT_ENV: dict[str, str] = {"DEBIAN_FRONTEND": "noninteractive"}

    @property
    def name(self) -> str:
        """Return apt as the package manager name."""
        return "apt"

    def is_available(self) -> bool:
        """Check if apt-get and dpkg are available."""
        return command_exists("apt-get") and command_exists("dpkg")

    def is_installed(self, package: str) -> bool:
        """Check whether dpkg knows the package as installed.

        Args:
            package: Package name to query.

        Returns:
            True if ``dpkg -s`` succeeds for the package.
        """
        result = run_command(["dpkg", "-s", package])
        return result.success

    def install(self, package: str) -> CommandResult:
        """Install a package using apt-get install -y.

        Args:
            package: Package name to install.

        Returns:
            CommandResult of the apt-get invocation.

        Raises:
            RuntimeError: If apt-get is not available.
        """
        self._require_available()
        logger.info("Executing APT install for package: %s", package)
        return run_command(
            ["apt-get", "install", "-y", package],
            timeout=None,
            env=self._APT_ENV,
        )

    def upgrade_system(self) -> list[CommandResult]:
        """Run apt-get update, then apt-get upgrade -y if the update succeeded.

        Returns:
            One CommandResult per command that ran.

        Raises:
            RuntimeError: If apt-get is not available.
        """
        self._require_available()

        results: list[CommandResult] = []
        update = run_command(["apt-get", "update"], timeout=None, env=self._APT_ENV)
        results.append(update)
        if not update.success:
            logger.warning("apt-get update failed, skipping upgrade")
            return results

        results.append(
            run_command(["apt-get", "upgrade", "-y"], timeout=None, env=self._APT_ENV)
        )
        return results

    def _require_available(self) -> None:
        """Raise if apt-get is missing on this system."""
        if not self.is_available():
            msg = "APT package manager is not available on this system"
            raise RuntimeError(msg)
