"""Abstract base class for package operators.

This module defines the Operator interface that the package installer
drives. Operators wrap a single system package manager.
"""

from abc import ABC, abstractmethod

from hostprep.utils.shell import CommandResult


class Operator(ABC):
    """Abstract base class for all package operators.

    Operators query and mutate package state for one package manager.
    They report raw command results and leave logging of outcomes to
    the caller.

    Example:
        >>> operator = AptOperator()
        >>> if operator.is_available() and not operator.is_installed("htop"):
        ...     result = operator.install("htop")
        ...     print(result.success)
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the package manager name (e.g., "apt")."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this package manager is available on the system.

        Returns:
            True if the package manager can be used, False otherwise.
        """

    @abstractmethod
    def is_installed(self, package: str) -> bool:
        """Check whether a package is currently installed.

        Args:
            package: Package name to query.

        Returns:
            True if the package manager reports it installed.
        """

    @abstractmethod
    def install(self, package: str) -> CommandResult:
        """Install a single package non-interactively.

        Args:
            package: Package name to install.

        Returns:
            CommandResult of the install command.

        Raises:
            RuntimeError: If the package manager is not available.
        """

    @abstractmethod
    def upgrade_system(self) -> list[CommandResult]:
        """Refresh package indexes and upgrade installed packages.

        Returns:
            CommandResult for each command that ran, in order. Stops
            after the first failing command.

        Raises:
            RuntimeError: If the package manager is not available.
        """
