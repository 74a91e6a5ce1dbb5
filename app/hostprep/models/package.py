"""Package models for list-driven installation.

This module defines the outcome of ensuring a single package is
installed on the system.
"""

from dataclasses import dataclass
from enum import Enum


class PackageOutcome(Enum):
    """Outcome of an ensure-installed request.

    Attributes:
        ALREADY_INSTALLED: Package was present; nothing was done.
        INSTALLED: Package was absent and the install succeeded.
        FAILED: Package was absent and the install failed.
    """

    ALREADY_INSTALLED = "already_installed"
    INSTALLED = "installed"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class PackageResult:
    """Result of ensuring a single package is installed.

    Attributes:
        package: Package name as read from the package list.
        outcome: What happened to the package.
        error: Error output from the package manager if the install failed.
    """

    package: str
    outcome: PackageOutcome
    error: str | None = None

    def __post_init__(self) -> None:
        """Validate result data after initialization."""
        if not self.package:
            msg = "Package name cannot be empty"
            raise ValueError(msg)

    @property
    def success(self) -> bool:
        """Check if the package ended up installed."""
        return self.outcome != PackageOutcome.FAILED

    @property
    def failed(self) -> bool:
        """Check if the install attempt failed."""
        return self.outcome == PackageOutcome.FAILED
