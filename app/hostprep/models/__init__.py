"""Data models for hostprep.

This module exports the core data structures used throughout the application.
"""

from hostprep.models.package import PackageOutcome, PackageResult
from hostprep.models.step import RunReport, StepResult, StepStatus

__all__ = [
    "PackageOutcome",
    "PackageResult",
    "RunReport",
    "StepResult",
    "StepStatus",
]
