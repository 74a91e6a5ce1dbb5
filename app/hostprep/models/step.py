"""Step models for the provisioning runner.

Each provisioning step reports a StepResult; the runner collects them
into a RunReport that backs the final summary.
"""

from dataclasses import dataclass, field
from enum import Enum


class StepStatus(Enum):
    """Outcome of a single provisioning step.

    Attributes:
        SUCCESS: The step ran and made its changes.
        SKIPPED: An optional input was missing, so nothing was changed.
        FAILED: The step ran but something went wrong; the run continued.
        DECLINED: The user answered no to an interactive prompt.
    """

    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"
    DECLINED = "declined"


@dataclass(frozen=True, slots=True)
class StepResult:
    """Result of a single provisioning step.

    Attributes:
        name: Human-readable step name (e.g., "MOTD").
        status: Step outcome.
        message: Short description of what happened.
    """

    name: str
    status: StepStatus
    message: str = ""

    @property
    def failed(self) -> bool:
        """Check if the step failed."""
        return self.status == StepStatus.FAILED


@dataclass(slots=True)
class RunReport:
    """Aggregate of every step result from one provisioning run.

    Attributes:
        steps: Step results in execution order.
        aborted: True if the run stopped at the privilege check.
    """

    steps: list[StepResult] = field(default_factory=list)
    aborted: bool = False

    def add(self, result: StepResult) -> StepResult:
        """Record a step result and return it."""
        self.steps.append(result)
        return result

    def count(self, status: StepStatus) -> int:
        """Count steps with the given status."""
        return sum(1 for s in self.steps if s.status == status)

    @property
    def failures(self) -> list[StepResult]:
        """Steps that failed."""
        return [s for s in self.steps if s.failed]

    @property
    def exit_code(self) -> int:
        """Process exit code: 1 only when the privilege check aborted the run."""
        return 1 if self.aborted else 0
