"""Rich display functions for provisioning results."""

from rich.markup import escape
from rich.table import Table

from hostprep.models.step import RunReport, StepStatus
from hostprep.utils.formatting import console, print_success

_STATUS_LABELS: dict[StepStatus, str] = {
    StepStatus.SUCCESS: "[success]OK[/success]",
    StepStatus.SKIPPED: "[muted]SKIP[/muted]",
    StepStatus.FAILED: "[error]FAIL[/error]",
    StepStatus.DECLINED: "[declined]NO[/declined]",
}


def create_steps_table(report: RunReport) -> Table:
    """Create a Rich table of step results in execution order.

    Args:
        report: Finished run report.

    Returns:
        Rich Table with Status, Step and Message columns.
    """
    table = Table(
        title="Provisioning Summary",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=6, justify="center")
    table.add_column("Step", no_wrap=True)
    table.add_column("Message")

    for step in report.steps:
        table.add_row(
            _STATUS_LABELS[step.status],
            step.name,
            f"[muted]{escape(step.message)}[/muted]",
        )

    return table


def print_run_summary(report: RunReport) -> None:
    """Print the summary table and a one-line tally.

    Args:
        report: Finished run report.
    """
    console.print()
    console.print(create_steps_table(report))

    failed = report.count(StepStatus.FAILED)
    if failed == 0:
        print_success("Provisioning completed without failures.")
        return

    parts = [
        f"[success]{report.count(StepStatus.SUCCESS)} succeeded[/success]",
        f"[error]{failed} failed[/error]",
    ]
    skipped = report.count(StepStatus.SKIPPED)
    if skipped:
        parts.append(f"[muted]{skipped} skipped[/muted]")
    console.print(f"\nSummary: {', '.join(parts)}")
