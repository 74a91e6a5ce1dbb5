"""SSH daemon hardening.

Rewrites authentication directives in sshd_config and restarts the SSH
service. The file is tokenized line by line: only lines that start at
column 0 with a target directive name, optionally commented out with a
single leading ``#``, are replaced. Indented lines (Match blocks) and
every other line are kept byte for byte. Directives absent from the file
are left absent.
"""

import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from hostprep.core.config import RunContext
from hostprep.core.session_log import SessionLog
from hostprep.models.step import StepResult, StepStatus
from hostprep.utils.shell import CommandResult, run_command

logger = logging.getLogger(__name__)

STEP_NAME = "SSH hardening"

# Keyword at column 0 after an optional "#", ended by whitespace, "=" or end
# of line. A space after "#" marks prose, not a directive.
_DIRECTIVE_RE = re.compile(r"^#?(?P<keyword>[A-Za-z][A-Za-z0-9]*)(?=\s|=|$)")


@dataclass(frozen=True, slots=True)
class RewriteResult:
    """Outcome of rewriting directives in a config text.

    Attributes:
        text: The rewritten config text.
        counts: Number of lines rewritten per directive name.
    """

    text: str
    counts: dict[str, int]

    @property
    def missing(self) -> list[str]:
        """Directives that matched no line."""
        return [name for name, n in self.counts.items() if n == 0]


def _split_line_ending(line: str) -> tuple[str, str]:
    body = line.rstrip("\r\n")
    return body, line[len(body) :]


def rewrite_directives(text: str, directives: Mapping[str, str]) -> RewriteResult:
    """Set sshd directives in config text.

    Every unindented line whose keyword is exactly a directive name,
    commented or not, becomes ``Name value`` with its line ending
    preserved.

    Args:
        text: Original sshd_config contents.
        directives: Directive name to value.

    Returns:
        RewriteResult with the new text and per-directive match counts.
    """
    counts = dict.fromkeys(directives, 0)
    out: list[str] = []

    for line in text.splitlines(keepends=True):
        body, ending = _split_line_ending(line)
        match = _DIRECTIVE_RE.match(body)
        name = match.group("keyword") if match else None
        if name not in directives:
            out.append(line)
            continue
        out.append(f"{name} {directives[name]}{ending}")
        counts[name] += 1

    return RewriteResult(text="".join(out), counts=counts)


def restart_service(service: str) -> CommandResult:
    """Restart a systemd service.

    Args:
        service: Unit name, e.g. "ssh".

    Returns:
        CommandResult of systemctl.
    """
    return run_command(["systemctl", "restart", service])


class SSHHardener:
    """Applies the configured directives and restarts the SSH service.

    The resulting file is not syntax-checked before the restart.
    """

    def __init__(
        self,
        context: RunContext,
        session: SessionLog,
        restart: Callable[[str], CommandResult] = restart_service,
    ) -> None:
        """Initialize the hardener.

        Args:
            context: Run context carrying the sshd paths and directives.
            session: Session transcript.
            restart: Service restart function.
        """
        self._context = context
        self._session = session
        self._restart = restart

    def harden(self) -> StepResult:
        """Rewrite sshd_config and restart the SSH service."""
        config = self._context.config
        path = config.sshd_config
        if not path.is_file():
            self._session.log(f"{path.name} file not found.")
            return StepResult(STEP_NAME, StepStatus.SKIPPED, f"{path} not found")

        # surrogateescape keeps non-UTF-8 bytes intact through the rewrite
        original = path.read_text(encoding="utf-8", errors="surrogateescape")
        result = rewrite_directives(original, config.ssh_directives)
        if result.text != original:
            path.write_text(result.text, encoding="utf-8", errors="surrogateescape")
        for name in result.missing:
            logger.debug("%s not present in %s, left unchanged", name, path)

        restart = self._restart(config.ssh_service)
        self._session.write_raw(restart.output)
        if not restart.success:
            self._session.log(f"Failed to restart {config.ssh_service} service.")
            return StepResult(
                STEP_NAME,
                StepStatus.FAILED,
                f"systemctl restart {config.ssh_service} exited with {restart.returncode}",
            )

        self._session.log("SSH configured to accept key-based authentication only.")
        message = "directives applied"
        if result.missing:
            message += f"; not present: {', '.join(result.missing)}"
        return StepResult(STEP_NAME, StepStatus.SUCCESS, message)
