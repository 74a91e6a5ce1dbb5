"""Interactive SSH public key provisioning.

Asks whether to add a key and, on yes, appends the pasted line to the
invoking user's authorized_keys. The pasted text is not validated.
"""

import logging
from collections.abc import Callable

import typer

from hostprep.core.config import RunContext
from hostprep.core.session_log import SessionLog
from hostprep.models.step import StepResult, StepStatus
from hostprep.utils.files import set_owner

logger = logging.getLogger(__name__)

STEP_NAME = "SSH key"

# (text) -> answer
PromptFn = Callable[[str], str]


def _read_line(text: str) -> str:
    """Read one line from the terminal.

    Empty input is allowed. End of input or Ctrl-C reads as an empty
    line so the run carries on past the prompt.
    """
    try:
        return typer.prompt(text, default="", show_default=False)
    except typer.Abort:
        logger.debug("Prompt %r aborted, treating as empty input", text)
        return ""


def ask_yes_no(question: str, prompt: PromptFn = _read_line) -> bool:
    """Ask a yes/no question that defaults to no.

    Only answers starting with ``y`` or ``Y`` count as yes; empty or
    any other input is no.

    Args:
        question: Question text, without the [y/N] suffix.
        prompt: Line reader.

    Returns:
        True if the user answered yes.
    """
    answer = prompt(f"{question} [y/N]")
    return answer.strip().lower().startswith("y")


class SSHKeyProvisioner:
    """Adds a pasted public key to the user's authorized_keys."""

    def __init__(
        self,
        context: RunContext,
        session: SessionLog,
        prompt: PromptFn = _read_line,
    ) -> None:
        """Initialize the provisioner.

        Args:
            context: Run context naming the target user.
            session: Session transcript.
            prompt: Line reader used for both prompts.
        """
        self._context = context
        self._session = session
        self._prompt = prompt

    def provision(self) -> StepResult:
        """Run the confirmation gate and install the key on yes.

        Raises:
            FileNotFoundError: If the user's home directory doesn't exist.
        """
        if not ask_yes_no("Would you like to add a public SSH key?", self._prompt):
            logger.debug("SSH key prompt declined")
            return StepResult(STEP_NAME, StepStatus.DECLINED, "user declined")

        key = self._prompt("Paste your public SSH key")
        ssh_dir = self._context.ssh_dir
        keys_path = self._context.authorized_keys_path

        # A missing home is an error; root must not create it
        ssh_dir.mkdir(exist_ok=True)
        with keys_path.open(mode="a", encoding="utf-8") as f:
            f.write(key + "\n")

        set_owner(ssh_dir, self._context.uid, self._context.gid, recursive=True)
        ssh_dir.chmod(0o700)
        keys_path.chmod(0o600)

        self._session.log("SSH public key added.")
        return StepResult(STEP_NAME, StepStatus.SUCCESS, f"key appended to {keys_path}")
