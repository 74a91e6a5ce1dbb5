"""Static config fragment application.

Copies the MOTD fragment over the system MOTD and appends shell and
editor rc fragments to the invoking user's dotfiles.

Appends are not idempotent: running provisioning twice leaves the
fragment in the dotfile twice.
"""

import logging
from pathlib import Path

from hostprep.core.config import RunContext
from hostprep.core.session_log import SessionLog
from hostprep.models.step import StepResult, StepStatus
from hostprep.utils.files import append_file, replace_file, set_owner

logger = logging.getLogger(__name__)


class ConfigApplier:
    """Applies MOTD, shell rc and editor rc fragments.

    Each operation is independent: a missing fragment only skips that
    operation.
    """

    def __init__(self, context: RunContext, session: SessionLog) -> None:
        self._context = context
        self._session = session

    def apply_motd(self) -> StepResult:
        """Replace the system MOTD with the MOTD fragment."""
        config = self._context.config
        source = config.motd_source
        if not source.is_file():
            self._session.log(f"{config.motd_fragment} not found.")
            return StepResult("MOTD", StepStatus.SKIPPED, f"{source} not found")

        replace_file(source, config.motd_path)
        self._session.log("MOTD updated.")
        return StepResult("MOTD", StepStatus.SUCCESS, f"{config.motd_path} replaced")

    def append_shell_rc(self) -> StepResult:
        """Append the shell rc fragment to the user's shell rc file."""
        config = self._context.config
        return self._append_user_fragment(
            "Shell rc",
            config.shell_source,
            config.shell_fragment,
            self._context.shell_rc_path,
        )

    def append_editor_rc(self) -> StepResult:
        """Append the editor rc fragment to the user's editor rc file."""
        config = self._context.config
        return self._append_user_fragment(
            "Editor rc",
            config.editor_source,
            config.editor_fragment,
            self._context.editor_rc_path,
        )

    def _append_user_fragment(
        self,
        step: str,
        source: Path,
        fragment_name: str,
        dest: Path,
    ) -> StepResult:
        """Append a fragment to a user dotfile and hand ownership to the user.

        Args:
            step: Step name for the result.
            source: Fragment file.
            fragment_name: Fragment file name used in log messages.
            dest: Dotfile to append to.

        Returns:
            StepResult for the operation.
        """
        if not source.is_file():
            self._session.log(f"{fragment_name} not found.")
            return StepResult(step, StepStatus.SKIPPED, f"{source} not found")

        append_file(source, dest)
        set_owner(dest, self._context.uid, self._context.gid)
        self._session.log(f"{dest.name} customized.")
        return StepResult(step, StepStatus.SUCCESS, f"appended to {dest}")
