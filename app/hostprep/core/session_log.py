"""Session transcript for a provisioning run.

Every run writes one append-only log file under the log directory.
Each entry is a ``[YYYY-MM-DD HH:MM:SS] message`` line that is also
echoed to the console. Command output from apt is appended to the file
only. Failing to write the file never stops provisioning.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from types import TracebackType

from rich.console import Console

from hostprep.core.paths import LOG_LINE_FORMAT, ensure_dir
from hostprep.utils.formatting import console as default_console

logger = logging.getLogger(__name__)

_TRANSCRIPT_LOGGER = "hostprep.transcript"


class SessionLog:
    """Timestamped transcript writer backed by a logging FileHandler.

    The handler is attached to a dedicated non-propagating logger for
    the lifetime of the session, so the file stays open in append mode
    until close().

    Attributes:
        path: Log file path for this session.
    """

    def __init__(
        self,
        path: Path,
        *,
        console: Console | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize the session log.

        Args:
            path: Log file to append to.
            console: Console to mirror entries to. Defaults to the shared console.
            clock: Source of entry timestamps.
        """
        self.path = path
        self._console = console or default_console
        self._clock = clock
        self._handler: logging.FileHandler | None = None
        self._transcript = logging.getLogger(_TRANSCRIPT_LOGGER)
        self._transcript.propagate = False
        self._transcript.setLevel(logging.INFO)

    @property
    def is_open(self) -> bool:
        """Check if the log file is attached."""
        return self._handler is not None

    def open(self) -> SessionLog:
        """Create the log directory and open the log file for appending.

        If the file cannot be created, entries are still echoed to the
        console and a warning is logged.

        Returns:
            self, for chaining.
        """
        if self._handler is not None:
            return self
        try:
            ensure_dir(self.path.parent, "log")
            handler = logging.FileHandler(
                self.path, mode="a", encoding="utf-8", errors="surrogateescape"
            )
        except (OSError, RuntimeError) as e:
            logger.warning("Session log unavailable, console only: %s", e)
            return self

        handler.setFormatter(logging.Formatter("%(message)s"))
        self._transcript.addHandler(handler)
        self._handler = handler
        return self

    def close(self) -> None:
        """Detach and close the log file."""
        if self._handler is None:
            return
        self._transcript.removeHandler(self._handler)
        self._handler.close()
        self._handler = None

    def __enter__(self) -> SessionLog:
        return self.open()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def log(self, message: str) -> str:
        """Append a timestamped entry and echo it to the console.

        Args:
            message: Entry text.

        Returns:
            The formatted line.
        """
        line = f"[{self._clock().strftime(LOG_LINE_FORMAT)}] {message}"
        self._write(line)
        self._console.print(line, markup=False, highlight=False, soft_wrap=True)
        return line

    def write_raw(self, text: str) -> None:
        """Append raw command output to the log file only.

        Args:
            text: Output to append. Empty output is ignored.
        """
        text = text.rstrip("\n")
        if text:
            self._write(text)

    def _write(self, text: str) -> None:
        # FileHandler reports write errors through handleError, never raises
        if self._handler is not None:
            self._transcript.info(text)
