"""Provisioning configuration.

ProvisionConfig holds every path and setting the provisioning steps
need. RunContext adds the values that are computed once per run (start
time, invoking user, log file) so that no step reads global state.
"""

from __future__ import annotations

import logging
import os
import pwd
import tomllib
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from hostprep.core.paths import get_default_config_path, get_log_path

logger = logging.getLogger(__name__)


def _default_directives() -> dict[str, str]:
    return {
        "PasswordAuthentication": "no",
        "ChallengeResponseAuthentication": "no",
        "PubkeyAuthentication": "yes",
    }


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when an explicitly requested config file is missing."""


class ConfigParseError(ConfigError):
    """Raised when a config file is not valid TOML."""


class ConfigValidationError(ConfigError):
    """Raised when config content doesn't match the schema."""


class ProvisionConfig(BaseModel):
    """Paths and settings for a provisioning run.

    Relative paths are resolved against the working directory at the
    time they are used.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    log_dir: Path = Path("logs")
    config_dir: Path = Path("config")
    package_list: Path = Path("lists/packages.txt")

    # Fragment file names inside config_dir
    motd_fragment: str = "motd.txt"
    shell_fragment: str = "bashrc.append"
    editor_fragment: str = "nanorc.append"

    # Targets
    motd_path: Path = Path("/etc/motd")
    shell_rc: str = ".bashrc"
    editor_rc: str = ".nanorc"
    sshd_config: Path = Path("/etc/ssh/sshd_config")
    ssh_service: str = "ssh"
    ssh_directives: dict[str, str] = Field(default_factory=_default_directives)

    @field_validator("ssh_directives")
    @classmethod
    def validate_directives(cls, v: dict[str, str]) -> dict[str, str]:
        """Directive names must be single keywords and values non-empty."""
        for name, value in v.items():
            if not name or any(c.isspace() for c in name) or name.startswith("#"):
                msg = f"invalid sshd directive name: {name!r}"
                raise ValueError(msg)
            if not value.strip():
                msg = f"sshd directive {name} has an empty value"
                raise ValueError(msg)
        return v

    @field_validator("ssh_service", "shell_rc", "editor_rc")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        """Reject empty names."""
        if not v.strip():
            msg = "value cannot be empty"
            raise ValueError(msg)
        return v

    @property
    def motd_source(self) -> Path:
        """Path of the MOTD fragment."""
        return self.config_dir / self.motd_fragment

    @property
    def shell_source(self) -> Path:
        """Path of the shell rc fragment."""
        return self.config_dir / self.shell_fragment

    @property
    def editor_source(self) -> Path:
        """Path of the editor rc fragment."""
        return self.config_dir / self.editor_fragment

    def to_toml_dict(self) -> dict[str, Any]:
        """Convert to a TOML-serializable dictionary."""
        return self.model_dump(mode="json")


def load_config(path: Path | None = None) -> ProvisionConfig:
    """Load configuration from a TOML file.

    Args:
        path: Explicit config path. If None, ./hostprep.toml is used when
            it exists; otherwise built-in defaults are returned.

    Returns:
        Validated ProvisionConfig.

    Raises:
        ConfigNotFoundError: If an explicit path doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigValidationError: If the content doesn't match the schema.
    """
    if path is None:
        path = get_default_config_path()
        if not path.exists():
            logger.debug("No config file at %s, using defaults", path)
            return ProvisionConfig()
    elif not path.exists():
        raise ConfigNotFoundError(f"Config file not found: {path}")

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config {path}: {e}") from e

    try:
        return ProvisionConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid config content in {path}: {e}") from e


def save_config(config: ProvisionConfig, path: Path) -> Path:
    """Write configuration to a TOML file.

    Args:
        config: Configuration to serialize.
        path: Destination file. Parent directories are created.

    Returns:
        Path where the config was written.

    Raises:
        ConfigError: If the file cannot be written.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as f:
            tomli_w.dump(config.to_toml_dict(), f)
    except OSError as e:
        raise ConfigError(f"Failed to write config {path}: {e}") from e
    return path


def resolve_invoking_user() -> str:
    """Resolve the login name of the user who started the session.

    When run through sudo the effective user is root, so the login
    session name is preferred, then SUDO_USER, then the real uid.

    Returns:
        Username string.
    """
    try:
        return os.getlogin()
    except OSError:
        logger.debug("os.getlogin() failed, falling back to environment")

    sudo_user = os.environ.get("SUDO_USER")
    if sudo_user:
        return sudo_user
    return pwd.getpwuid(os.getuid()).pw_name


@dataclass(frozen=True, slots=True)
class RunContext:
    """Values fixed at process start and shared by every step.

    Attributes:
        config: Provisioning configuration.
        started: Run start time (local).
        username: Invoking (non-root) user.
        home: That user's home directory.
        uid: That user's uid, -1 if unknown.
        gid: That user's primary gid, -1 if unknown.
    """

    config: ProvisionConfig
    started: datetime
    username: str
    home: Path
    uid: int
    gid: int

    @property
    def log_path(self) -> Path:
        """Session log file for this run."""
        return get_log_path(self.config.log_dir, self.started)

    @property
    def shell_rc_path(self) -> Path:
        """The user's shell rc file."""
        return self.home / self.config.shell_rc

    @property
    def editor_rc_path(self) -> Path:
        """The user's editor rc file."""
        return self.home / self.config.editor_rc

    @property
    def ssh_dir(self) -> Path:
        """The user's .ssh directory."""
        return self.home / ".ssh"

    @property
    def authorized_keys_path(self) -> Path:
        """The user's authorized_keys file."""
        return self.ssh_dir / "authorized_keys"


def build_context(
    config: ProvisionConfig,
    username: str | None = None,
    started: datetime | None = None,
) -> RunContext:
    """Build the run context once at process start.

    Args:
        config: Provisioning configuration.
        username: Override the invoking user. Resolved from the login
            session if None.
        started: Override the start time. Defaults to now.

    Returns:
        RunContext for this run.
    """
    user = username or resolve_invoking_user()
    try:
        entry = pwd.getpwnam(user)
        home, uid, gid = Path(entry.pw_dir), entry.pw_uid, entry.pw_gid
    except KeyError:
        logger.warning("User %s not found in passwd, assuming /home/%s", user, user)
        home, uid, gid = Path("/home") / user, -1, -1

    return RunContext(
        config=config,
        started=started or datetime.now(),
        username=user,
        home=home,
        uid=uid,
        gid=gid,
    )
