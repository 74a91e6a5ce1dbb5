"""Path management for hostprep.

All provisioning inputs and outputs default to paths relative to the
directory hostprep is invoked from:

- Config file: ./hostprep.toml
- Package list: ./lists/packages.txt
- Fragments: ./config/
- Session logs: ./logs/
"""

from datetime import datetime
from pathlib import Path

CONFIG_FILENAME = "hostprep.toml"

# Run timestamp formats
LOG_NAME_FORMAT = "%Y%m%d_%H%M%S"
LOG_LINE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_default_config_path() -> Path:
    """Get the default configuration file path.

    Returns:
        Path to ./hostprep.toml in the current working directory.
    """
    return Path.cwd() / CONFIG_FILENAME


def get_log_path(log_dir: Path, started: datetime) -> Path:
    """Get the session log path for a run.

    Args:
        log_dir: Directory holding session logs.
        started: Run start time.

    Returns:
        Path to <log_dir>/postinstall_<YYYYmmdd_HHMMSS>.log.
    """
    return log_dir / f"postinstall_{started.strftime(LOG_NAME_FORMAT)}.log"


def ensure_dir(path: Path, name: str) -> Path:
    """Create directory if it doesn't exist.

    Args:
        path: Directory path to create.
        name: Human-readable name for error messages.

    Returns:
        The created/existing directory path.

    Raises:
        RuntimeError: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path
