"""File mutation helpers for provisioning steps.

Thin wrappers over pathlib and shutil for the copy/append/ownership
operations that provisioning performs on system and user files.
"""

import logging
import os
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def replace_file(source: Path, dest: Path) -> None:
    """Overwrite dest with the contents of source.

    Args:
        source: File to copy from.
        dest: File to replace. Created if it doesn't exist.

    Raises:
        OSError: If either file cannot be accessed.
    """
    shutil.copyfile(source, dest)
    logger.debug("Replaced %s with %s", dest, source)


def append_file(source: Path, dest: Path) -> None:
    """Append the full contents of source to dest.

    Content is appended verbatim every time; calling this twice with
    the same source leaves two copies in dest.

    Args:
        source: File whose contents are appended.
        dest: File to append to. Created if it doesn't exist.

    Raises:
        OSError: If either file cannot be accessed.
    """
    content = source.read_text(encoding="utf-8", errors="surrogateescape")
    with dest.open(mode="a", encoding="utf-8", errors="surrogateescape") as f:
        f.write(content)
    logger.debug("Appended %d bytes from %s to %s", len(content), source, dest)


def set_owner(path: Path, uid: int, gid: int, *, recursive: bool = False) -> None:
    """Change ownership of a path, optionally for a whole tree.

    Args:
        path: File or directory to chown.
        uid: Target user id.
        gid: Target group id.
        recursive: If True and path is a directory, chown everything below it.

    Raises:
        OSError: If ownership cannot be changed.
    """
    os.chown(path, uid, gid)
    if recursive and path.is_dir():
        for root, dirs, files in os.walk(path):
            for name in dirs + files:
                os.chown(os.path.join(root, name), uid, gid)
