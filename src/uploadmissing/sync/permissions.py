"""Access repair for unreadable local files.

When enabled, a file the current user cannot read is temporarily given
owner read/write permission so it can be uploaded, and its exact
original mode is restored afterwards.
"""

from __future__ import annotations

import logging
import os
import stat

from uploadmissing.core.errors import PermissionRepairError

logger = logging.getLogger(__name__)

# Bits added to make a file readable by its owner
REPAIR_BITS = stat.S_IRUSR | stat.S_IWUSR


def is_readable(path: str) -> bool:
    """Check whether the current process may read a file."""
    return os.access(path, os.R_OK)


def ensure_readable(path: str) -> int | None:
    """Make a file readable if it is not.

    Args:
        path: Local file path.

    Returns:
        The original mode bits if the mode was changed, None if the file
        was already readable.

    Raises:
        PermissionRepairError: If the mode could not be changed or the
            file is still unreadable afterwards.
        OSError: If the file cannot be inspected for another reason,
            such as no longer existing.
    """
    if is_readable(path):
        return None

    try:
        original = stat.S_IMODE(os.stat(path).st_mode)
        os.chmod(path, original | REPAIR_BITS)
    except PermissionError as e:
        raise PermissionRepairError(f"Cannot make {path} readable: {e}") from e

    if not is_readable(path):
        restore_mode(path, original)
        raise PermissionRepairError(f"{path} is still unreadable after chmod")

    logger.info(f"Relaxed mode of {path} from {original:o} to {original | REPAIR_BITS:o}")
    return original


def restore_mode(path: str, mode: int) -> bool:
    """Put a file's mode back. Failures are logged, not raised.

    Returns:
        True if the mode was restored.
    """
    try:
        os.chmod(path, mode)
    except OSError as e:
        logger.warning(f"Could not restore mode {mode:o} on {path}: {e}")
        return False
    logger.debug(f"Restored mode {mode:o} on {path}")
    return True
