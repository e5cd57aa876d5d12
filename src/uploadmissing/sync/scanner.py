"""Local file enumeration.

Walks the local root and produces the ordered list of relative names
that the differ compares against the bucket listing.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from uploadmissing.sync.ignore import IgnorePatterns
from uploadmissing.sync.names import relative_name

logger = logging.getLogger(__name__)


def _raise_walk_error(error: OSError) -> None:
    # Unlistable directories fail the whole scan
    logger.error(f"Cannot list {error.filename}: {error}")
    raise error


def scan_local(root: str | Path, ignore: IgnorePatterns | None = None) -> list[str]:
    """List every regular file under root as a relative name.

    Directories are descended but never listed. Symlinks are skipped.
    The order is deterministic: directories are walked in sorted order
    and files within a directory are sorted by name.

    Args:
        root: Local directory to enumerate.
        ignore: Patterns to skip. Defaults to IgnorePatterns().

    Returns:
        Relative names with '/' separators.

    Raises:
        NotADirectoryError: If root is not a directory.
        OSError: If any directory under root cannot be listed.
    """
    base = Path(os.path.abspath(root))
    if not base.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")
    if ignore is None:
        ignore = IgnorePatterns()

    base_str = base.as_posix()
    names: list[str] = []

    for root_str, dirs, files in os.walk(base, onerror=_raise_walk_error):
        current = Path(root_str)
        current_name = relative_name(base_str, current.as_posix())

        def child_name(entry: str) -> str:
            return f"{current_name}/{entry}" if current_name else entry

        # Filter ignored directories and symlinks in place so walk skips them
        dirs[:] = sorted(
            d for d in dirs
            if not (current / d).is_symlink()
            and not ignore.should_ignore(child_name(d), is_dir=True)
        )

        for filename in sorted(files):
            file_path = current / filename
            if file_path.is_symlink():
                logger.debug(f"Skipping symlink: {file_path}")
                continue

            name = child_name(filename)
            if ignore.should_ignore(name):
                logger.debug(f"Ignoring {name}")
                continue
            names.append(name)

    return names
