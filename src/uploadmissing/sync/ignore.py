"""Ignore patterns for local enumeration.

This module provides:
- IgnorePatterns: Handles gitignore-style pattern matching
- DEFAULT_IGNORE_PATTERNS: OS clutter that is never worth uploading
"""

from __future__ import annotations

import fnmatch

DEFAULT_IGNORE_PATTERNS = [
    ".git/",
    ".git/**",
    ".DS_Store",
    "Thumbs.db",
]


class IgnorePatterns:
    """Handles ignore pattern matching for relative names."""

    def __init__(self, patterns: list[str] | None = None, use_defaults: bool = True) -> None:
        """Initialize with patterns.

        Args:
            patterns: Extra gitignore-style patterns.
            use_defaults: Start from DEFAULT_IGNORE_PATTERNS.
        """
        self._patterns = list(DEFAULT_IGNORE_PATTERNS) if use_defaults else []
        if patterns:
            self._patterns.extend(patterns)

    @property
    def patterns(self) -> list[str]:
        """Return a copy of the active patterns."""
        return list(self._patterns)

    def add_pattern(self, pattern: str) -> None:
        """Add an ignore pattern."""
        self._patterns.append(pattern)

    def should_ignore(self, rel_name: str, is_dir: bool = False) -> bool:
        """Check if a relative name should be ignored.

        Args:
            rel_name: Name relative to the local root, '/' separated.
            is_dir: Whether the name refers to a directory.

        Returns:
            True if the name matches any pattern.
        """
        basename = rel_name.rsplit("/", 1)[-1]

        for pattern in self._patterns:
            # Directory-only patterns (ending with /)
            if pattern.endswith("/"):
                pattern = pattern[:-1]
                if is_dir and (fnmatch.fnmatch(rel_name, pattern) or fnmatch.fnmatch(basename, pattern)):
                    return True
            elif "**" in pattern:
                if fnmatch.fnmatch(rel_name, pattern):
                    return True
            elif fnmatch.fnmatch(rel_name, pattern) or fnmatch.fnmatch(basename, pattern):
                return True

        return False
