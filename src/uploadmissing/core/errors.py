"""Exception hierarchy for uploadmissing.

This module defines:
- SyncError: Base class for every failure raised by the sync engine
- TransportError: A storage call (list, put, batch delete) failed
- ExhaustedRetriesError: A retried operation failed on every attempt
- PermissionRepairError: Relaxing a local file's mode failed
"""

from __future__ import annotations


class SyncError(Exception):
    """Base exception for sync errors."""


class TransportError(SyncError):
    """A call to the object storage failed."""


class ExhaustedRetriesError(SyncError):
    """Raised when an operation failed on every allowed attempt.

    Attributes:
        description: Human-readable name of the operation.
        attempts: Number of attempts made.
        last_error: The exception raised by the final attempt.
    """

    def __init__(self, description: str, attempts: int, last_error: Exception) -> None:
        super().__init__(
            f"{description} failed after {attempts} attempts: {last_error}"
        )
        self.description = description
        self.attempts = attempts
        self.last_error = last_error


class PermissionRepairError(SyncError):
    """Raised when a local file's permissions could not be relaxed."""
