"""Core module - Shared errors.

Configuration lives in :mod:`uploadmissing.core.config` and is imported
from there directly.
"""

from uploadmissing.core.errors import (
    ExhaustedRetriesError,
    PermissionRepairError,
    SyncError,
    TransportError,
)

__all__ = [
    "ExhaustedRetriesError",
    "PermissionRepairError",
    "SyncError",
    "TransportError",
]
