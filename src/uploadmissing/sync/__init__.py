"""Mirror engine: enumerate, diff, apply.

Architecture:
    scan_local + list_remote → diff → TransferPipeline → BatchDeleter

Components:
- **names**: Relative names and key prefixes
- **scan_local / IgnorePatterns**: Local enumeration
- **list_remote**: Paginated bucket listing folded into a RemoteObjectSet
- **diff**: Missing and deleted names
- **TransferPipeline**: Bounded, retried uploads with optional access repair
- **BatchDeleter**: Sequential, retried batch deletes
- **SyncEngine**: Runs the phases and reports the outcome
"""

from uploadmissing.sync.content_types import DEFAULT_CONTENT_TYPE, content_type_for
from uploadmissing.sync.delete import BatchDeleter, partition
from uploadmissing.sync.differ import diff
from uploadmissing.sync.engine import InvalidTransitionError, SyncEngine
from uploadmissing.sync.ignore import DEFAULT_IGNORE_PATTERNS, IgnorePatterns
from uploadmissing.sync.lister import list_remote
from uploadmissing.sync.names import key_prefix, relative_name, remote_key, strip_prefix
from uploadmissing.sync.pool import PoolState, TransferPool
from uploadmissing.sync.retry import (
    DEFAULT_BACKOFF_MULTIPLIER,
    DEFAULT_INITIAL_BACKOFF,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_BACKOFF,
    RetryPolicy,
    retry_with_backoff,
)
from uploadmissing.sync.scanner import scan_local
from uploadmissing.sync.types import (
    DiffResult,
    RemoteObjectSet,
    SyncPhase,
    SyncReport,
    TransferTask,
    UploadOutcome,
)
from uploadmissing.sync.upload import TransferPipeline

__all__ = [
    # Names
    "key_prefix",
    "relative_name",
    "remote_key",
    "strip_prefix",
    # Enumeration
    "DEFAULT_IGNORE_PATTERNS",
    "IgnorePatterns",
    "list_remote",
    "scan_local",
    # Diff
    "diff",
    # Transfer
    "DEFAULT_CONTENT_TYPE",
    "PoolState",
    "TransferPipeline",
    "TransferPool",
    "content_type_for",
    # Delete
    "BatchDeleter",
    "partition",
    # Retry
    "DEFAULT_BACKOFF_MULTIPLIER",
    "DEFAULT_INITIAL_BACKOFF",
    "DEFAULT_MAX_ATTEMPTS",
    "DEFAULT_MAX_BACKOFF",
    "RetryPolicy",
    "retry_with_backoff",
    # Orchestration
    "InvalidTransitionError",
    "SyncEngine",
    # Types
    "DiffResult",
    "RemoteObjectSet",
    "SyncPhase",
    "SyncReport",
    "TransferTask",
    "UploadOutcome",
]
