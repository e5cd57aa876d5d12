"""Shared types and dataclasses for sync operations.

This module provides:
- RemoteObjectSet: Relative names found in the bucket, in listing order
- DiffResult: Names to upload and names to delete
- TransferTask: One upload in the transfer pipeline
- UploadOutcome: Result of a single upload
- SyncPhase, SyncReport: Orchestrator state and result
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum


class RemoteObjectSet:
    """Immutable set of remote relative names.

    Iteration follows the order in which the names were listed, membership
    tests are O(1).
    """

    __slots__ = ("_names", "_lookup")

    def __init__(self, names: Iterable[str] = ()) -> None:
        ordered: dict[str, None] = dict.fromkeys(names)
        self._names: tuple[str, ...] = tuple(ordered)
        self._lookup: frozenset[str] = frozenset(ordered)

    def __contains__(self, name: object) -> bool:
        return name in self._lookup

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, RemoteObjectSet):
            return self._lookup == other._lookup
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._lookup)

    def __repr__(self) -> str:
        return f"RemoteObjectSet({list(self._names)!r})"


@dataclass(frozen=True)
class DiffResult:
    """Outcome of comparing the local and remote inventories.

    Attributes:
        missing: Local names absent remotely, in local order.
        deleted: Remote names absent locally, in listing order. Empty
            unless deletions were requested.
        found: Number of names present on both sides.
    """

    missing: tuple[str, ...] = ()
    deleted: tuple[str, ...] = ()
    found: int = 0


@dataclass
class TransferTask:
    """A single upload.

    Attributes:
        index: 1-based position in the missing list, used in progress logs.
        relative_name: Name in the shared local/remote namespace.
        local_path: Absolute path of the file to read.
        remote_key: Full destination key.
        content_type: MIME type sent with the object.
        acl: Canned ACL sent with the object.
        chmod_applied: Whether the file's mode was relaxed for this upload.
        original_mode: Mode bits to restore when chmod_applied is set.
        attempts: Number of put attempts made so far.
    """

    index: int
    relative_name: str
    local_path: str
    remote_key: str
    content_type: str = "application/octet-stream"
    acl: str = "private"
    chmod_applied: bool = False
    original_mode: int | None = None
    attempts: int = 0


@dataclass(frozen=True)
class UploadOutcome:
    """Result of processing one TransferTask.

    Attributes:
        relative_name: The name that was processed.
        uploaded: True if the object was stored.
        skipped: True if the file was left alone (unreadable, repair failed).
        retries: Number of retries the put needed.
    """

    relative_name: str
    uploaded: bool = False
    skipped: bool = False
    retries: int = 0


class SyncPhase(str, Enum):
    """State of a mirror run.

    Runs move strictly left to right on success:
    LISTING -> DIFFING -> UPLOADING -> DELETING -> DONE.
    Any unrecovered error moves to FAILED. DONE and FAILED are terminal.
    """

    LISTING = "listing"
    DIFFING = "diffing"
    UPLOADING = "uploading"
    DELETING = "deleting"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """Check if the run has finished."""
        return self in (SyncPhase.DONE, SyncPhase.FAILED)


@dataclass
class SyncReport:
    """Result of a mirror run.

    Attributes:
        phase: Last phase reached (DONE or FAILED once the run returns).
        failed_phase: Phase that raised the terminal error, if any.
        missing: Names that needed uploading.
        deleted: Names that needed deleting.
        found: Number of names already present remotely.
        uploaded: Names actually uploaded.
        skipped: Names skipped by the access-repair step.
        removed: Names actually deleted.
        error: The terminal error, if the run failed.
    """

    phase: SyncPhase = SyncPhase.LISTING
    failed_phase: SyncPhase | None = None
    missing: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    found: int = 0
    uploaded: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    error: Exception | None = None

    @property
    def success(self) -> bool:
        """True if every phase completed."""
        return self.phase == SyncPhase.DONE
