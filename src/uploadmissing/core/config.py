"""Configuration classes for uploadmissing.

- SyncConfig: What to mirror and how (one run of the tool)
- StorageConfig: How to reach the object storage, read from the environment
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from uploadmissing.core.errors import TransportError
from uploadmissing.sync.names import key_prefix
from uploadmissing.sync.retry import RetryPolicy

DEFAULT_ACL = "private"
DEFAULT_CONCURRENCY = 2
MAX_DELETE_BATCH_SIZE = 1000

# S3 canned ACLs accepted for uploaded objects
CANNED_ACLS = (
    "private",
    "public-read",
    "public-read-write",
    "authenticated-read",
    "aws-exec-read",
    "bucket-owner-read",
    "bucket-owner-full-control",
)


@dataclass
class SyncConfig:
    """Configuration for a single mirror run.

    Attributes:
        local_root: Directory whose files are mirrored.
        bucket: Target bucket name.
        remote_path: Destination path inside the bucket, as given by the user.
        acl: Canned ACL applied to uploaded objects.
        delete: Remove remote objects that have no local counterpart.
        chmod_if_needed: Temporarily relax unreadable local files.
        dry_run: List and diff only, never write to the bucket.
        concurrency: Maximum uploads in flight at once.
        delete_batch_size: Keys per batch-delete request.
        exclude: Extra ignore patterns for local enumeration.
        retry: Retry policy for puts and batch deletes.
    """

    local_root: str
    bucket: str
    remote_path: str = ""
    acl: str = DEFAULT_ACL
    delete: bool = False
    chmod_if_needed: bool = False
    dry_run: bool = False
    concurrency: int = DEFAULT_CONCURRENCY
    delete_batch_size: int = MAX_DELETE_BATCH_SIZE
    exclude: list[str] = field(default_factory=list)
    retry: RetryPolicy = field(
        default_factory=lambda: RetryPolicy(retryable_exceptions=(TransportError,))
    )

    def __post_init__(self) -> None:
        """Validate limits."""
        if self.concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        if not 1 <= self.delete_batch_size <= MAX_DELETE_BATCH_SIZE:
            raise ValueError(
                f"delete_batch_size must be between 1 and {MAX_DELETE_BATCH_SIZE}"
            )
        if self.acl not in CANNED_ACLS:
            raise ValueError(f"Unknown ACL: {self.acl}")

    @property
    def prefix(self) -> str:
        """Key prefix derived from the remote path."""
        return key_prefix(self.remote_path)


@dataclass
class StorageConfig:
    """Connection settings for the object storage.

    Any field left as None falls through to boto3's own resolution
    (shared config files, instance roles, AWS_* variables).
    """

    endpoint_url: str | None = None
    region: str | None = None
    access_key: str | None = None
    secret_key: str | None = None

    @classmethod
    def from_env(cls) -> StorageConfig:
        """Build storage configuration from environment variables."""
        return cls(
            endpoint_url=os.environ.get("UPLOAD_MISSING_S3_ENDPOINT") or None,
            region=os.environ.get("UPLOAD_MISSING_S3_REGION") or None,
            access_key=os.environ.get("UPLOAD_MISSING_S3_ACCESS_KEY") or None,
            secret_key=os.environ.get("UPLOAD_MISSING_S3_SECRET_KEY") or None,
        )
