"""Transfer pipeline for missing files.

This module provides:
- TransferPipeline: Uploads missing files on a bounded pool, retrying
  each put and repairing unreadable files when asked to
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from typing import TYPE_CHECKING

from uploadmissing.core.errors import PermissionRepairError, TransportError
from uploadmissing.sync.content_types import content_type_for
from uploadmissing.sync.names import remote_key
from uploadmissing.sync.permissions import ensure_readable, restore_mode
from uploadmissing.sync.pool import TransferPool
from uploadmissing.sync.retry import RetryPolicy
from uploadmissing.sync.types import TransferTask, UploadOutcome

if TYPE_CHECKING:
    from uploadmissing.storage import ObjectStorage

logger = logging.getLogger(__name__)

# Access-repaired files are never published more widely than they were
REPAIRED_ACL = "private"


class TransferPipeline:
    """Uploads files from the local root to the bucket.

    Usage:
        pipeline = TransferPipeline(storage, "/data", "backups/")
        outcomes = pipeline.upload(["a.txt", "b.jpg"])
    """

    def __init__(
        self,
        storage: ObjectStorage,
        local_root: str,
        prefix: str,
        acl: str = "private",
        chmod_if_needed: bool = False,
        retry: RetryPolicy | None = None,
        concurrency: int = 2,
    ) -> None:
        """Initialize the pipeline.

        Args:
            storage: Destination bucket.
            local_root: Directory relative names are resolved against.
            prefix: Key prefix prepended to every relative name.
            acl: Canned ACL for uploaded objects.
            chmod_if_needed: Repair unreadable files before uploading.
            retry: Retry policy for each put.
            concurrency: Maximum uploads in flight.
        """
        self._storage = storage
        self._local_root = local_root
        self._prefix = prefix
        self._acl = acl
        self._chmod_if_needed = chmod_if_needed
        self._retry = retry or RetryPolicy(retryable_exceptions=(TransportError,))
        self._concurrency = concurrency
        self._total = 0

    def build_task(self, index: int, name: str) -> TransferTask:
        """Resolve the local path, key and content type for a name."""
        return TransferTask(
            index=index,
            relative_name=name,
            local_path=os.path.join(self._local_root, name),
            remote_key=remote_key(self._prefix, name),
            content_type=content_type_for(name),
            acl=self._acl,
        )

    def upload(self, missing: Sequence[str]) -> list[UploadOutcome]:
        """Upload every missing name.

        Args:
            missing: Relative names to upload, in the order to admit them.

        Returns:
            One outcome per name, in input order.

        Raises:
            ExhaustedRetriesError: If any put failed on every attempt.
            OSError: If a local file could not be opened.
        """
        self._total = len(missing)
        if not missing:
            return []

        tasks = [self.build_task(i, name) for i, name in enumerate(missing, start=1)]
        pool: TransferPool[TransferTask, UploadOutcome] = TransferPool(
            max_workers=self._concurrency, name="Upload"
        )
        return pool.run(tasks, self.process)

    def process(self, task: TransferTask) -> UploadOutcome:
        """Upload a single task, restoring any repaired mode afterwards."""
        if self._chmod_if_needed:
            try:
                original_mode = ensure_readable(task.local_path)
            except PermissionRepairError as e:
                logger.warning(f"[{task.index}/{self._total}] Skipping {task.relative_name}: {e}")
                return UploadOutcome(relative_name=task.relative_name, skipped=True)

            if original_mode is not None:
                task.chmod_applied = True
                task.original_mode = original_mode
                task.acl = REPAIRED_ACL

        logger.info(f"[{task.index}/{self._total}] Uploading {task.relative_name}")
        try:
            self._retry.call(
                lambda: self._put(task),
                description=f"Upload of {task.relative_name}",
            )
        finally:
            if task.chmod_applied and task.original_mode is not None:
                restore_mode(task.local_path, task.original_mode)

        return UploadOutcome(
            relative_name=task.relative_name,
            uploaded=True,
            retries=task.attempts - 1,
        )

    def _put(self, task: TransferTask) -> None:
        """One put attempt with a freshly opened stream."""
        task.attempts += 1
        with open(task.local_path, "rb") as body:
            self._storage.put(
                task.remote_key,
                body,
                content_type=task.content_type,
                acl=task.acl,
            )
