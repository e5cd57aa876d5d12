"""Batched deletion of remote-only objects.

This module provides:
- partition: Split a sequence into consecutive bounded batches
- BatchDeleter: Deletes batches sequentially, retrying each one
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, TypeVar

from uploadmissing.core.errors import TransportError
from uploadmissing.sync.names import remote_key
from uploadmissing.sync.retry import RetryPolicy
from uploadmissing.storage import MAX_KEYS_PER_DELETE

if TYPE_CHECKING:
    from uploadmissing.storage import ObjectStorage

logger = logging.getLogger(__name__)

T = TypeVar("T")


def partition(items: Sequence[T], size: int) -> list[list[T]]:
    """Split items into consecutive batches of at most size items."""
    if size < 1:
        raise ValueError("size must be at least 1")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


class BatchDeleter:
    """Deletes remote objects in batches, one batch at a time.

    A batch that still fails after every retry aborts the phase; later
    batches are never sent.
    """

    def __init__(
        self,
        storage: ObjectStorage,
        prefix: str,
        retry: RetryPolicy | None = None,
        batch_size: int = MAX_KEYS_PER_DELETE,
    ) -> None:
        if not 1 <= batch_size <= MAX_KEYS_PER_DELETE:
            raise ValueError(f"batch_size must be between 1 and {MAX_KEYS_PER_DELETE}")
        self._storage = storage
        self._prefix = prefix
        self._retry = retry or RetryPolicy(retryable_exceptions=(TransportError,))
        self._batch_size = batch_size

    def delete_all(self, deleted: Sequence[str]) -> list[str]:
        """Delete every name in deleted.

        Args:
            deleted: Relative names to remove, in listing order.

        Returns:
            The names removed, in order.

        Raises:
            ExhaustedRetriesError: If a batch failed on every attempt.
        """
        if not deleted:
            return []

        batches = partition(deleted, self._batch_size)
        removed: list[str] = []
        for number, names in enumerate(batches, start=1):
            keys = [remote_key(self._prefix, name) for name in names]
            logger.info(f"Deleting batch {number}/{len(batches)} ({len(keys)} objects)")
            self._retry.call(
                lambda keys=keys: self._storage.delete_batch(keys),
                description=f"Delete batch {number}/{len(batches)}",
            )
            for name in names:
                logger.info(f"Deleted {name}")
            removed.extend(names)
        return removed
