"""Bounded worker pool with first-failure short circuit.

This module provides:
- PoolState: Lifecycle of a pool run
- TransferPool: Runs a handler over a list of items on a fixed number
  of worker threads
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable, Sequence
from enum import Enum, auto
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class PoolState(Enum):
    """State of the worker pool."""

    STOPPED = auto()
    RUNNING = auto()
    STOPPING = auto()


class TransferPool(Generic[T, R]):
    """Pool of worker threads with at most max_workers items in flight.

    Items are admitted in submission order. The first handler exception
    stops admission: items already in flight run to completion but their
    results are discarded, and run() re-raises that first exception.

    Usage:
        pool = TransferPool(max_workers=2)
        results = pool.run(tasks, handler)
    """

    def __init__(self, max_workers: int = 2, name: str = "TransferPool") -> None:
        """Initialize the pool.

        Args:
            max_workers: Maximum concurrent handler calls.
            name: Prefix for worker thread names.
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._max_workers = max_workers
        self._name = name

        self._pool_state = PoolState.STOPPED
        self._lock = threading.Lock()
        self._queue: queue.Queue[tuple[int, T]] = queue.Queue()

        self._results: dict[int, R] = {}
        self._first_error: Exception | None = None

        # Statistics
        self._active = 0
        self._peak_active = 0
        self._completed_count = 0

    @property
    def state(self) -> PoolState:
        """Get current pool state."""
        return self._pool_state

    @property
    def max_workers(self) -> int:
        """Get the concurrency limit."""
        return self._max_workers

    @property
    def active_count(self) -> int:
        """Get number of items currently being handled."""
        with self._lock:
            return self._active

    @property
    def peak_active(self) -> int:
        """Get the highest number of items ever handled at once."""
        return self._peak_active

    @property
    def completed_count(self) -> int:
        """Get number of items handled successfully."""
        return self._completed_count

    def run(self, items: Sequence[T], handler: Callable[[T], R]) -> list[R]:
        """Handle every item and return the results in submission order.

        Args:
            items: Items to process.
            handler: Called once per item from a worker thread.

        Returns:
            Handler results, ordered like items.

        Raises:
            Exception: The first exception raised by any handler call.
        """
        with self._lock:
            if self._pool_state != PoolState.STOPPED:
                raise RuntimeError("Pool is already running")
            self._pool_state = PoolState.RUNNING
            self._results = {}
            self._first_error = None

        for position, item in enumerate(items):
            self._queue.put((position, item))

        worker_count = min(self._max_workers, len(items))
        workers = [
            threading.Thread(
                target=self._worker_loop,
                args=(handler,),
                name=f"{self._name}-{i}",
                daemon=True,
            )
            for i in range(worker_count)
        ]
        for worker in workers:
            worker.start()
        logger.debug(f"{self._name} started with {worker_count} workers for {len(items)} items")

        for worker in workers:
            worker.join()

        with self._lock:
            self._pool_state = PoolState.STOPPED
            error = self._first_error
            results = [self._results[i] for i in sorted(self._results)]
            # Drop anything never admitted
            while not self._queue.empty():
                self._queue.get_nowait()

        if error is not None:
            raise error
        return results

    def _worker_loop(self, handler: Callable[[T], R]) -> None:
        """Main loop for worker threads."""
        while True:
            with self._lock:
                if self._pool_state != PoolState.RUNNING:
                    return
                try:
                    position, item = self._queue.get_nowait()
                except queue.Empty:
                    return
                self._active += 1
                self._peak_active = max(self._peak_active, self._active)

            try:
                result = handler(item)
            except Exception as e:
                with self._lock:
                    self._active -= 1
                    if self._first_error is None:
                        self._first_error = e
                        self._pool_state = PoolState.STOPPING
                        logger.debug(f"{self._name}: stopping after failure of item {position}")
                return

            with self._lock:
                self._active -= 1
                if self._pool_state == PoolState.RUNNING:
                    self._results[position] = result
                    self._completed_count += 1
