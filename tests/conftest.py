"""Shared pytest fixtures.

Provides an in-memory ObjectStorage so the engine can be exercised
without a network, plus a helper to lay out a local tree.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO
from unittest.mock import patch

import pytest

from uploadmissing.core.errors import TransportError
from uploadmissing.storage import ObjectStorage


@dataclass
class StoredObject:
    """An object held by FakeStorage."""

    body: bytes
    content_type: str
    acl: str


@dataclass
class FakeStorage(ObjectStorage):
    """In-memory bucket with failure injection.

    Attributes:
        objects: Stored objects by key.
        page_size: Keys per listing page.
        fail_list_on_page: 1-based page number whose fetch fails.
        put_failures: Remaining failures to inject per key.
        delete_failures: Remaining failures to inject for batch deletes.
        put_delay: Seconds each put holds its stream open.
    """

    objects: dict[str, StoredObject] = field(default_factory=dict)
    page_size: int = 1000
    fail_list_on_page: int | None = None
    put_failures: dict[str, int] = field(default_factory=dict)
    delete_failures: int = 0
    put_delay: float = 0.0
    pages_requested: int = 0
    put_calls: list[str] = field(default_factory=list)
    delete_calls: list[list[str]] = field(default_factory=list)
    open_streams: int = 0
    peak_open_streams: int = 0
    on_put: Callable[[str], None] | None = None

    def __post_init__(self) -> None:
        self._lock = threading.Lock()

    @property
    def location(self) -> str:
        return "memory://bucket"

    def iter_pages(self, prefix: str) -> Iterator[list[str]]:
        keys = [k for k in self.objects if k.startswith(prefix)]
        for start in range(0, max(len(keys), 1), self.page_size):
            self.pages_requested += 1
            if self.fail_list_on_page == self.pages_requested:
                raise TransportError(f"page {self.pages_requested} failed")
            yield keys[start:start + self.page_size]

    def put(self, key: str, body: BinaryIO, content_type: str, acl: str) -> None:
        with self._lock:
            self.put_calls.append(key)
            self.open_streams += 1
            self.peak_open_streams = max(self.peak_open_streams, self.open_streams)
        try:
            if self.on_put:
                self.on_put(key)
            if self.put_delay:
                time.sleep(self.put_delay)
            with self._lock:
                remaining = self.put_failures.get(key, 0)
                if remaining:
                    self.put_failures[key] = remaining - 1
                    raise TransportError(f"put {key} failed")
            data = body.read()
            with self._lock:
                self.objects[key] = StoredObject(data, content_type, acl)
        finally:
            with self._lock:
                self.open_streams -= 1

    def delete_batch(self, keys: list[str]) -> None:
        self.delete_calls.append(list(keys))
        if self.delete_failures:
            self.delete_failures -= 1
            raise TransportError("batch delete failed")
        for key in keys:
            self.objects.pop(key, None)

    def seed(self, *keys: str) -> None:
        """Store placeholder objects under the given keys."""
        for key in keys:
            self.objects[key] = StoredObject(b"", "application/octet-stream", "private")


@pytest.fixture
def storage() -> FakeStorage:
    """Create an empty in-memory bucket."""
    return FakeStorage()


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[dict[str, bytes]], Path]:
    """Return a helper that writes files under a fresh local root."""

    def _make(files: dict[str, bytes]) -> Path:
        root = tmp_path / "local"
        root.mkdir(exist_ok=True)
        for name, data in files.items():
            path = root / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        return root

    return _make


@pytest.fixture
def no_sleep() -> Iterator[None]:
    """Skip backoff delays."""
    with patch("uploadmissing.sync.retry.time.sleep"):
        yield
