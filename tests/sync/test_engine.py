"""Tests for the mirror orchestrator."""

import os
import stat
from unittest.mock import patch

import pytest

from uploadmissing.core.config import SyncConfig
from uploadmissing.core.errors import ExhaustedRetriesError, TransportError
from uploadmissing.sync.engine import SyncEngine
from uploadmissing.sync.types import SyncPhase


def run(storage, root, **kwargs):
    config = SyncConfig(local_root=str(root), bucket="bucket", **kwargs)
    return SyncEngine(config, storage).run()


class TestSyncEngine:
    """End-to-end runs against the in-memory bucket."""

    def test_uploads_everything_into_empty_bucket(self, storage, make_tree) -> None:
        """local={a.txt, b.jpg}, remote={} uploads both in order."""
        root = make_tree({"a.txt": b"a", "b.jpg": b"b"})

        report = run(storage, root, remote_path="site", concurrency=1)

        assert report.success
        assert report.phase == SyncPhase.DONE
        assert report.missing == ["a.txt", "b.jpg"]
        assert report.uploaded == ["a.txt", "b.jpg"]
        assert storage.put_calls == ["site/a.txt", "site/b.jpg"]
        assert storage.objects["site/a.txt"].content_type == "text/plain"
        assert storage.objects["site/b.jpg"].content_type == "image/jpeg"

    def test_deletes_remote_only_objects(self, storage, make_tree) -> None:
        """local={a.txt}, remote={a.txt, stale.bin} deletes stale.bin in one batch."""
        root = make_tree({"a.txt": b"a"})
        storage.seed("site/a.txt", "site/stale.bin")

        report = run(storage, root, remote_path="site/", delete=True)

        assert report.success
        assert report.missing == []
        assert report.deleted == ["stale.bin"]
        assert report.found == 1
        assert storage.put_calls == []
        assert storage.delete_calls == [["site/stale.bin"]]

    def test_keeps_remote_only_objects_without_delete(self, storage, make_tree) -> None:
        """Without --delete nothing is removed."""
        root = make_tree({"a.txt": b"a"})
        storage.seed("stale.bin")

        report = run(storage, root)

        assert report.deleted == []
        assert storage.delete_calls == []
        assert "stale.bin" in storage.objects

    def test_second_run_is_a_noop(self, storage, make_tree) -> None:
        """Running twice with no changes uploads and deletes nothing the second time."""
        root = make_tree({"a.txt": b"a", "dir/b.txt": b"b"})
        storage.seed("old.bin")
        run(storage, root, delete=True)
        storage.put_calls.clear()
        storage.delete_calls.clear()

        report = run(storage, root, delete=True)

        assert report.missing == []
        assert report.deleted == []
        assert storage.put_calls == []
        assert storage.delete_calls == []

    def test_dry_run_makes_no_changes(self, storage, make_tree) -> None:
        """Dry run lists and diffs only."""
        root = make_tree({"a.txt": b"a"})
        storage.seed("stale.bin")

        report = run(storage, root, delete=True, dry_run=True)

        assert report.success
        assert report.missing == ["a.txt"]
        assert report.deleted == ["stale.bin"]
        assert storage.put_calls == []
        assert storage.delete_calls == []

    def test_listing_failure_stops_before_diff(self, storage, make_tree) -> None:
        """A failed listing ends the run in FAILED with nothing written."""
        root = make_tree({"a.txt": b"a"})
        storage.fail_list_on_page = 1

        report = run(storage, root)

        assert not report.success
        assert report.phase == SyncPhase.FAILED
        assert report.failed_phase == SyncPhase.LISTING
        assert isinstance(report.error, TransportError)
        assert storage.put_calls == []

    def test_unreadable_directory_fails_listing_without_deleting(self, storage, make_tree) -> None:
        """Files hidden by an unlistable directory are never treated as remote-only."""
        root = make_tree({"a.txt": b"a", "photos/p.jpg": b"p"})
        storage.seed("a.txt", "photos/p.jpg")
        real_scandir = os.scandir

        def scandir(path):
            if os.fspath(path).endswith("photos"):
                raise PermissionError(13, "Permission denied", os.fspath(path))
            return real_scandir(path)

        with patch("os.scandir", side_effect=scandir):
            report = run(storage, root, delete=True)

        assert not report.success
        assert report.failed_phase == SyncPhase.LISTING
        assert isinstance(report.error, PermissionError)
        assert storage.delete_calls == []
        assert set(storage.objects) == {"a.txt", "photos/p.jpg"}

    def test_upload_failure_skips_delete_phase(self, storage, make_tree, no_sleep) -> None:
        """An exhausted upload short-circuits deletion."""
        root = make_tree({"a.txt": b"a"})
        storage.seed("stale.bin")
        storage.put_failures["a.txt"] = 100

        report = run(storage, root, delete=True)

        assert report.failed_phase == SyncPhase.UPLOADING
        assert isinstance(report.error, ExhaustedRetriesError)
        assert storage.delete_calls == []
        assert "stale.bin" in storage.objects

    def test_delete_failure_reported(self, storage, make_tree, no_sleep) -> None:
        """An exhausted batch delete fails the run after uploads completed."""
        root = make_tree({"a.txt": b"a"})
        storage.seed("stale.bin")
        storage.delete_failures = 100

        report = run(storage, root, delete=True)

        assert report.failed_phase == SyncPhase.DELETING
        assert report.uploaded == ["a.txt"]

    def test_repair_forces_private_acl(self, storage, make_tree) -> None:
        """An unreadable file is uploaded private and its mode restored."""
        root = make_tree({"secret.txt": b"s"})
        path = root / "secret.txt"
        os.chmod(path, 0o200)

        with patch("uploadmissing.sync.permissions.os.access", side_effect=[False, True]):
            report = run(storage, root, acl="public-read", chmod_if_needed=True)

        assert report.success
        assert storage.objects["secret.txt"].acl == "private"
        assert stat.S_IMODE(path.stat().st_mode) == 0o200

    def test_excluded_files_are_not_uploaded(self, storage, make_tree) -> None:
        """Exclude patterns keep files out of the local inventory."""
        root = make_tree({"a.txt": b"a", "b.log": b"b", ".DS_Store": b""})

        report = run(storage, root, exclude=["*.log"])

        assert report.uploaded == ["a.txt"]

    def test_engine_is_single_use(self, storage, make_tree) -> None:
        """A second run() on the same engine is refused."""
        root = make_tree({"a.txt": b"a"})
        engine = SyncEngine(SyncConfig(local_root=str(root), bucket="bucket"), storage)
        engine.run()

        with pytest.raises(RuntimeError, match="single-use"):
            engine.run()
