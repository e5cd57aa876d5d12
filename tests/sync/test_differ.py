"""Tests for inventory comparison."""

from uploadmissing.sync.differ import diff
from uploadmissing.sync.types import RemoteObjectSet


class TestDiff:
    """Tests for diff()."""

    def test_missing_is_local_minus_remote_in_local_order(self) -> None:
        """Missing should keep local enumeration order."""
        result = diff(["c.txt", "a.txt", "b.txt"], {"a.txt"}, want_deletions=True)
        assert result.missing == ("c.txt", "b.txt")
        assert result.found == 1

    def test_deleted_is_remote_minus_local_in_listing_order(self) -> None:
        """Deleted should follow the order names were listed."""
        remote = RemoteObjectSet(["z.bin", "a.txt", "m.bin"])
        result = diff(["a.txt"], remote, want_deletions=True)
        assert result.deleted == ("z.bin", "m.bin")

    def test_no_deletions_unless_requested(self) -> None:
        """Deleted is always empty without want_deletions."""
        result = diff(["a.txt"], ["a.txt", "stale.bin"], want_deletions=False)
        assert result.deleted == ()
        assert result.missing == ()

    def test_no_duplicates(self) -> None:
        """Repeated names should appear once."""
        result = diff(["a", "a", "b"], ["c", "c"], want_deletions=True)
        assert result.missing == ("a", "b")
        assert result.deleted == ("c",)

    def test_partition_invariants(self) -> None:
        """missing + found covers local, deleted + found covers remote."""
        local = ["a", "b", "c", "d"]
        remote = ["c", "d", "e"]
        result = diff(local, remote, want_deletions=True)

        assert set(result.missing) | {"c", "d"} == set(local)
        assert set(result.deleted) | {"c", "d"} == set(remote)
        assert not set(result.missing) & set(remote)
        assert result.found == 2

    def test_identical_inventories(self) -> None:
        """Nothing to do when both sides match."""
        result = diff(["a", "b"], ["b", "a"], want_deletions=True)
        assert result.missing == ()
        assert result.deleted == ()
        assert result.found == 2

    def test_empty_inputs(self) -> None:
        """Empty sides should give empty results."""
        result = diff([], [], want_deletions=True)
        assert result.missing == ()
        assert result.deleted == ()
        assert result.found == 0


class TestRemoteObjectSet:
    """Tests for RemoteObjectSet."""

    def test_membership_and_order(self) -> None:
        """Should iterate in insertion order and support membership."""
        remote = RemoteObjectSet(["b", "a", "b"])
        assert list(remote) == ["b", "a"]
        assert "a" in remote
        assert "c" not in remote
        assert len(remote) == 2

    def test_equality_ignores_order(self) -> None:
        """Two sets with the same names are equal."""
        assert RemoteObjectSet(["a", "b"]) == RemoteObjectSet(["b", "a"])
