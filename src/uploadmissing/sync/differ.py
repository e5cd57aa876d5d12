"""Inventory comparison."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from uploadmissing.sync.types import DiffResult


def diff(
    local: Sequence[str],
    remote: Iterable[str],
    want_deletions: bool = False,
) -> DiffResult:
    """Compute what to upload and, optionally, what to delete.

    Args:
        local: Local relative names, in enumeration order.
        remote: Remote relative names, in listing order.
        want_deletions: Whether to compute the deleted list.

    Returns:
        DiffResult with missing in local order and deleted in remote order.
    """
    remote_order = list(dict.fromkeys(remote))
    remote_names = set(remote_order)
    local_names = set(local)

    missing: list[str] = []
    seen: set[str] = set()
    found = 0
    for name in local:
        if name in seen:
            continue
        seen.add(name)
        if name in remote_names:
            found += 1
        else:
            missing.append(name)

    deleted: tuple[str, ...] = ()
    if want_deletions:
        deleted = tuple(name for name in remote_order if name not in local_names)

    return DiffResult(missing=tuple(missing), deleted=deleted, found=found)
