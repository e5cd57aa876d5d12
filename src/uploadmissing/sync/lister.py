"""Remote listing.

Folds the bucket's listing pages into a single RemoteObjectSet. Listing
is not retried here: any failed page abandons the whole listing and the
TransportError reaches the orchestrator.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING

from uploadmissing.sync.names import strip_prefix
from uploadmissing.sync.types import RemoteObjectSet

if TYPE_CHECKING:
    from uploadmissing.storage import ObjectStorage

logger = logging.getLogger(__name__)


def _relative_names(pages: Iterator[list[str]], prefix: str) -> Iterator[str]:
    """Flatten pages of keys into relative names."""
    for page_number, keys in enumerate(pages, start=1):
        logger.debug(f"Listing page {page_number}: {len(keys)} keys")
        for key in keys:
            # Directory markers have no local counterpart
            if key.endswith("/"):
                continue
            name = strip_prefix(prefix, key)
            if name:
                yield name


def list_remote(storage: ObjectStorage, prefix: str) -> RemoteObjectSet:
    """List every object under a prefix as relative names.

    Args:
        storage: The destination bucket.
        prefix: Key prefix, '' or ending with '/'.

    Returns:
        Immutable set of relative names, in listing order.

    Raises:
        TransportError: If any page request fails.
    """
    remote = RemoteObjectSet(_relative_names(storage.iter_pages(prefix), prefix))
    logger.info(f"Found {len(remote)} remote objects under '{prefix}'")
    return remote
