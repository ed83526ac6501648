"""
Runner that keeps reorder runs from overlapping on the same collection.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict

from ..config import Settings
from ..shopify import ShopifyClient, normalize_collection_id
from .reorder import ReorderError, ReorderResult, reorder_collection

logger = logging.getLogger(__name__)


class CollectionBusyError(ReorderError):
    """Another run is already reordering this collection."""
    pass


class CollectionLocks:
    """Per-collection locks for one process."""

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}

    def is_locked(self, collection_id: str) -> bool:
        lock = self._locks.get(collection_id)
        return lock is not None and lock.locked()

    @asynccontextmanager
    async def hold(self, collection_id: str) -> AsyncIterator[None]:
        """
        Hold the lock for a collection, failing fast if it is taken.

        Raises:
            CollectionBusyError: If a run for this collection is in flight
        """
        lock = self._locks.setdefault(collection_id, asyncio.Lock())
        if lock.locked():
            raise CollectionBusyError(
                f"A reorder of {collection_id} is already running"
            )

        async with lock:
            try:
                yield
            finally:
                self._locks.pop(collection_id, None)


async def run_reorder(
    client: ShopifyClient,
    collection_id: str,
    settings: Settings,
    locks: CollectionLocks,
) -> ReorderResult:
    """Run a reorder for one collection unless one is already running."""
    collection_id = normalize_collection_id(collection_id)

    async with locks.hold(collection_id):
        result = await reorder_collection(client, collection_id, settings)

    if result.ok:
        logger.info(f"Reorder of {collection_id} succeeded: {result.moved} moved")
    else:
        logger.error(
            f"Reorder of {collection_id} returned {len(result.errors)} user errors"
        )
    return result
