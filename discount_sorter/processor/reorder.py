"""
Reorder processor for a single collection.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..config import Settings
from ..shopify import (
    COLLECTION_REORDER_PRODUCTS,
    COLLECTION_UPDATE_SORT_ORDER,
    CollectionReader,
    ShopifyClient,
    SortOrder,
    UserError,
)
from ..shopify.models import CollectionReorderPayload, CollectionUpdatePayload, decode
from .rules import Move, build_moves, evaluate_products, rank_products

logger = logging.getLogger(__name__)


class ReorderError(Exception):
    """Error during reorder process."""
    pass


@dataclass
class ReorderResult:
    """Outcome of one reorder run."""

    collection_id: str
    moved: int = 0
    sort_order_changed: bool = False
    errors: List[UserError] = field(default_factory=list)
    job_id: Optional[str] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return not self.errors


async def set_manual_sort_order(
    client: ShopifyClient,
    collection_id: str,
) -> List[UserError]:
    """
    Switch a collection to MANUAL sort order.

    Returns:
        User errors reported by Shopify (empty on success)
    """
    data = await client.execute(
        COLLECTION_UPDATE_SORT_ORDER,
        variables={
            "input": {"id": collection_id, "sortOrder": SortOrder.MANUAL.value}
        },
        retry_request_errors=False,
    )
    payload = decode(
        CollectionUpdatePayload, data.get("collectionUpdate"), "collectionUpdate"
    )

    if payload.user_errors:
        logger.warning(
            f"Failed to set MANUAL sort order on {collection_id}: "
            f"{[e.message for e in payload.user_errors]}"
        )
    return payload.user_errors


async def submit_moves(
    client: ShopifyClient,
    collection_id: str,
    moves: List[Move],
) -> Tuple[List[UserError], Optional[str]]:
    """
    Submit all moves in one collectionReorderProducts call.

    Shopify finishes the reorder asynchronously; the job id is returned
    as-is and not polled.

    Returns:
        (user errors, job id)
    """
    if not moves:
        raise ReorderError("Refusing to submit an empty move list")

    data = await client.execute(
        COLLECTION_REORDER_PRODUCTS,
        variables={
            "id": collection_id,
            "moves": [move.as_input() for move in moves],
        },
        retry_request_errors=False,
    )
    payload = decode(
        CollectionReorderPayload,
        data.get("collectionReorderProducts"),
        "collectionReorderProducts",
    )

    job_id = payload.job.id if payload.job else None
    if payload.user_errors:
        logger.warning(
            f"Reorder of {collection_id} reported errors: "
            f"{[e.message for e in payload.user_errors]}"
        )
    else:
        logger.info(f"Reorder of {collection_id} accepted, job: {job_id}")
    return payload.user_errors, job_id


async def reorder_collection(
    client: ShopifyClient,
    collection_id: str,
    settings: Settings,
) -> ReorderResult:
    """
    Run the complete discount reorder for a single collection.

    Reads every product, ranks by best variant discount, makes sure the
    collection is MANUAL, then submits the new order in one call.

    Raises:
        ShopifyClientError: If reading or a mutation call fails outright
    """
    reader = CollectionReader(
        client,
        page_size=settings.products_page_size,
        variants_page_size=settings.variants_page_size,
    )

    # Step 1: Read the collection
    snapshot = await reader.read(collection_id)
    collection_id = snapshot.collection_id
    result = ReorderResult(collection_id=collection_id)

    # Step 2: Rank
    ranked = rank_products(evaluate_products(snapshot.products))

    if not ranked:
        logger.info(f"No products in {collection_id}, nothing to reorder")
        result.message = "No products found in collection"
        return result

    # Step 3: Make sure explicit positions are accepted
    if not snapshot.is_manual:
        logger.info(
            f"Collection {collection_id} sorted by {snapshot.sort_order}, "
            f"switching to MANUAL"
        )
        errors = await set_manual_sort_order(client, collection_id)
        if errors:
            result.errors = errors
            result.message = "Could not switch collection to MANUAL sort order"
            return result
        result.sort_order_changed = True

    # Step 4: Submit the new order
    moves = build_moves(ranked, position_base=settings.position_base)
    logger.info(f"Reordering {len(moves)} products in {collection_id}...")

    errors, job_id = await submit_moves(client, collection_id, moves)
    result.moved = len(moves)
    result.errors = errors
    result.job_id = job_id

    logger.info(
        f"Reorder completed for {collection_id}: {len(moves)} moves, "
        f"{len(errors)} errors"
    )
    return result
