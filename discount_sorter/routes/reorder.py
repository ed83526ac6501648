"""
Reorder trigger API routes.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from ..config import Settings
from ..dependencies import (
    get_collection_locks,
    get_settings,
    get_shopify_client,
    require_allowed_origin,
    require_connection_settings,
    require_secret,
)
from ..processor import CollectionBusyError, CollectionLocks, run_reorder
from ..shopify import (
    CollectionNotFoundError,
    ShopifyAuthError,
    ShopifyClient,
    ShopifyClientError,
    UserError,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    dependencies=[
        Depends(require_allowed_origin),
        Depends(require_connection_settings),
        Depends(require_secret),
    ],
)


class ReorderRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    collection_id: str = Field(alias="collectionId", min_length=1)


class ReorderResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool
    moved: int
    sort_order_changed: bool = Field(alias="sortOrderChanged")
    errors: List[UserError] = []
    job: Optional[str] = None
    message: Optional[str] = None


@router.post("/reorder-by-discount", response_model=ReorderResponse)
async def reorder_by_discount(
    body: ReorderRequest,
    settings: Settings = Depends(get_settings),
    locks: CollectionLocks = Depends(get_collection_locks),
    client: ShopifyClient = Depends(get_shopify_client),
):
    """Sort a collection's products by discount, highest first."""
    logger.info(f"Processing collection: {body.collection_id}")

    try:
        result = await run_reorder(client, body.collection_id, settings, locks)
    except CollectionBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except CollectionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ShopifyAuthError as e:
        logger.error(f"Shopify rejected the admin token: {e}")
        raise HTTPException(status_code=500, detail="Shopify authentication failed")
    except ShopifyClientError as e:
        logger.error(f"Reorder of {body.collection_id} failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return ReorderResponse(
        ok=result.ok,
        moved=result.moved,
        sort_order_changed=result.sort_order_changed,
        errors=result.errors,
        job=result.job_id,
        message=result.message,
    )
