"""
FastAPI dependency injection.
Settings and locks live on app.state; a Shopify client is opened per request.
"""

import hmac
import logging
from typing import AsyncIterator

from fastapi import Depends, HTTPException, Request

from .config import Settings
from .processor import CollectionLocks
from .shopify import ShopifyClient

logger = logging.getLogger(__name__)


def get_settings(request: Request) -> Settings:
    """Get the settings the app was created with."""
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        raise RuntimeError("Settings not initialized")
    return settings


def get_collection_locks(request: Request) -> CollectionLocks:
    """Get the per-collection lock registry."""
    locks = getattr(request.app.state, "collection_locks", None)
    if locks is None:
        raise RuntimeError("Collection locks not initialized")
    return locks


def require_allowed_origin(
    request: Request,
    settings: Settings = Depends(get_settings),
):
    """
    Dependency that rejects disallowed origins when configured to.
    Otherwise the CORS layer simply withholds its headers.
    """
    origin = request.headers.get("origin")
    if not origin or not settings.reject_disallowed_origins:
        return
    if not settings.is_origin_allowed(origin):
        logger.warning(f"Rejected request from origin {origin}")
        raise HTTPException(status_code=403, detail="Origin not allowed")


def require_connection_settings(settings: Settings = Depends(get_settings)):
    """Dependency that fails the request when Shopify settings are missing."""
    missing = settings.missing_connection_settings()
    if missing:
        logger.error(f"Missing environment variables: {missing}")
        raise HTTPException(
            status_code=500,
            detail=f"Server configuration error: missing {', '.join(missing)}",
        )


def require_secret(
    request: Request,
    settings: Settings = Depends(get_settings),
):
    """Dependency that checks the shared-secret header, when one is configured."""
    if not settings.shared_secret:
        return
    provided = request.headers.get(settings.secret_header, "")
    if not hmac.compare_digest(provided.encode(), settings.shared_secret.encode()):
        raise HTTPException(status_code=401, detail="Unauthorized")


async def get_shopify_client(
    settings: Settings = Depends(get_settings),
) -> AsyncIterator[ShopifyClient]:
    """Open a Shopify client for the duration of a request."""
    async with ShopifyClient(
        settings.shop, settings.admin_token, api_version=settings.api_version
    ) as client:
        yield client
