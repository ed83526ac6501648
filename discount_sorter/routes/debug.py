"""
Configuration status route.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from ..config import Settings
from ..dependencies import get_settings

router = APIRouter(prefix="/api")


def _presence(value: str) -> str:
    return "set" if value.strip() else "missing"


@router.get("/debug")
async def debug_status(settings: Settings = Depends(get_settings)):
    """Report which settings are present, never their values."""
    return {
        "status": "API is working!",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "config": {
            "shop": _presence(settings.shop),
            "admin_token": _presence(settings.admin_token),
            "shared_secret": _presence(settings.shared_secret),
            "api_version": settings.api_version,
            "allowed_origins": settings.allowed_origin_list,
        },
    }
