"""
Routes package.
"""

from .reorder import router as reorder_router
from .debug import router as debug_router

__all__ = [
    "reorder_router",
    "debug_router",
]
