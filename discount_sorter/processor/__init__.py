"""
Processor package for reorder operations.
"""

from .rules import (
    Move,
    ProductRef,
    build_moves,
    calculate_discount_percent,
    evaluate_products,
    max_discount_percent,
    rank_products,
)
from .reorder import (
    ReorderError,
    ReorderResult,
    reorder_collection,
    set_manual_sort_order,
    submit_moves,
)
from .runner import CollectionBusyError, CollectionLocks, run_reorder

__all__ = [
    "Move",
    "ProductRef",
    "build_moves",
    "calculate_discount_percent",
    "evaluate_products",
    "max_discount_percent",
    "rank_products",
    "ReorderError",
    "ReorderResult",
    "reorder_collection",
    "set_manual_sort_order",
    "submit_moves",
    "CollectionBusyError",
    "CollectionLocks",
    "run_reorder",
]
