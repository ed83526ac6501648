"""
Shopify API module.
"""

from discount_sorter.shopify.client import (
    DEFAULT_API_VERSION,
    ShopifyClient,
    ShopifyClientError,
    ShopifyAuthError,
    ShopifyRateLimitError,
)
from discount_sorter.shopify.models import (
    CollectionNotFoundError,
    ShopifyDecodeError,
    SortOrder,
    UserError,
    VariantPrice,
)
from discount_sorter.shopify.collections import (
    CollectionReader,
    CollectionSnapshot,
    ParsedProduct,
    normalize_collection_id,
)
from discount_sorter.shopify.mutations import (
    COLLECTION_REORDER_PRODUCTS,
    COLLECTION_UPDATE_SORT_ORDER,
)

__all__ = [
    "DEFAULT_API_VERSION",
    "ShopifyClient",
    "ShopifyClientError",
    "ShopifyAuthError",
    "ShopifyRateLimitError",
    "CollectionNotFoundError",
    "ShopifyDecodeError",
    "SortOrder",
    "UserError",
    "VariantPrice",
    "CollectionReader",
    "CollectionSnapshot",
    "ParsedProduct",
    "normalize_collection_id",
    "COLLECTION_REORDER_PRODUCTS",
    "COLLECTION_UPDATE_SORT_ORDER",
]
