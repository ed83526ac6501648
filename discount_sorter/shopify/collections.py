"""
Collection reader.

Pages through a collection's products with cursor pagination and collects
each product's variant prices.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from .client import ShopifyClient
from .models import (
    CollectionNotFoundError,
    CollectionPage,
    ProductVariantsPage,
    ShopifyDecodeError,
    SortOrder,
    VariantPrice,
    decode,
)
from .queries import COLLECTION_PRODUCTS_QUERY, PRODUCT_VARIANTS_QUERY

logger = logging.getLogger(__name__)


COLLECTION_GID_PREFIX = "gid://shopify/Collection/"
MAX_PAGE_SIZE = 250


def normalize_collection_id(collection_id: str) -> str:
    """Turn a bare numeric id into a collection GID; pass anything else through."""
    value = collection_id.strip()
    if value.isdigit():
        return f"{COLLECTION_GID_PREFIX}{value}"
    return value


@dataclass
class ParsedProduct:
    """Product with the variant prices read from the collection."""

    product_id: str
    variants: List[VariantPrice] = field(default_factory=list)


@dataclass
class CollectionSnapshot:
    """Everything one complete read of a collection produced."""

    collection_id: str
    sort_order: str
    products: List[ParsedProduct]
    pages: int

    @property
    def is_manual(self) -> bool:
        return self.sort_order == SortOrder.MANUAL.value


class CollectionReader:
    """
    Reads every product of a collection, one page at a time.
    """

    def __init__(
        self,
        client: ShopifyClient,
        page_size: int = 50,
        variants_page_size: int = 15,
    ):
        """
        Initialize collection reader.

        Args:
            client: Shopify GraphQL client
            page_size: Products requested per page (1-250)
            variants_page_size: Variants requested per product (1-250)
        """
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}")
        if not 1 <= variants_page_size <= MAX_PAGE_SIZE:
            raise ValueError(
                f"variants_page_size must be between 1 and {MAX_PAGE_SIZE}"
            )
        self.client = client
        self.page_size = page_size
        self.variants_page_size = variants_page_size

    async def fetch_page(
        self, collection_id: str, cursor: Optional[str] = None
    ) -> CollectionPage:
        """
        Fetch a single page of products.

        Raises:
            CollectionNotFoundError: If the collection does not exist
            ShopifyDecodeError: If the page is malformed
        """
        data = await self.client.execute(
            COLLECTION_PRODUCTS_QUERY,
            variables={
                "id": collection_id,
                "first": self.page_size,
                "variantsFirst": self.variants_page_size,
                "cursor": cursor,
            },
        )

        if "collection" not in data:
            raise ShopifyDecodeError(
                "Unexpected collection products response: collection field missing"
            )
        if data["collection"] is None:
            raise CollectionNotFoundError(f"Collection not found: {collection_id}")

        return decode(CollectionPage, data["collection"], "collection products")

    async def fetch_remaining_variants(
        self, product_id: str, cursor: str
    ) -> List[VariantPrice]:
        """
        Page through a product's variants after the given cursor.

        Args:
            product_id: Product GID
            cursor: endCursor of the variant page already read

        Returns:
            Every variant after the cursor, in API order

        Raises:
            ShopifyDecodeError: If a page is malformed or the product vanished
        """
        variants: List[VariantPrice] = []
        seen = {cursor}

        while True:
            data = await self.client.execute(
                PRODUCT_VARIANTS_QUERY,
                variables={
                    "id": product_id,
                    "first": MAX_PAGE_SIZE,
                    "cursor": cursor,
                },
            )

            if not data.get("product"):
                raise ShopifyDecodeError(
                    f"Unexpected product variants response: product {product_id} missing"
                )

            page = decode(ProductVariantsPage, data["product"], "product variants")
            variants.extend(page.variants.nodes)

            if not page.variants.truncated:
                return variants

            cursor = page.variants.page_info.end_cursor
            if cursor in seen:
                raise ShopifyDecodeError(
                    f"Variant pagination of {product_id} did not advance: "
                    f"cursor {cursor!r} already seen"
                )
            seen.add(cursor)

    async def read(self, collection_id: str) -> CollectionSnapshot:
        """
        Read the complete product list of a collection.

        Products are kept in API order. A product returned on more than one
        page keeps its first position and gets the extra variants merged in.
        Products with more variants than fit on a page get the rest fetched
        separately, so every variant is seen.

        Args:
            collection_id: Collection GID (or bare numeric id)

        Returns:
            CollectionSnapshot with every member product
        """
        collection_id = normalize_collection_id(collection_id)
        if not collection_id:
            raise ValueError("collection_id is required")

        logger.info(f"Reading products of {collection_id}")

        products: Dict[str, ParsedProduct] = {}
        complete: Set[str] = set()
        sort_order: Optional[str] = None
        cursor: Optional[str] = None
        seen_cursors: Set[str] = set()
        pages = 0

        while True:
            page = await self.fetch_page(collection_id, cursor)
            pages += 1

            if sort_order is None:
                sort_order = page.sort_order

            for edge in page.products.edges:
                node = edge.node

                existing = products.get(node.id)
                if existing is None:
                    existing = products[node.id] = ParsedProduct(product_id=node.id)
                else:
                    logger.debug(f"Product {node.id} returned again on page {pages}")

                if node.id in complete:
                    continue
                existing.variants.extend(node.variants.nodes)

                if node.variants.truncated:
                    logger.debug(
                        f"Product {node.id} has more than "
                        f"{self.variants_page_size} variants, fetching the rest"
                    )
                    existing.variants.extend(await self.fetch_remaining_variants(
                        node.id, node.variants.page_info.end_cursor
                    ))
                    complete.add(node.id)

            logger.debug(
                f"Page {pages}: {len(page.products.edges)} products "
                f"({len(products)} so far)"
            )

            page_info = page.products.page_info
            if not page_info.has_next_page:
                break

            if page_info.end_cursor in seen_cursors:
                raise ShopifyDecodeError(
                    f"Pagination did not advance: cursor "
                    f"{page_info.end_cursor!r} already seen"
                )
            seen_cursors.add(page_info.end_cursor)
            cursor = page_info.end_cursor

        logger.info(
            f"Read {len(products)} products from {collection_id} "
            f"in {pages} page(s), sort order {sort_order}"
        )

        return CollectionSnapshot(
            collection_id=collection_id,
            sort_order=sort_order or "",
            products=list(products.values()),
            pages=pages,
        )
