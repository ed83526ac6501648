"""Fake Shopify endpoint used across tests."""

import json
from typing import Any, Dict, List, Optional

import httpx

from discount_sorter.shopify import ShopifyClient

COLLECTION_ID = "gid://shopify/Collection/1"


def product(pid: str, *prices, has_more: bool = False) -> Dict[str, Any]:
    """Product node with (price, compareAtPrice) variant pairs."""
    return {
        "id": f"gid://shopify/Product/{pid}",
        "variants": {
            "nodes": [
                {"price": price, "compareAtPrice": compare}
                for price, compare in prices
            ],
            "pageInfo": {
                "hasNextPage": has_more,
                "endCursor": "v0" if has_more else None,
            },
        },
    }


class FakeShopify:
    """
    In-memory stand-in for the Admin GraphQL endpoint.

    Serves a collection's products in pages using offset cursors and records
    every operation it receives. Variants beyond a product's first page come
    from ``extra_variants`` (product GID -> list of price pairs).
    """

    def __init__(
        self,
        products: Optional[List[Dict[str, Any]]] = None,
        sort_order: str = "MANUAL",
        update_errors: Optional[List[dict]] = None,
        reorder_errors: Optional[List[dict]] = None,
        job_id: Optional[str] = "gid://shopify/Job/42",
        extra_variants: Optional[Dict[str, List[tuple]]] = None,
    ):
        self.products = products or []
        self.sort_order = sort_order
        self.update_errors = update_errors or []
        self.reorder_errors = reorder_errors or []
        self.job_id = job_id
        self.extra_variants = extra_variants or {}
        self.missing_collection = False
        self.calls: List[Dict[str, Any]] = []

    @property
    def operations(self) -> List[str]:
        return [call["operation"] for call in self.calls]

    @property
    def reorder_moves(self) -> List[dict]:
        for call in self.calls:
            if call["operation"] == "reorder":
                return call["variables"]["moves"]
        return []

    def handler(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        query = payload["query"]
        variables = payload.get("variables", {})

        if "collectionReorderProducts" in query:
            self.calls.append({"operation": "reorder", "variables": variables})
            job = {"id": self.job_id, "done": False} if self.job_id else None
            data = {"collectionReorderProducts": {
                "job": job, "userErrors": self.reorder_errors,
            }}
        elif "collectionUpdate" in query:
            self.calls.append({"operation": "update", "variables": variables})
            if not self.update_errors:
                self.sort_order = variables["input"]["sortOrder"]
            data = {"collectionUpdate": {
                "collection": {"id": variables["input"]["id"], "sortOrder": self.sort_order},
                "userErrors": self.update_errors,
            }}
        elif "query ProductVariants" in query:
            self.calls.append({"operation": "variants", "variables": variables})
            data = {"product": self._variants(variables)}
        else:
            self.calls.append({"operation": "read", "variables": variables})
            data = {"collection": self._page(variables)}

        return httpx.Response(200, json={"data": data})

    def _variants(self, variables: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        pid = variables["id"]
        if pid not in self.extra_variants:
            return None

        offset = int(variables["cursor"].lstrip("v"))
        first = variables["first"]
        chunk = self.extra_variants[pid][offset:offset + first]
        end = offset + len(chunk)
        has_next = end < len(self.extra_variants[pid])

        return {
            "id": pid,
            "variants": {
                "nodes": [
                    {"price": price, "compareAtPrice": compare}
                    for price, compare in chunk
                ],
                "pageInfo": {
                    "hasNextPage": has_next,
                    "endCursor": f"v{end}",
                },
            },
        }

    def _page(self, variables: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if self.missing_collection:
            return None

        offset = int(variables.get("cursor") or 0)
        first = variables["first"]
        chunk = self.products[offset:offset + first]
        end = offset + len(chunk)
        has_next = end < len(self.products)

        return {
            "id": variables["id"],
            "sortOrder": self.sort_order,
            "products": {
                "edges": [
                    {"cursor": str(offset + i + 1), "node": node}
                    for i, node in enumerate(chunk)
                ],
                "pageInfo": {
                    "hasNextPage": has_next,
                    "endCursor": str(end) if chunk else None,
                },
            },
        }


def make_client(handler) -> ShopifyClient:
    """Shopify client wired to a mock transport, with retry delays disabled."""
    client = ShopifyClient(
        "test-store.myshopify.com",
        "shpat_test",
        transport=httpx.MockTransport(handler),
    )
    client.BASE_RETRY_DELAY = 0
    return client
