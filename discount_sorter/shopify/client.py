"""
Shopify GraphQL Admin API client.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)


DEFAULT_API_VERSION = "2025-10"


class ShopifyClientError(Exception):
    """Base exception for Shopify client errors."""
    pass


class ShopifyAuthError(ShopifyClientError):
    """Authentication error."""
    pass


class ShopifyRateLimitError(ShopifyClientError):
    """Rate limit exceeded."""

    def __init__(self, message: str, retry_after: Optional[float] = None):
        super().__init__(message)
        self.retry_after = retry_after


def clean_shop_domain(shop_domain: str) -> str:
    """Strip scheme and trailing slash from a shop domain."""
    domain = shop_domain.strip()
    if domain.startswith("https://"):
        domain = domain[8:]
    elif domain.startswith("http://"):
        domain = domain[7:]
    return domain.rstrip("/")


class ShopifyClient:
    """
    Async HTTP client for Shopify GraphQL Admin API.

    Handles authentication, throttling, and retries.
    """

    MAX_RETRIES = 5
    BASE_RETRY_DELAY = 1.0  # seconds
    LOW_BUDGET_THRESHOLD = 100

    def __init__(
        self,
        shop_domain: str,
        access_token: str,
        api_version: str = DEFAULT_API_VERSION,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Shopify client.

        Args:
            shop_domain: Store domain (e.g., "mystore.myshopify.com")
            access_token: Admin API access token
            api_version: Admin API version selecting the schema revision
            transport: Optional httpx transport (used by tests)
        """
        domain = clean_shop_domain(shop_domain)

        self.shop_domain = domain
        self.access_token = access_token
        self.api_version = api_version
        self.graphql_url = (
            f"https://{domain}/admin/api/{api_version}/graphql.json"
        )

        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(60.0, connect=10.0),
                headers={
                    "Content-Type": "application/json",
                    "X-Shopify-Access-Token": self.access_token,
                },
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def _retry_after(self, response: httpx.Response) -> float:
        """Seconds from a Retry-After header; the HTTP-date form falls back to the base delay."""
        header = response.headers.get("Retry-After")
        if header is None:
            return self.BASE_RETRY_DELAY
        try:
            return max(float(header), 0.0)
        except ValueError:
            logger.debug(f"Unparseable Retry-After header: {header!r}")
            return self.BASE_RETRY_DELAY

    async def execute(
        self,
        query: str,
        variables: Optional[Dict[str, Any]] = None,
        retry_request_errors: bool = True,
    ) -> Dict[str, Any]:
        """
        Execute a GraphQL query/mutation with retry logic.

        Throttled requests are always retried since Shopify did not run
        them. Transport errors are retried only when
        ``retry_request_errors`` is set; mutations pass False.

        Args:
            query: GraphQL query or mutation string
            variables: Optional variables for the query
            retry_request_errors: Retry on network/transport errors

        Returns:
            The 'data' portion of the GraphQL response

        Raises:
            ShopifyAuthError: If authentication fails
            ShopifyRateLimitError: If rate limit exceeded after retries
            ShopifyClientError: For other errors
        """
        client = await self._get_client()
        payload: Dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        last_error: Optional[Exception] = None

        for attempt in range(self.MAX_RETRIES):
            try:
                response = await client.post(self.graphql_url, json=payload)

                if response.status_code == 401:
                    raise ShopifyAuthError(
                        f"Authentication failed for {self.shop_domain}"
                    )

                if response.status_code == 429:
                    raise ShopifyRateLimitError(
                        "Rate limit exceeded",
                        retry_after=self._retry_after(response),
                    )

                if response.is_error:
                    raise ShopifyClientError(
                        f"HTTP {response.status_code} from {self.shop_domain}"
                    )

                result = response.json()
                if not isinstance(result, dict):
                    raise ShopifyClientError(
                        f"Unexpected response shape: {type(result).__name__}"
                    )

                if result.get("errors"):
                    errors = result["errors"]
                    error_messages = [
                        e.get("message", str(e)) if isinstance(e, dict) else str(e)
                        for e in errors
                    ]

                    if any("throttl" in msg.lower() for msg in error_messages):
                        raise ShopifyRateLimitError(
                            f"GraphQL throttled: {error_messages}"
                        )

                    raise ShopifyClientError(
                        f"GraphQL errors: {error_messages}"
                    )

                cost = (result.get("extensions") or {}).get("cost")
                if cost:
                    throttle = cost.get("throttleStatus", {})
                    available = throttle.get("currentlyAvailable")
                    if available is not None and available < self.LOW_BUDGET_THRESHOLD:
                        logger.warning(
                            f"Low rate limit points: {available} available"
                        )

                data = result.get("data")
                if data is None:
                    raise ShopifyClientError("GraphQL response has no data")
                return data

            except ShopifyRateLimitError as e:
                last_error = e
                delay = e.retry_after or (
                    self.BASE_RETRY_DELAY * (2 ** attempt)
                )
                logger.warning(
                    f"Rate limited, waiting {delay:.1f}s "
                    f"(attempt {attempt + 1}/{self.MAX_RETRIES})"
                )
                await asyncio.sleep(delay)

            except ShopifyClientError:
                raise

            except httpx.RequestError as e:
                last_error = ShopifyClientError(f"Request error: {e}")
                if not retry_request_errors:
                    logger.error(f"Request error, not retrying: {e}")
                    raise last_error from e
                delay = self.BASE_RETRY_DELAY * (2 ** attempt)
                logger.warning(
                    f"Request error, retrying in {delay:.1f}s: {e}"
                )
                await asyncio.sleep(delay)

            except ValueError as e:
                logger.error(f"Invalid JSON from {self.shop_domain}: {e}")
                raise ShopifyClientError(f"Invalid JSON response: {e}") from e

        raise last_error or ShopifyClientError("Max retries exceeded")

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
