"""
Pydantic models for Shopify GraphQL responses.

Responses are decoded once, right after the call, so missing or mistyped
fields fail with a ShopifyDecodeError instead of silently turning into zero
prices further down the pipeline.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .client import ShopifyClientError


class ShopifyDecodeError(ShopifyClientError):
    """Response did not match the expected shape."""
    pass


class CollectionNotFoundError(ShopifyClientError):
    """Collection id does not resolve to a collection."""
    pass


class SortOrder(str, Enum):
    """Collection sort orders known to the Admin API."""
    ALPHA_ASC = "ALPHA_ASC"
    ALPHA_DESC = "ALPHA_DESC"
    BEST_SELLING = "BEST_SELLING"
    CREATED = "CREATED"
    CREATED_DESC = "CREATED_DESC"
    MANUAL = "MANUAL"
    PRICE_ASC = "PRICE_ASC"
    PRICE_DESC = "PRICE_DESC"
    RELEVANCE = "RELEVANCE"


class _ShopifyModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class VariantPrice(_ShopifyModel):
    """Price pair of a single variant (Money scalars arrive as strings)."""
    price: Decimal = Field(ge=0)
    compare_at_price: Optional[Decimal] = Field(default=None, alias="compareAtPrice", ge=0)


class PageInfo(_ShopifyModel):
    has_next_page: bool = Field(alias="hasNextPage")
    end_cursor: Optional[str] = Field(default=None, alias="endCursor")

    @model_validator(mode="after")
    def _cursor_present(self):
        if self.has_next_page and not self.end_cursor:
            raise ValueError("hasNextPage is true but endCursor is missing")
        return self


class VariantConnection(_ShopifyModel):
    nodes: List[VariantPrice]
    page_info: Optional[PageInfo] = Field(default=None, alias="pageInfo")

    @property
    def truncated(self) -> bool:
        return bool(self.page_info and self.page_info.has_next_page)


class ProductNode(_ShopifyModel):
    id: str = Field(min_length=1)
    variants: VariantConnection


class ProductEdge(_ShopifyModel):
    cursor: Optional[str] = None
    node: ProductNode


class ProductConnection(_ShopifyModel):
    edges: List[ProductEdge]
    page_info: PageInfo = Field(alias="pageInfo")


class CollectionPage(_ShopifyModel):
    """One page of a collection's products."""
    id: str
    sort_order: str = Field(alias="sortOrder")
    products: ProductConnection


class ProductVariantsPage(_ShopifyModel):
    """Follow-up page of one product's variants."""
    id: str
    variants: VariantConnection


class UserError(_ShopifyModel):
    """Field-level mutation error, kept verbatim for the caller."""
    field: Optional[List[str]] = None
    message: str


class CollectionSortOrder(_ShopifyModel):
    id: str
    sort_order: str = Field(alias="sortOrder")


class CollectionUpdatePayload(_ShopifyModel):
    collection: Optional[CollectionSortOrder] = None
    user_errors: List[UserError] = Field(alias="userErrors")


class Job(_ShopifyModel):
    id: str
    done: Optional[bool] = None


class CollectionReorderPayload(_ShopifyModel):
    job: Optional[Job] = None
    user_errors: List[UserError] = Field(alias="userErrors")


Model = TypeVar("Model", bound=BaseModel)


def decode(model: Type[Model], data: Any, operation: str) -> Model:
    """
    Validate a response fragment against a model.

    Args:
        model: Pydantic model class to validate against
        data: Raw JSON fragment
        operation: Name used in the error message

    Raises:
        ShopifyDecodeError: If the fragment does not match
    """
    try:
        return model.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in e.errors()
        )
        raise ShopifyDecodeError(
            f"Unexpected {operation} response: {problems}"
        ) from e
