"""
Business rules for discount ranking.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Optional

from ..shopify import ParsedProduct, VariantPrice


ZERO = Decimal("0")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class ProductRef:
    """A product and the best discount found on any of its variants."""

    id: str
    discount_percent: Decimal


@dataclass(frozen=True)
class Move:
    """Assigns a product to a position in a manually sorted collection."""

    id: str
    new_position: int

    def as_input(self) -> dict:
        """MoveInput payload; newPosition is an UnsignedInt64 string."""
        return {"id": self.id, "newPosition": str(self.new_position)}


def calculate_discount_percent(
    price: Optional[Decimal],
    compare_at_price: Optional[Decimal],
) -> Decimal:
    """
    Calculate the discount percentage of a variant.

    Rules:
    1. compare_at_price > price and compare_at_price > 0:
       (compare_at_price - price) / compare_at_price × 100
    2. Otherwise: 0 (never negative)

    Args:
        price: Current price
        compare_at_price: Original/list price, None when not set

    Returns:
        Discount percentage as Decimal
    """
    if compare_at_price is None or compare_at_price <= ZERO:
        return ZERO

    price = price if price is not None else ZERO
    if compare_at_price <= price:
        return ZERO

    return (compare_at_price - price) / compare_at_price * HUNDRED


def max_discount_percent(variants: Iterable[VariantPrice]) -> Decimal:
    """Best discount across a product's variants (0 when there are none)."""
    best = ZERO
    for variant in variants:
        percent = calculate_discount_percent(variant.price, variant.compare_at_price)
        if percent > best:
            best = percent
    return best


def evaluate_products(products: Iterable[ParsedProduct]) -> List[ProductRef]:
    """Build ProductRefs in the order the products were read."""
    return [
        ProductRef(
            id=product.product_id,
            discount_percent=max_discount_percent(product.variants),
        )
        for product in products
    ]


def rank_products(products: Iterable[ProductRef]) -> List[ProductRef]:
    """
    Order products by discount, highest first.

    The sort is stable, so products with equal discounts keep their input
    order and repeated runs over the same input give the same result.
    """
    return sorted(products, key=lambda p: p.discount_percent, reverse=True)


def build_moves(ranked: Iterable[ProductRef], position_base: int = 0) -> List[Move]:
    """
    Turn a ranked list into one Move per product.

    Args:
        ranked: Products in their final order
        position_base: Position of the first product (0 or 1)

    Returns:
        Moves in rank order
    """
    if position_base not in (0, 1):
        raise ValueError("position_base must be 0 or 1")

    return [
        Move(id=product.id, new_position=index)
        for index, product in enumerate(ranked, start=position_base)
    ]
