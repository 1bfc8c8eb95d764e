"""Mapping of upstream products into the public response shape."""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List

from .models import TransformedProduct, UpstreamProduct

CENTS = Decimal("0.01")


def round_price(value: float) -> float:
    """Round to cents on the exact binary value, ties away from zero."""
    return float(Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP))


def final_price(price: float, discount_percentage: float) -> float:
    discount = price * (discount_percentage / 100)
    return round_price(price - discount)


def transform_product(product: UpstreamProduct) -> TransformedProduct:
    return TransformedProduct(
        title=product.title,
        description=product.description,
        final_price=final_price(product.price, product.discountPercentage),
    )


def transform_products(products: Iterable[UpstreamProduct]) -> List[TransformedProduct]:
    return [transform_product(product) for product in products]
