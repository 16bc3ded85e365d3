# Overview: Unit-price resolution for order lines, including half-and-half pizzas.

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ..models.records import CATEGORY_ADDON, CATEGORY_PIZZA, Product
from ..validation import OrderItemDraft, ValidationError


HALF_AND_HALF_PREFIX = "Half-and-half"


@dataclass(frozen=True)
class ResolvedItem:
    product_name: str
    unit_price: float


def product_price(product: Product, size: str | None) -> float:
    """
    Price of one unit of `product` at `size`.

    Add-ons have a single price. Sized products (pizzas, drinks) use the price
    for the requested size; a drink offered in exactly one volume resolves
    without a size. Anything else yields 0.
    """
    if product.category == CATEGORY_ADDON:
        return product.price or 0.0
    if size:
        return product.sizes.get(size, 0.0)
    if len(product.sizes) == 1:
        return next(iter(product.sizes.values()))
    return 0.0


def _index(products: Iterable[Product]) -> dict[str, Product]:
    return {p.id: p for p in products}


def resolve(item: OrderItemDraft, products: Iterable[Product]) -> ResolvedItem | None:
    """
    Resolve a requested line to a display name and unit price.

    Returns None when a referenced product does not exist; the caller drops
    such lines. A half-and-half line is charged the pricier half's rate for
    the whole unit, and both halves must be pizzas (ValidationError otherwise).
    """
    catalog = _index(products)
    first = catalog.get(item.product_id)
    if first is None:
        return None

    if not item.is_half_and_half:
        return ResolvedItem(product_name=first.name, unit_price=product_price(first, item.size))

    second = catalog.get(item.second_product_id)
    if second is None:
        return None
    if first.category != CATEGORY_PIZZA or second.category != CATEGORY_PIZZA:
        raise ValidationError("Half-and-half is only available for pizzas")
    unit_price = max(product_price(first, item.size), product_price(second, item.size))
    return ResolvedItem(
        product_name=f"{HALF_AND_HALF_PREFIX}: {first.name} / {second.name}",
        unit_price=unit_price,
    )
