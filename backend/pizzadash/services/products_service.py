# backend/pizzadash/services/products_service.py
"""
Catalog management.

Payloads reach this module already normalized by validation.enforce_rules_product.
A pizza created without sized prices takes the base price of every size
currently enabled in PizzaSettings.
"""
from __future__ import annotations

import uuid
from dataclasses import replace

from ..models.records import CATEGORY_PIZZA, Product
from ..validation import NotFoundError, ValidationError
from .entity_store import PRODUCTS, EntityStore

PRODUCT_MUTABLE_FIELDS = {"name", "category", "sizes", "price", "is_available", "description"}


def default_pizza_sizes(store: EntityStore) -> dict[str, float]:
    settings = store.settings
    return {size: settings.base_prices[size] for size in settings.available_sizes() if settings.base_prices.get(size)}


def _check_invariants(product: Product) -> None:
    if product.category == CATEGORY_PIZZA and not product.sizes:
        raise ValidationError("A pizza needs at least one size with a positive price")


def list_products(store: EntityStore, category: str | None = None, available_only: bool = False) -> list[Product]:
    products = store.products
    if category:
        products = [p for p in products if p.category == category]
    if available_only:
        products = [p for p in products if p.is_available]
    return sorted(products, key=lambda p: (p.category, p.name.casefold()))


def get_product(store: EntityStore, product_id: str) -> Product:
    product = store.find(PRODUCTS, product_id)
    if product is None:
        raise NotFoundError("Product not found")
    return product


def create_product(store: EntityStore, patch: dict) -> Product:
    sizes = patch.get("sizes") or {}
    if patch["category"] == CATEGORY_PIZZA and not sizes:
        sizes = default_pizza_sizes(store)

    product = Product(
        id=uuid.uuid4().hex[:12],
        name=patch["name"],
        category=patch["category"],
        sizes=sizes,
        price=patch.get("price"),
        is_available=True if patch.get("is_available") is None else bool(patch["is_available"]),
        description=patch.get("description"),
    )
    _check_invariants(product)
    with store.mutation():
        store.replace(PRODUCTS, store.products + [product])
    return product


def update_product(store: EntityStore, product_id: str, patch: dict) -> Product:
    fields = {k: v for k, v in patch.items() if k in PRODUCT_MUTABLE_FIELDS}
    if fields.get("is_available") is None:
        fields.pop("is_available", None)
    with store.mutation():
        product = get_product(store, product_id)
        updated = replace(product, **fields)
        _check_invariants(updated)
        store.replace(PRODUCTS, [updated if p.id == product.id else p for p in store.products])
    return updated


def set_availability(store: EntityStore, product_id: str, is_available: bool) -> Product:
    with store.mutation():
        product = get_product(store, product_id)
        updated = replace(product, is_available=bool(is_available))
        store.replace(PRODUCTS, [updated if p.id == product.id else p for p in store.products])
    return updated


def delete_product(store: EntityStore, product_id: str) -> Product:
    """Existing orders keep their resolved names and prices."""
    with store.mutation():
        product = get_product(store, product_id)
        store.replace(PRODUCTS, [p for p in store.products if p.id != product.id])
    return product
