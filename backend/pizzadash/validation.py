from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

from .models.records import (
    CATEGORY_ADDON,
    CATEGORY_DRINK,
    CATEGORY_PIZZA,
    FULFILLMENT_DELIVERY,
    FULFILLMENT_TYPES,
    PIZZA_SIZES,
    PRODUCT_CATEGORIES,
    USER_ROLES,
    USER_STATUSES,
)


# Maximum accepted price for any catalog entry or setting
MAX_PRICE = 9_999.99
MAX_QUANTITY = 999

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class ValidationError(ValueError):
    """400-level input problem."""


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., duplicate email)."""


class NotFoundError(LookupError):
    """404-level missing target."""


@dataclass(frozen=True)
class FieldPolicy:
    """
    Central policy layer:
    - writable_fields: what clients are allowed to set (security boundary)
    - required_on_create: fields required for POST
    """
    writable_fields: set[str]
    required_on_create: set[str] = None  # type: ignore


ORDER_POLICY = FieldPolicy(
    writable_fields={
        "customer_name", "customer_phone", "fulfillment_type", "items",
        "address", "location_link", "notes",
    },
    required_on_create={"customer_name", "fulfillment_type", "items"},
)

ORDER_ITEM_POLICY = FieldPolicy(
    writable_fields={"product_id", "second_product_id", "quantity", "size"},
    required_on_create={"product_id", "quantity"},
)

PRODUCT_POLICY = FieldPolicy(
    writable_fields={"name", "category", "sizes", "price", "is_available", "description"},
    required_on_create={"name", "category"},
)

CUSTOMER_POLICY = FieldPolicy(
    writable_fields={"id", "name", "phone", "address", "location_link"},
    required_on_create={"name"},
)

REGISTRATION_POLICY = FieldPolicy(
    writable_fields={"name", "email", "password", "role"},
    required_on_create={"name", "email", "password", "role"},
)

USER_UPDATE_POLICY = FieldPolicy(
    writable_fields={"name", "email", "password", "role", "status", "avatar"},
)

SETTINGS_POLICY = FieldPolicy(
    writable_fields={"base_prices", "size_availability"},
    required_on_create={"base_prices", "size_availability"},
)


def validate_payload(*, payload: Any, policy: FieldPolicy, partial: bool) -> dict:
    """
    Validates + normalizes incoming JSON against a policy allowlist.
    Strings are stripped and blank optional strings become None.
    Returns a cleaned patch dict with only writable fields.

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys)
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    patch: dict = {}
    for k, raw in payload.items():
        if k not in policy.writable_fields:
            raise ValidationError(f"Field not allowed: {k}")
        if isinstance(raw, str):
            raw = raw.strip()
            if raw == "":
                raw = None
        patch[k] = raw

    required = policy.required_on_create or set()
    if not partial:
        missing = sorted(f for f in required if patch.get(f) is None)
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    return patch


def coerce_money(key: str, value: Any) -> float:
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{key} must be a number")
    if isinstance(value, str):
        try:
            value = float(value.replace(",", "."))
        except ValueError:
            raise ValidationError(f"{key} must be a number")
    if not isinstance(value, (int, float)):
        raise ValidationError(f"{key} must be a number")
    if value < 0:
        raise ValidationError(f"{key} must be >= 0")
    if value > MAX_PRICE:
        raise ValidationError(f"{key} cannot exceed {MAX_PRICE:,.2f}")
    return round(float(value), 2)


def coerce_quantity(value: Any) -> int:
    if isinstance(value, bool):
        raise ValidationError("quantity must be an integer")
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int):
        raise ValidationError("quantity must be an integer")
    if value < 1:
        raise ValidationError("quantity must be at least 1")
    if value > MAX_QUANTITY:
        raise ValidationError(f"quantity cannot exceed {MAX_QUANTITY}")
    return value


def check_min_length(key: str, value: Any, minimum: int) -> str:
    if not isinstance(value, str) or len(value) < minimum:
        raise ValidationError(f"{key} must be at least {minimum} characters")
    return value


def is_location_link(value: str | None) -> bool:
    if not value or not isinstance(value, str):
        return False
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


# -------------------- Orders --------------------

@dataclass(frozen=True)
class OrderItemDraft:
    """One requested line; second_product_id marks a half-and-half pizza."""
    product_id: str
    quantity: int = 1
    size: str | None = None
    second_product_id: str | None = None

    @property
    def is_half_and_half(self) -> bool:
        return bool(self.second_product_id)


@dataclass(frozen=True)
class OrderDraft:
    customer_name: str
    fulfillment_type: str
    items: tuple[OrderItemDraft, ...]
    customer_phone: str | None = None
    address: str | None = None
    location_link: str | None = None
    notes: str | None = None


def parse_order_item(payload: Any) -> OrderItemDraft:
    patch = validate_payload(payload=payload, policy=ORDER_ITEM_POLICY, partial=False)
    return OrderItemDraft(
        product_id=str(patch["product_id"]),
        quantity=coerce_quantity(patch["quantity"]),
        size=patch.get("size"),
        second_product_id=str(patch["second_product_id"]) if patch.get("second_product_id") else None,
    )


def parse_order_draft(payload: Any) -> OrderDraft:
    patch = validate_payload(payload=payload, policy=ORDER_POLICY, partial=False)

    check_min_length("customer_name", patch["customer_name"], 2)

    fulfillment_type = patch["fulfillment_type"]
    if fulfillment_type not in FULFILLMENT_TYPES:
        raise ValidationError("fulfillment_type must be 'delivery' or 'pickup'")

    raw_items = patch["items"]
    if not isinstance(raw_items, list) or not raw_items:
        raise ValidationError("Add at least one item to the order")
    items = tuple(parse_order_item(raw) for raw in raw_items)

    address = patch.get("address")
    location_link = patch.get("location_link")
    if location_link and not is_location_link(location_link):
        raise ValidationError("location_link must be a valid http(s) URL")
    if fulfillment_type == FULFILLMENT_DELIVERY and not location_link:
        if not isinstance(address, str) or len(address) < 10:
            raise ValidationError("Delivery orders need an address of at least 10 characters or a location link")

    return OrderDraft(
        customer_name=patch["customer_name"],
        customer_phone=patch.get("customer_phone"),
        fulfillment_type=fulfillment_type,
        items=items,
        address=address,
        location_link=location_link,
        notes=patch.get("notes"),
    )


# -------------------- Catalog --------------------

def _parse_sizes(raw: Any, *, allowed: tuple[str, ...] | None) -> dict[str, float]:
    """Accepts {label: price} or [{"name": label, "price": price}]; drops empty entries."""
    if raw is None:
        return {}
    if isinstance(raw, list):
        pairs = []
        for entry in raw:
            if not isinstance(entry, dict):
                raise ValidationError("sizes entries must be objects with name and price")
            pairs.append((str(entry.get("name") or "").strip(), entry.get("price")))
    elif isinstance(raw, dict):
        pairs = [(str(k).strip(), v) for k, v in raw.items()]
    else:
        raise ValidationError("sizes must be an object or a list")

    sizes: dict[str, float] = {}
    for label, value in pairs:
        if not label:
            raise ValidationError("size label cannot be blank")
        if allowed is not None and label not in allowed:
            raise ValidationError(f"Unknown pizza size: {label}")
        if value in (None, ""):
            continue
        price = coerce_money(f"sizes.{label}", value)
        if price > 0:
            sizes[label] = price
    return sizes


def enforce_rules_product(patch: dict) -> dict:
    """
    Category-specific catalog rules. Returns the patch with `sizes`/`price`
    normalized for the product's category.
    """
    name = patch.get("name")
    if name is not None:
        check_min_length("name", name, 3)

    category = patch.get("category")
    if category not in PRODUCT_CATEGORIES:
        raise ValidationError("category must be one of: addon, drink, pizza")

    if "is_available" in patch and patch["is_available"] is not None:
        patch["is_available"] = bool(patch["is_available"])

    if category == CATEGORY_PIZZA:
        patch["sizes"] = _parse_sizes(patch.get("sizes"), allowed=PIZZA_SIZES)
        patch["price"] = None
    elif category == CATEGORY_DRINK:
        patch["sizes"] = _parse_sizes(patch.get("sizes"), allowed=None)
        if not patch["sizes"]:
            raise ValidationError("A drink needs at least one volume with a positive price")
        patch["price"] = None
    elif category == CATEGORY_ADDON:
        price = patch.get("price")
        if price is None or coerce_money("price", price) <= 0:
            raise ValidationError("An add-on needs a positive price")
        patch["price"] = coerce_money("price", price)
        patch["sizes"] = {}
    return patch


# -------------------- Customers / accounts / settings --------------------

def enforce_rules_customer(patch: dict) -> dict:
    name = patch.get("name")
    if name is not None:
        check_min_length("name", name, 2)
    link = patch.get("location_link")
    if link and not is_location_link(link):
        raise ValidationError("location_link must be a valid http(s) URL")
    if patch.get("id") is not None:
        patch["id"] = str(patch["id"])
    return patch


def validate_email(email: str) -> str:
    if not isinstance(email, str) or not EMAIL_RE.match(email):
        raise ValidationError("Please enter a valid email address")
    return email


def validate_password(password: str) -> str:
    if not isinstance(password, str) or len(password) < 6:
        raise ValidationError("Password must be at least 6 characters long")
    return password


def enforce_rules_registration(patch: dict) -> dict:
    check_min_length("name", patch["name"], 3)
    validate_email(patch["email"])
    validate_password(patch["password"])
    if patch["role"] not in USER_ROLES:
        raise ValidationError("role must be 'administrator' or 'staff'")
    return patch


def enforce_rules_user_update(patch: dict) -> dict:
    if patch.get("name") is not None:
        check_min_length("name", patch["name"], 3)
    if patch.get("email") is not None:
        validate_email(patch["email"])
    if patch.get("password") is not None:
        validate_password(patch["password"])
    if patch.get("role") is not None and patch["role"] not in USER_ROLES:
        raise ValidationError("role must be 'administrator' or 'staff'")
    if patch.get("status") is not None and patch["status"] not in USER_STATUSES:
        raise ValidationError("status must be 'approved', 'pending' or 'rejected'")
    return patch


def enforce_rules_settings(patch: dict) -> dict:
    prices = patch.get("base_prices")
    availability = patch.get("size_availability")
    if not isinstance(prices, dict) or not isinstance(availability, dict):
        raise ValidationError("base_prices and size_availability must be objects")

    clean_prices: dict[str, float] = {}
    clean_availability: dict[str, bool] = {}
    for size in PIZZA_SIZES:
        if size not in prices:
            raise ValidationError(f"Missing base price for size: {size}")
        clean_prices[size] = coerce_money(f"base_prices.{size}", prices[size])
        clean_availability[size] = bool(availability.get(size, False))

    unknown = (set(prices) | set(availability)) - set(PIZZA_SIZES)
    if unknown:
        raise ValidationError(f"Unknown pizza size: {', '.join(sorted(unknown))}")

    return {"base_prices": clean_prices, "size_availability": clean_availability}
