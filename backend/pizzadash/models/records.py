"""
In-memory entity records.

Records are treated as immutable values: services build updated copies with
dataclasses.replace() and hand whole collections back to the EntityStore, so
a half-applied mutation is never visible. to_dict()/from_dict() define the
JSON layout used by the snapshot backends.
"""
from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Any


# Order lifecycle
STATUS_RECEIVED = "received"
STATUS_PREPARING = "preparing"
STATUS_READY = "ready"
STATUS_OUT_FOR_DELIVERY = "out_for_delivery"
STATUS_DELIVERED = "delivered"
STATUS_CANCELLED = "cancelled"
ORDER_STATUSES = (
    STATUS_RECEIVED,
    STATUS_PREPARING,
    STATUS_READY,
    STATUS_OUT_FOR_DELIVERY,
    STATUS_DELIVERED,
    STATUS_CANCELLED,
)
TERMINAL_STATUSES = {STATUS_DELIVERED, STATUS_CANCELLED}

FULFILLMENT_DELIVERY = "delivery"
FULFILLMENT_PICKUP = "pickup"
FULFILLMENT_TYPES = {FULFILLMENT_DELIVERY, FULFILLMENT_PICKUP}

# Catalog
CATEGORY_PIZZA = "pizza"
CATEGORY_DRINK = "drink"
CATEGORY_ADDON = "addon"
PRODUCT_CATEGORIES = {CATEGORY_PIZZA, CATEGORY_DRINK, CATEGORY_ADDON}

PIZZA_SIZES = ("small", "medium", "large", "extra_large")

# Accounts
ROLE_ADMINISTRATOR = "administrator"
ROLE_STAFF = "staff"
USER_ROLES = {ROLE_ADMINISTRATOR, ROLE_STAFF}

USER_APPROVED = "approved"
USER_PENDING = "pending"
USER_REJECTED = "rejected"
USER_STATUSES = {USER_APPROVED, USER_PENDING, USER_REJECTED}


def _money(value: Any) -> float | None:
    if value is None:
        return None
    return round(float(value), 2)


@dataclass(frozen=True)
class OrderItem:
    product_name: str
    quantity: int
    size: str | None = None
    price: float | None = None
    # Catalog references kept so an order can be re-edited
    product_id: str | None = None
    second_product_id: str | None = None

    @property
    def line_total(self) -> float:
        return round((self.price or 0.0) * self.quantity, 2)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "OrderItem":
        return cls(
            product_name=data["product_name"],
            quantity=int(data.get("quantity", 1)),
            size=data.get("size"),
            price=_money(data.get("price")),
            product_id=data.get("product_id"),
            second_product_id=data.get("second_product_id"),
        )


@dataclass(frozen=True)
class Order:
    id: str
    customer_name: str
    items: tuple[OrderItem, ...]
    total: float
    status: str
    fulfillment_type: str
    timestamp: str
    customer_phone: str | None = None
    address: str | None = None
    location_link: str | None = None
    notes: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "customer_name": self.customer_name,
            "customer_phone": self.customer_phone,
            "items": [item.to_dict() for item in self.items],
            "total": self.total,
            "status": self.status,
            "fulfillment_type": self.fulfillment_type,
            "address": self.address,
            "location_link": self.location_link,
            "notes": self.notes,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Order":
        return cls(
            id=str(data["id"]),
            customer_name=data["customer_name"],
            customer_phone=data.get("customer_phone"),
            items=tuple(OrderItem.from_dict(i) for i in data.get("items", [])),
            total=_money(data.get("total", 0)) or 0.0,
            status=data.get("status", STATUS_RECEIVED),
            fulfillment_type=data.get("fulfillment_type", FULFILLMENT_PICKUP),
            address=data.get("address"),
            location_link=data.get("location_link"),
            notes=data.get("notes"),
            timestamp=data.get("timestamp", ""),
        )


@dataclass(frozen=True)
class Customer:
    id: str
    name: str
    phone: str | None = None
    address: str | None = None
    location_link: str | None = None
    last_order_date: str | None = None
    total_spent: float = 0.0
    order_count: int = 0

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Customer":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            phone=data.get("phone"),
            address=data.get("address"),
            location_link=data.get("location_link"),
            last_order_date=data.get("last_order_date"),
            total_spent=_money(data.get("total_spent", 0)) or 0.0,
            order_count=int(data.get("order_count", 0)),
        )


@dataclass(frozen=True)
class Product:
    """
    Catalog entry.

    Pizzas and drinks price through `sizes` (size tag or volume label -> price,
    only offered sizes present); add-ons carry a single `price`.
    """
    id: str
    name: str
    category: str
    sizes: dict[str, float] = field(default_factory=dict)
    price: float | None = None
    is_available: bool = True
    description: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "sizes": dict(self.sizes),
            "price": self.price,
            "is_available": self.is_available,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Product":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            category=data["category"],
            sizes={k: _money(v) for k, v in (data.get("sizes") or {}).items()},
            price=_money(data.get("price")),
            is_available=bool(data.get("is_available", True)),
            description=data.get("description"),
        )


@dataclass(frozen=True)
class UserProfile:
    id: str
    name: str
    email: str
    password_hash: str
    role: str
    status: str
    avatar: str | None = None
    initials: str = ""

    @property
    def is_administrator(self) -> bool:
        return self.role == ROLE_ADMINISTRATOR

    def to_dict(self) -> dict:
        # Credential never leaves the service layer
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "status": self.status,
            "avatar": self.avatar,
            "initials": self.initials,
        }

    def to_record(self) -> dict:
        data = self.to_dict()
        data["password_hash"] = self.password_hash
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "UserProfile":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            email=data["email"],
            password_hash=data["password_hash"],
            role=data.get("role", ROLE_STAFF),
            status=data.get("status", USER_PENDING),
            avatar=data.get("avatar"),
            initials=data.get("initials", ""),
        )


@dataclass(frozen=True)
class Notification:
    id: str
    title: str
    description: str
    target_roles: tuple[str, ...]
    created_at: str
    link: str | None = None
    is_read: bool = False

    def visible_to(self, role: str) -> bool:
        return role in self.target_roles

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "target_roles": list(self.target_roles),
            "link": self.link,
            "is_read": self.is_read,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Notification":
        return cls(
            id=str(data["id"]),
            title=data["title"],
            description=data.get("description", ""),
            target_roles=tuple(data.get("target_roles", ())),
            link=data.get("link"),
            is_read=bool(data.get("is_read", False)),
            created_at=data.get("created_at", ""),
        )


@dataclass(frozen=True)
class PizzaSettings:
    base_prices: dict[str, float]
    size_availability: dict[str, bool]

    def available_sizes(self) -> list[str]:
        return [s for s in PIZZA_SIZES if self.size_availability.get(s, False)]

    def to_dict(self) -> dict:
        return {
            "base_prices": dict(self.base_prices),
            "size_availability": dict(self.size_availability),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PizzaSettings":
        return cls(
            base_prices={k: _money(v) for k, v in (data.get("base_prices") or {}).items()},
            size_availability={k: bool(v) for k, v in (data.get("size_availability") or {}).items()},
        )
