# Overview: Built-in dataset used when a collection has never been persisted.

from __future__ import annotations

import copy


PRODUCTS = [
    {"id": "1", "name": "Pizza de Calabresa", "category": "pizza",
     "sizes": {"small": 35.50, "medium": 45.50, "large": 55.50, "extra_large": 65.50},
     "is_available": True, "description": "Calabresa sausage, onion and mozzarella"},
    {"id": "2", "name": "Pizza de Quatro Queijos", "category": "pizza",
     "sizes": {"small": 42.00, "medium": 52.00, "large": 62.00, "extra_large": 72.00},
     "is_available": True, "description": "Mozzarella, provolone, parmesan and gorgonzola"},
    {"id": "3", "name": "Pizza Portuguesa", "category": "pizza",
     "sizes": {"small": 45.90, "medium": 55.90, "large": 65.90, "extra_large": 75.90},
     "is_available": True},
    {"id": "4", "name": "Coca-Cola", "category": "drink",
     "sizes": {"350ml": 6.00, "2L": 12.00}, "is_available": True},
    {"id": "5", "name": "Borda de Catupiry", "category": "addon",
     "price": 8.00, "is_available": False},
    {"id": "6", "name": "Pizza de Frango com Catupiry", "category": "pizza",
     "sizes": {"small": 39.90, "medium": 49.90, "large": 59.90, "extra_large": 69.90},
     "is_available": True},
    {"id": "7", "name": "Guaraná Antarctica", "category": "drink",
     "sizes": {"350ml": 5.00, "2L": 10.00}, "is_available": True},
]

# Most recent first
ORDERS = [
    {"id": "1007", "customer_name": "Pedro Almeida", "status": "cancelled", "timestamp": "10:50",
     "fulfillment_type": "pickup", "total": 52.00,
     "items": [{"product_name": "Pizza de Quatro Queijos", "quantity": 1, "size": "medium", "price": 52.00, "product_id": "2"}]},
    {"id": "1006", "customer_name": "Mariana Lima", "status": "preparing", "timestamp": "10:42",
     "fulfillment_type": "delivery", "address": "Avenida Beira Mar, 456, Centro, Rio de Janeiro - RJ", "total": 57.50,
     "items": [{"product_name": "Pizza de Calabresa", "quantity": 1, "size": "medium", "price": 45.50, "product_id": "1"},
               {"product_name": "Coca-Cola", "quantity": 1, "size": "2L", "price": 12.00, "product_id": "4"}]},
    {"id": "1004", "customer_name": "Ana Costa", "customer_phone": "(41) 98888-7777", "status": "out_for_delivery",
     "timestamp": "10:40", "fulfillment_type": "delivery", "location_link": "https://maps.app.goo.gl/examplelink1",
     "total": 49.90,
     "items": [{"product_name": "Pizza de Frango com Catupiry", "quantity": 1, "size": "medium", "price": 49.90, "product_id": "6"}]},
    {"id": "1003", "customer_name": "Carlos Pereira", "customer_phone": "(31) 95555-4444", "status": "ready",
     "timestamp": "10:35", "fulfillment_type": "delivery",
     "address": "Rua das Gaivotas, 789, Apto 3, Bairro Sol, Florianópolis - SC", "total": 55.90,
     "items": [{"product_name": "Pizza Portuguesa", "quantity": 1, "size": "medium", "price": 55.90, "product_id": "3"}]},
    {"id": "1002", "customer_name": "Maria Oliveira", "customer_phone": "(21) 91234-5678", "status": "preparing",
     "timestamp": "10:32", "fulfillment_type": "pickup", "total": 52.00,
     "items": [{"product_name": "Pizza de Quatro Queijos", "quantity": 1, "size": "medium", "price": 52.00, "product_id": "2"}]},
    {"id": "1005", "customer_name": "Lucas Souza", "status": "delivered", "timestamp": "10:25",
     "fulfillment_type": "pickup", "total": 12.00,
     "items": [{"product_name": "Coca-Cola", "quantity": 1, "size": "2L", "price": 12.00, "product_id": "4"}]},
    {"id": "1001", "customer_name": "João Silva", "customer_phone": "(11) 98765-4321", "status": "received",
     "timestamp": "10:30", "fulfillment_type": "pickup", "total": 91.00,
     "items": [{"product_name": "Pizza de Calabresa", "quantity": 2, "size": "medium", "price": 45.50, "product_id": "1"}]},
]

CUSTOMERS = [
    {"id": "1", "name": "João Silva", "phone": "(11) 98765-4321", "last_order_date": "2024-07-20",
     "total_spent": 91.00, "order_count": 1},
    {"id": "2", "name": "Maria Oliveira", "phone": "(21) 91234-5678", "last_order_date": "2024-07-20",
     "total_spent": 52.00, "order_count": 1},
    {"id": "3", "name": "Carlos Pereira", "phone": "(31) 95555-4444", "last_order_date": "2024-07-19",
     "total_spent": 110.50, "order_count": 2,
     "address": "Rua das Gaivotas, 789, Apto 3, Bairro Sol, Florianópolis - SC"},
    {"id": "4", "name": "Ana Costa", "phone": "(41) 98888-7777", "last_order_date": "2024-07-18",
     "total_spent": 230.00, "order_count": 4, "location_link": "https://maps.app.goo.gl/examplelink1"},
]

SETTINGS = {
    "base_prices": {"small": 35.00, "medium": 45.00, "large": 55.00, "extra_large": 65.00},
    "size_availability": {"small": True, "medium": True, "large": True, "extra_large": True},
}


def default_seed() -> dict:
    """
    Built-in dataset keyed by collection name.

    No accounts are seeded: the first administrator to register is
    auto-approved and approves everyone after that.
    """
    return copy.deepcopy({
        "users": [],
        "customers": CUSTOMERS,
        "products": PRODUCTS,
        "orders": ORDERS,
        "notifications": [],
        "settings": SETTINGS,
    })
