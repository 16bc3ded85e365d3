# Overview: Assistant bridge; turns live order/customer data plus a question into a prompt.

"""
Assistant Bridge

Formats a snapshot of the orders and customers collections, the caller's
role and a free-text command into a prompt for an external text-generation
service, and relays the reply. The assistant only advises: it never performs
actions on the caller's behalf.

Failures of the generation service are logged and answered with a generic
apology; they never affect store state.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from ..models.records import Customer, Order
from .entity_store import EntityStore
from .reporting_service import revenue, status_counts

logger = logging.getLogger(__name__)

DISABLED_REPLY = "The assistant is disabled: no text-generation API key is configured."
FAILURE_REPLY = "Sorry, I can't answer right now. Please try again in a moment."

# Listing caps keep the prompt bounded on busy days
MAX_LISTED_ORDERS = 30
MAX_LISTED_CUSTOMERS = 30


class AssistantUnavailableError(RuntimeError):
    """The generation service could not produce a reply."""


class GenerationClient:
    """
    HTTP client for a Gemini-style `generateContent` endpoint.

    One httpx.Client is reused across calls; pass `transport` to stub the
    service in tests.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def close(self) -> None:
        self._client.close()

    def generate(self, prompt: str) -> str:
        """Send `prompt` and return the concatenated text of the first candidate."""
        try:
            response = self._client.post(
                f"{self.base_url}/models/{self.model}:generateContent",
                params={"key": self.api_key},
                json={"contents": [{"role": "user", "parts": [{"text": prompt}]}]},
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise AssistantUnavailableError("Generation request failed") from e

        try:
            parts = data["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError) as e:
            raise AssistantUnavailableError("Generation response had no candidates") from e
        text = "".join(part.get("text", "") for part in parts).strip()
        if not text:
            raise AssistantUnavailableError("Generation response was empty")
        return text


def _order_line(order: Order) -> str:
    items = ", ".join(f"{i.quantity}x {i.product_name}" + (f" ({i.size})" if i.size else "") for i in order.items)
    return (
        f"- #{order.id} | {order.customer_name} | {order.status} | {order.fulfillment_type} | "
        f"$ {order.total:.2f} | {order.timestamp} | {items}"
    )


def _customer_line(customer: Customer) -> str:
    return (
        f"- {customer.name} | phone {customer.phone or '-'} | {customer.order_count} orders | "
        f"$ {customer.total_spent:.2f} spent | last order {customer.last_order_date or '-'}"
    )


def build_prompt(command: str, role: str, orders: list[Order], customers: list[Customer], store: EntityStore) -> str:
    counts = status_counts(store)
    count_text = ", ".join(f"{status}: {n}" for status, n in counts.items())
    order_lines = "\n".join(_order_line(o) for o in orders[:MAX_LISTED_ORDERS]) or "- (none)"
    customer_lines = "\n".join(_customer_line(c) for c in customers[:MAX_LISTED_CUSTOMERS]) or "- (none)"

    return f"""You are the virtual assistant of a pizzeria's order dashboard. Help the user find information and understand how to use the system.
- The current user's role is: "{role}".
- If the user asks you to perform an action (such as creating or cancelling an order), explain how to do it in the dashboard instead of doing it. For administrators, user management lives under "Settings".
- Answer only from the data below. Be concise and direct.

Current data:
- Orders: {len(orders)} ({count_text})
- Revenue (excluding cancelled orders): $ {revenue(store):.2f}
- Customers: {len(customers)}

Orders (most recent first):
{order_lines}

Customers:
{customer_lines}

User command: "{command}"
"""


def ask(client: GenerationClient | None, store: EntityStore, command: str, role: str) -> str:
    """Relay `command` to the generation service and return its reply text."""
    if client is None:
        return DISABLED_REPLY

    prompt = build_prompt(command, role, store.orders, store.customers, store)
    try:
        return client.generate(prompt)
    except AssistantUnavailableError:
        logger.exception("Assistant request failed")
        return FAILURE_REPLY
