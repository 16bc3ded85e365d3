from __future__ import annotations

import logging

from ..models.records import PizzaSettings, UserProfile
from .entity_store import EntityStore
from .permission_service import require_administrator

logger = logging.getLogger(__name__)


def get_settings(store: EntityStore) -> PizzaSettings:
    return store.settings


def update_settings(store: EntityStore, patch: dict, actor: UserProfile | None) -> PizzaSettings:
    """
    Replace the pizza defaults. `patch` comes from validation.enforce_rules_settings.
    Existing products keep their own prices; the defaults only seed new pizzas.
    """
    require_administrator(actor, "change pizza settings")
    settings = PizzaSettings(
        base_prices=dict(patch["base_prices"]),
        size_availability=dict(patch["size_availability"]),
    )
    store.replace_settings(settings)
    logger.info("Pizza settings updated by %s", actor.email)
    return settings
