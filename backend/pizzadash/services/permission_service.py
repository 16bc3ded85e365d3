# Overview: Role checks for administrator-only operations.

from __future__ import annotations

import logging

from ..models.records import UserProfile

logger = logging.getLogger(__name__)


class PermissionDeniedError(Exception):
    """Raised when the acting user's role does not allow an operation."""


def is_administrator(actor: UserProfile | None) -> bool:
    return actor is not None and actor.is_administrator


def require_administrator(actor: UserProfile | None, action: str) -> None:
    """
    Raise PermissionDeniedError unless `actor` is an administrator.
    Denials are logged with the attempted action for auditing.
    """
    if is_administrator(actor):
        return
    logger.warning(
        "Permission denied: %s attempted %s",
        actor.email if actor else "anonymous",
        action,
    )
    raise PermissionDeniedError(f"Only administrators can {action}")
