# Overview: Role-targeted notification feed with a bounded, newest-first history.

"""
Notifications

Each entry targets administrators, staff, or both; a user only sees entries
addressed to their role. emit() prepends and evicts the oldest entries once the
store's notification_limit is exceeded. Read flags are shared by everyone with
the same role.
"""

from __future__ import annotations

import uuid
from dataclasses import replace

from ..models.records import ROLE_ADMINISTRATOR, ROLE_STAFF, USER_ROLES, Notification
from pizzadash.time_utils import now_z
from .entity_store import NOTIFICATIONS, EntityStore


ADMINS = (ROLE_ADMINISTRATOR,)
STAFF = (ROLE_STAFF,)
EVERYONE = (ROLE_ADMINISTRATOR, ROLE_STAFF)


def emit(
    store: EntityStore,
    title: str,
    description: str,
    target_roles: tuple[str, ...],
    link: str | None = None,
) -> Notification:
    """
    Prepend a notification and evict the oldest entries beyond the store's limit.
    """
    roles = tuple(r for r in target_roles if r in USER_ROLES)
    if not roles:
        raise ValueError("target_roles must include administrator and/or staff")

    notification = Notification(
        id=uuid.uuid4().hex,
        title=title,
        description=description,
        target_roles=roles,
        link=link,
        is_read=False,
        created_at=now_z(),
    )
    with store.mutation():
        history = [notification] + store.notifications
        store.replace(NOTIFICATIONS, history[: store.notification_limit])
    return notification


def list_for_role(store: EntityStore, role: str) -> list[Notification]:
    """Most recent first."""
    return [n for n in store.notifications if n.visible_to(role)]


def unread_count(store: EntityStore, role: str) -> int:
    return sum(1 for n in list_for_role(store, role) if not n.is_read)


def mark_read(store: EntityStore, notification_id: str, role: str) -> Notification | None:
    """
    Mark one notification read. Returns None when it does not exist or is not
    addressed to `role`.
    """
    updated = None
    with store.mutation():
        history = []
        for n in store.notifications:
            if n.id == notification_id and n.visible_to(role):
                if not n.is_read:
                    n = replace(n, is_read=True)
                updated = n
            history.append(n)
        if updated is not None:
            store.replace(NOTIFICATIONS, history)
    return updated


def mark_all_read(store: EntityStore, role: str) -> int:
    """Returns how many notifications changed."""
    changed = 0
    with store.mutation():
        history = []
        for n in store.notifications:
            if n.visible_to(role) and not n.is_read:
                n = replace(n, is_read=True)
                changed += 1
            history.append(n)
        if changed:
            store.replace(NOTIFICATIONS, history)
    return changed
