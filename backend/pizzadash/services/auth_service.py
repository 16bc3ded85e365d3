# Overview: Service-layer operations for auth; credentials, registration and account lifecycle.

"""
Authentication & Registration Gate

Approval workflow:
- The first administrator to register while no approved administrator
  exists is approved immediately.
- Every other registration starts `pending` and cannot log in until an
  administrator approves it. `rejected` accounts cannot log in either.

Login answers pending/rejected accounts with their own error after the
password has been checked, so those two states reveal that the email is
registered; unknown email and wrong password share one generic error.

SECURITY NOTES:
- Passwords hashed with bcrypt (cost factor from BCRYPT_ROUNDS, default 12)
- Minimum 6 characters required
- Email uniqueness is case-insensitive
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace

import bcrypt
from flask import current_app, has_app_context

from ..models.records import (
    ROLE_ADMINISTRATOR,
    USER_APPROVED,
    USER_PENDING,
    USER_REJECTED,
    UserProfile,
)
from ..validation import ConflictError, NotFoundError, validate_password
from . import notification_service, session_service
from .entity_store import USERS, EntityStore
from .notification_service import ADMINS
from .permission_service import PermissionDeniedError, require_administrator

logger = logging.getLogger(__name__)

DEFAULT_BCRYPT_ROUNDS = 12
USERS_LINK = "/settings"


class AuthenticationError(Exception):
    """Base class for login failures."""


class InvalidCredentialsError(AuthenticationError):
    pass


class AccountPendingError(AuthenticationError):
    pass


class AccountRejectedError(AuthenticationError):
    pass


def _rounds() -> int:
    if has_app_context():
        return int(current_app.config.get("BCRYPT_ROUNDS", DEFAULT_BCRYPT_ROUNDS))
    return DEFAULT_BCRYPT_ROUNDS


def hash_password(password: str) -> str:
    """Hash password using bcrypt. Password is validated for length before hashing."""
    validate_password(password)
    salt = bcrypt.gensalt(rounds=_rounds())
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    WHY timing-safe: bcrypt.checkpw() prevents timing attacks automatically.
    """
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        # Malformed stored hash
        return False


def make_initials(name: str) -> str:
    """First letter of the first two space-separated name tokens, uppercased."""
    return "".join(token[0] for token in name.split()[:2]).upper()


def avatar_for(email: str) -> str:
    return f"https://i.pravatar.cc/150?u={email.lower()}"


def find_by_email(store: EntityStore, email: str) -> UserProfile | None:
    wanted = (email or "").strip().casefold()
    for user in store.users:
        if user.email.casefold() == wanted:
            return user
    return None


def has_approved_administrator(store: EntityStore) -> bool:
    return any(u.role == ROLE_ADMINISTRATOR and u.status == USER_APPROVED for u in store.users)


# -------------------- login --------------------

def authenticate(store: EntityStore, email: str, password: str) -> UserProfile:
    """
    Check credentials and approval status.

    Raises InvalidCredentialsError, AccountPendingError or AccountRejectedError.
    """
    user = find_by_email(store, email)
    if user is None or not verify_password(password or "", user.password_hash):
        raise InvalidCredentialsError("Invalid email or password")
    if user.status == USER_PENDING:
        raise AccountPendingError("Your account is awaiting administrator approval")
    if user.status == USER_REJECTED:
        raise AccountRejectedError("Your account registration was rejected")
    return user


def login(store: EntityStore, email: str, password: str) -> tuple[UserProfile, str]:
    """Authenticate and record the active session. Returns (user, token)."""
    user = authenticate(store, email, password)
    token = session_service.create_session(store, user)
    logger.info("User %s logged in", user.email)
    return user, token


def logout(store: EntityStore) -> None:
    session_service.end_session(store)


# -------------------- registration --------------------

def register(store: EntityStore, name: str, email: str, password: str, role: str) -> UserProfile:
    """
    Create an account. Raises ConflictError on a duplicate email.

    Only an administrator registering while no approved administrator exists
    is approved on the spot; everyone else waits as `pending`.
    """
    # bcrypt is slow; hash before taking the store lock
    password_hash = hash_password(password)

    with store.mutation():
        if find_by_email(store, email) is not None:
            raise ConflictError("This email is already registered")

        auto_approve = role == ROLE_ADMINISTRATOR and not has_approved_administrator(store)
        user = UserProfile(
            id=uuid.uuid4().hex,
            name=name,
            email=email,
            password_hash=password_hash,
            role=role,
            status=USER_APPROVED if auto_approve else USER_PENDING,
            avatar=avatar_for(email),
            initials=make_initials(name),
        )
        store.replace(USERS, store.users + [user])

        if user.status == USER_PENDING:
            notification_service.emit(
                store,
                "New registration",
                f"{user.name} ({user.email}) asked for {user.role} access.",
                ADMINS,
                link=USERS_LINK,
            )
    logger.info("Registered %s as %s (%s)", user.email, user.role, user.status)
    return user


def create_user(
    store: EntityStore,
    name: str,
    email: str,
    password: str,
    role: str,
    status: str = USER_APPROVED,
) -> UserProfile:
    """Bootstrap path (CLI): create an account with an explicit status."""
    password_hash = hash_password(password)
    with store.mutation():
        if find_by_email(store, email) is not None:
            raise ConflictError("This email is already registered")
        user = UserProfile(
            id=uuid.uuid4().hex,
            name=name,
            email=email,
            password_hash=password_hash,
            role=role,
            status=status,
            avatar=avatar_for(email),
            initials=make_initials(name),
        )
        store.replace(USERS, store.users + [user])
    return user


# -------------------- administration --------------------

def list_users(store: EntityStore) -> list[UserProfile]:
    return sorted(store.users, key=lambda u: u.name.casefold())


def get_user(store: EntityStore, user_id: str) -> UserProfile:
    user = store.find(USERS, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def update_user(
    store: EntityStore,
    user_id: str,
    changes: dict,
    password: str | None = None,
) -> UserProfile:
    """
    Edit an account. Email uniqueness is re-checked against every other
    account; a blank/None password keeps the current credential.
    """
    password_hash = hash_password(password) if password else None

    with store.mutation():
        user = get_user(store, user_id)

        email = changes.get("email")
        if email is not None:
            clash = find_by_email(store, email)
            if clash is not None and clash.id != user.id:
                raise ConflictError("This email is already registered")

        fields = {k: v for k, v in changes.items() if k in ("name", "email", "role", "status", "avatar") and v is not None}
        updated = replace(user, **fields)
        if "name" in fields:
            updated = replace(updated, initials=make_initials(fields["name"]))
        if password_hash:
            updated = replace(updated, password_hash=password_hash)

        store.replace(USERS, [updated if u.id == user.id else u for u in store.users])
    return updated


def set_user_status(store: EntityStore, user_id: str, status: str, actor: UserProfile | None) -> UserProfile:
    """Approve, reject or re-queue an account and tell the administrators."""
    require_administrator(actor, "change account status")
    with store.mutation():
        user = get_user(store, user_id)
        if user.status == status:
            return user

        updated = update_user(store, user_id, {"status": status})
        notification_service.emit(
            store,
            f"Account {status}",
            f"{actor.name} set {updated.name}'s account to {status}.",
            ADMINS,
            link=USERS_LINK,
        )
    return updated


def delete_user(store: EntityStore, user_id: str, actor: UserProfile | None) -> UserProfile:
    """Remove the account only; historical orders keep their name snapshot."""
    require_administrator(actor, "delete accounts")
    with store.mutation():
        user = get_user(store, user_id)
        if user.id == actor.id:
            raise PermissionDeniedError("You cannot delete your own account")

        store.replace(USERS, [u for u in store.users if u.id != user.id])
        if session_service.current_user_id(store) == user.id:
            session_service.end_session(store)
    logger.info("User %s deleted by %s", user.email, actor.email)
    return user
