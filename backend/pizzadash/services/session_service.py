# Overview: Service-layer operations for the active session.

"""
Session Token Management

The dashboard runs as a single session: the store keeps one session record
(the logged-in user's id plus a hash of the bearer token handed to the
client). Logging in replaces it, logging out clears it.

SECURITY FEATURES:
- Cryptographically secure random tokens (32 bytes)
- Tokens hashed with SHA-256 before storage (fast, one-way)
- Session is dropped when its user is deleted or loses approval
"""

import hashlib
import hmac
import secrets

from ..models.records import USER_APPROVED, UserProfile
from pizzadash.time_utils import now_z
from .entity_store import USERS, EntityStore


def generate_token() -> str:
    """
    Generate cryptographically secure random token.

    Returns 64-character hex string (32 bytes of entropy).
    This is the plaintext token sent to client (never stored).
    """
    return secrets.token_hex(32)  # 32 bytes = 64 hex characters


def hash_token(token: str) -> str:
    """
    Hash token for storage using SHA-256.

    WHY SHA-256 not bcrypt: Tokens are already high-entropy (unlike passwords).
    """
    return hashlib.sha256(token.encode('utf-8')).hexdigest()


def create_session(store: EntityStore, user: UserProfile) -> str:
    """Record `user` as the active session and return the plaintext token."""
    token = generate_token()
    store.set_session({
        "user_id": user.id,
        "token_hash": hash_token(token),
        "created_at": now_z(),
    })
    return token


def current_user_id(store: EntityStore) -> str | None:
    session = store.session
    return session["user_id"] if session else None


def validate_session(store: EntityStore, token: str) -> UserProfile | None:
    """
    Return the session's user if `token` matches the active session and the
    user still exists with an approved account.
    """
    session = store.session
    if not session or not token:
        return None
    if not hmac.compare_digest(session.get("token_hash", ""), hash_token(token)):
        return None

    user = store.find(USERS, session["user_id"])
    if user is None or user.status != USER_APPROVED:
        store.clear_session()
        return None
    return user


def end_session(store: EntityStore) -> None:
    store.clear_session()
