# backend/pizzadash/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # Snapshot tables live in backend/instance/pizzadash.sqlite3 unless a hosted database is configured
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional hosted backend
        "sqlite:///pizzadash.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # "sql" mirrors collections to SQLALCHEMY_DATABASE_URI, "memory" keeps them in-process only
    SNAPSHOT_BACKEND = os.environ.get("SNAPSHOT_BACKEND", "sql")

    # Text-generation service used by the assistant; no key disables the assistant
    GENERATION_API_KEY = os.environ.get("GENERATION_API_KEY", "")
    GENERATION_API_URL = os.environ.get(
        "GENERATION_API_URL",
        "https://generativelanguage.googleapis.com/v1beta",
    )
    GENERATION_MODEL = os.environ.get("GENERATION_MODEL", "gemini-2.0-flash")
    GENERATION_TIMEOUT_SECONDS = float(os.environ.get("GENERATION_TIMEOUT_SECONDS", "30"))

    NOTIFICATION_HISTORY_LIMIT = int(os.environ.get("NOTIFICATION_HISTORY_LIMIT", "50"))
    BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Dataset used for collections that were never persisted; None means the built-in seed
    SEED_DATA = None
