# Overview: Flask extension instances for the snapshot database and migrations.

from flask import current_app
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

db = SQLAlchemy()
migrate = Migrate()

STORE_EXTENSION_KEY = "pizzadash.store"


def get_store():
    """Return the EntityStore owned by the current application."""
    return current_app.extensions[STORE_EXTENSION_KEY]
