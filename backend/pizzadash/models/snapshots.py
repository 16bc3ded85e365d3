from __future__ import annotations

from ..extensions import db
from pizzadash.time_utils import to_utc_z


class StoredSnapshot(db.Model):
    """
    One persisted collection snapshot.

    Each collection (users, customers, products, orders, notifications,
    settings, session) is stored whole as a JSON document under its own key.
    A write replaces the previous payload for that key.
    """
    __tablename__ = "snapshots"

    key = db.Column(db.String(64), primary_key=True)
    payload = db.Column(db.Text, nullable=False)

    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    def to_dict(self):
        return {
            "key": self.key,
            "size_bytes": len(self.payload or ""),
            "updated_at": to_utc_z(self.updated_at),
        }
