# backend/pizzadash/routes/system.py
"""
System health, version and dashboard endpoints.

Health reports the snapshot backend and how many reads/writes failed since
startup. Failed writes never break requests, so this is where they surface.
"""

import sys
import time
from flask import Blueprint, current_app, jsonify, g

from ..decorators import require_auth
from ..extensions import get_store
from ..services import reporting_service
from ..services.entity_store import SETTINGS_KEY
from ..services.persistence import MemorySnapshotBackend, PersistenceError, SqlSnapshotBackend
from ..time_utils import now_z

system_bp = Blueprint("system", __name__)

API_VERSION = "1.0.0"


def check_snapshot_health() -> dict:
    """Probe the snapshot backend with a read of the settings key."""
    store = get_store()
    start_time = time.time()
    backend = store.backend
    kind = "sql" if isinstance(backend, SqlSnapshotBackend) else "memory"
    try:
        backend.read(SETTINGS_KEY)
        if isinstance(backend, SqlSnapshotBackend):
            stored = backend.describe()
        else:
            stored = [{"key": key} for key in backend.keys()]
    except PersistenceError:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Snapshot backend health check failed")
        return {
            "status": "unhealthy",
            "backend": kind,
            "latency_ms": round(elapsed_ms, 2),
            "error": "Snapshot backend error",
        }

    elapsed_ms = (time.time() - start_time) * 1000
    status = "degraded" if store.persistence_failures else "healthy"
    check = {
        "status": status,
        "backend": kind,
        "latency_ms": round(elapsed_ms, 2),
        "details": {
            "persistence_failures": store.persistence_failures,
            "snapshots": stored,
        },
    }
    if isinstance(backend, MemorySnapshotBackend) and current_app.config.get("SNAPSHOT_BACKEND") == "sql":
        check["status"] = "degraded"
        check["warning"] = "SQL backend unavailable; data is kept in memory only"
    return check


@system_bp.get("/health")
def health():
    """
    Returns:
    - 200: healthy or degraded (still operational)
    - 503: snapshot backend unreachable
    """
    snapshot_health = check_snapshot_health()
    http_status = 503 if snapshot_health["status"] == "unhealthy" else 200
    return {
        "status": snapshot_health["status"],
        "timestamp": now_z(),
        "checks": {"snapshots": snapshot_health},
    }, http_status


@system_bp.get("/version")
def version():
    env = "production" if not current_app.debug else "development"
    return {
        "api_version": API_VERSION,
        "environment": env,
        "python_version": sys.version.split()[0],
        "server_time": now_z(),
    }


@system_bp.get("/api/dashboard")
@require_auth
def dashboard_route():
    """Order counts per status, revenue without cancelled orders, and the latest orders."""
    return jsonify(reporting_service.dashboard_summary(g.store))
