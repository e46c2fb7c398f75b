"""
Health check blueprint.

Endpoints:
    GET /health/ready  — simple 200 for load balancers
    GET /health/live   — database reachability and upload directory status
"""

import logging
import os
import time

from flask import Blueprint, current_app, jsonify

from mentorme.models import db

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__, url_prefix="/health")


@health_bp.route("/ready", methods=["GET"])
def ready():
    """Readiness check; always 200 if the app is running."""
    return jsonify({"status": "ok"}), 200


@health_bp.route("/live", methods=["GET"])
def live():
    """Liveness check with dependency status."""
    checks = {}
    overall = True

    # ── Database ─────────────────────────────────────────────────────
    try:
        t0 = time.perf_counter()
        db.session.execute(db.text("SELECT 1"))
        db_ms = (time.perf_counter() - t0) * 1000
        checks["database"] = {"status": "ok", "latency_ms": round(db_ms, 1)}
    except Exception as exc:
        checks["database"] = {"status": "error", "detail": str(exc)}
        overall = False
        logger.error("Health check — database failed: %s", exc)

    # ── Upload directory ─────────────────────────────────────────────
    upload_dir = current_app.config.get("UPLOAD_DIRECTORY") or ""
    if upload_dir and os.access(upload_dir, os.W_OK):
        checks["uploads"] = {"status": "ok"}
    else:
        checks["uploads"] = {"status": "error", "detail": "upload directory not writable"}
        overall = False

    status = "ok" if overall else "degraded"
    return jsonify({"status": status, "checks": checks}), 200 if overall else 503
