"""
Diagnostics routes: report which configuration is present without ever
echoing secret values.
"""

import logging
from datetime import datetime, timezone
from typing import Tuple, Dict, Any

from flask import Blueprint, request, jsonify, Response

from backend.common.config import (
    get_database_url,
    get_environment,
    get_jwt_secret,
    get_platform_marker,
)
from backend.common.http import ROUTED_METHODS, method_not_allowed, preflight
from backend.database.db_connection import get_db
from backend.events_service.store import iso_utc

diagnostics_bp = Blueprint("diagnostics", __name__)


@diagnostics_bp.before_request
def before_request() -> None:
    logging.info(f"[Diagnostics] Incoming {request.method} {request.path}")


@diagnostics_bp.after_request
def after_request(response: Response) -> Response:
    logging.info(f"[Diagnostics] Response {response.status}")
    return response


def configured(value) -> str:
    return "configured" if value else "missing"


def environment_snapshot() -> Dict[str, Any]:
    return {
        "timestamp": iso_utc(datetime.now(timezone.utc)),
        "environment": get_environment(),
        "databaseUrl": configured(get_database_url()),
        "jwtSecret": configured(get_jwt_secret()),
        "vercel": get_platform_marker(),
    }


def database_status() -> str:
    """
    Probe the database with a trivial query.

    Returns:
        str: "connected", "disconnected", or "not configured".
    """
    if not get_database_url():
        return "not configured"
    try:
        with get_db() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return "connected"
    except Exception as e:
        logging.error(f"Database probe failed: {e}")
        return "disconnected"


def diagnostics_error(e: Exception) -> Tuple[Response, int]:
    logging.exception(f"Debug endpoint error: {e}")
    return jsonify({"error": str(e), "status": "API error"}), 500


@diagnostics_bp.route("/test", methods=ROUTED_METHODS)
def test_endpoint() -> Tuple[Response, int]:
    """
    Lightweight health report with no database dependency.

    Returns:
        200: Timestamp, environment name, secret presence flags, platform marker.
        405: Method other than GET.
    """
    if request.method == "OPTIONS":
        return preflight()
    if request.method != "GET":
        return method_not_allowed()

    try:
        return jsonify({
            **environment_snapshot(),
            "status": "API is working - simple version",
            "message": "This is a test to verify the serverless function works",
        }), 200
    except Exception as e:
        return diagnostics_error(e)


@diagnostics_bp.route("/debug", methods=ROUTED_METHODS)
def debug_endpoint() -> Tuple[Response, int]:
    """
    Same report as /test plus a live database connectivity check.
    """
    if request.method == "OPTIONS":
        return preflight()
    if request.method != "GET":
        return method_not_allowed()

    try:
        return jsonify({
            **environment_snapshot(),
            "database": database_status(),
            "status": "API is working",
        }), 200
    except Exception as e:
        return diagnostics_error(e)
