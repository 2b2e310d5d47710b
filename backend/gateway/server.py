"""
API gateway: combines the auth, events, and diagnostics blueprints.
This is the local entrypoint for development and the app served by api/index.py.
"""

from flask import Flask, jsonify
import logging
from typing import Optional

from backend.auth_service.pg_user_store import SECURE_USERS_TABLE, PostgresUserStore
from backend.auth_service.user_store import JsonUserStore, MemoryUserStore, UserStore
from backend.common.config import (
    get_secure_users_file,
    get_user_store_backend,
    get_users_file,
    get_gateway_port,
)
from backend.common.http import apply_cors
from backend.events_service.store import EventStore, MemoryEventStore

# Basic console logging during API requests
logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(asctime)s - %(message)s")


def build_user_stores(backend: str) -> tuple:
    """
    Create the (simple, secure) user stores for the configured backend.

    Args:
        backend (str): "json", "memory" or "postgres".

    Returns:
        tuple: (plaintext store, hashed store). The hashed store starts empty.
    """
    if backend == "memory":
        return MemoryUserStore(), MemoryUserStore(defaults=[])
    if backend == "postgres":
        return PostgresUserStore(), PostgresUserStore(table=SECURE_USERS_TABLE)
    if backend != "json":
        raise ValueError(f"Unknown USER_STORE_BACKEND: {backend}")
    return JsonUserStore(get_users_file()), JsonUserStore(get_secure_users_file(), defaults=[])


def create_app(
    user_store: Optional[UserStore] = None,
    secure_user_store: Optional[UserStore] = None,
    event_store: Optional[EventStore] = None,
) -> Flask:
    """
    Application factory for creating the Flask app.

    Stores not passed in are built from the environment.

    Returns:
        Flask: The configured Flask application.
    """
    app = Flask(__name__)

    if user_store is None or secure_user_store is None:
        default_simple, default_secure = build_user_stores(get_user_store_backend())
        user_store = user_store or default_simple
        secure_user_store = secure_user_store or default_secure

    app.extensions["user_store"] = user_store
    app.extensions["secure_user_store"] = secure_user_store
    app.extensions["event_store"] = event_store or MemoryEventStore()

    # --- REGISTER BLUEPRINTS ---
    from backend.auth_service.routes import auth_bp
    from backend.events_service.routes import events_bp
    from backend.diagnostics_service.routes import diagnostics_bp

    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(events_bp, url_prefix="/api/events")
    app.register_blueprint(diagnostics_bp, url_prefix="/api")

    logging.info("All blueprints registered successfully.")

    # CORS headers for every response, blueprint or not
    app.after_request(apply_cors)

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({"message": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({"message": "Method not allowed"}), 405

    # --- BASIC HEALTH CHECKPOINTS ---
    @app.route("/")
    def ping():
        """
        Root URL for simple 'online' check.
        """
        return jsonify({"status": "gateway_ok"}), 200

    @app.route("/health")
    def health():
        """
        Health check endpoint.
        """
        return jsonify({"status": "ok"}), 200

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=get_gateway_port(), debug=True)
