"""
Events service routes: list and create volunteer events.
Backed by the event store injected into the app (in-memory by default).
"""

import logging
from typing import Tuple

from flask import Blueprint, current_app, request, jsonify, Response

from backend.common.http import (
    ROUTED_METHODS,
    json_object,
    method_not_allowed,
    preflight,
    server_error,
)
from backend.events_service.store import EventStore

events_bp = Blueprint("events", __name__)


@events_bp.before_request
def before_request() -> None:
    logging.info(f"[Events] Incoming {request.method} {request.path}")


@events_bp.after_request
def after_request(response: Response) -> Response:
    logging.info(f"[Events] Response {response.status}")
    return response


def get_event_store() -> EventStore:
    return current_app.extensions["event_store"]


@events_bp.route("/simple", methods=ROUTED_METHODS)
def simple_events() -> Tuple[Response, int]:
    """
    List or create events.

    GET returns every event currently held, seed events first.
    POST takes an event-shaped JSON body and stores it with status
    "upcoming" and currentVolunteers 0, whatever the body says.

    Returns:
        200: List of event objects (GET).
        201: The created event (POST).
        405: Any other method.
        500: Unexpected error.
    """
    if request.method == "OPTIONS":
        return preflight()

    try:
        if request.method == "GET":
            events = get_event_store().get()
            logging.info(f"Returning {len(events)} events")
            return jsonify(events), 200

        if request.method == "POST":
            data = json_object()
            new_event = get_event_store().add(data)
            logging.info(f"Created event: {new_event.get('title')}")
            return jsonify(new_event), 201

        return method_not_allowed()

    except Exception as e:
        return server_error("Server error", e)
