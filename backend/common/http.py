"""
Response helpers shared by the API blueprints.

Every endpoint answers with the same permissive CORS headers, short-circuits
OPTIONS preflight requests, and reports unexpected failures with one 500 body
shape whose detail depends on the development flag.
"""

import logging
from typing import Any, Dict, Tuple

from flask import Response, jsonify, request

from backend.common.config import is_development

# Methods routed to every handler so that unsupported ones get a JSON 405
# from the handler itself instead of Flask's HTML page.
ROUTED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

CORS_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Allow-Credentials": "true",
}


def apply_cors(response: Response) -> Response:
    """
    after_request hook: stamp the CORS headers on a response.

    Args:
        response (Response): Outgoing Flask response.

    Returns:
        Response: The same response with CORS headers set.
    """
    for name, value in CORS_HEADERS.items():
        response.headers[name] = value
    return response


def preflight() -> Tuple[Response, int]:
    """
    Empty 200 answer for OPTIONS requests.
    """
    return Response(status=200), 200


def method_not_allowed() -> Tuple[Response, int]:
    return jsonify({"message": "Method not allowed"}), 405


def json_object() -> Dict[str, Any]:
    """
    The request's JSON body when it is an object, otherwise an empty dict.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    return data


def error_detail(exc: BaseException) -> str:
    """
    Raw error text in development mode, a generic phrase otherwise.
    """
    return str(exc) if is_development() else "Internal server error"


def server_error(message: str, exc: BaseException) -> Tuple[Response, int]:
    """
    Log an unexpected failure with its traceback and build the 500 response.

    Args:
        message (str): Client-facing summary, e.g. "Server error during login".
        exc (BaseException): The caught exception.

    Returns:
        tuple: JSON response and status 500.
    """
    logging.exception(f"{message}: {exc}")
    return jsonify({"message": message, "error": error_detail(exc)}), 500
