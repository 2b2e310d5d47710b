"""
Authentication service route handlers.

Provides routes for:
- Simple login / registration (plaintext store, unsigned placeholder tokens)
- Secure login / registration (Argon2 hashes, signed JWTs)
- Profile retrieval (/me)
- Admin user listing

The simple endpoints keep the plaintext contract the existing web client
relies on. They are a known security gap; new clients should use the
secure endpoints.
"""

import logging
from typing import Tuple, Dict, Any, Optional

from flask import Blueprint, current_app, request, jsonify, Response

from backend.auth_service.user_store import UserRecord, UserStore, generate_simple_token
from backend.auth_service.utils import (
    create_token,
    hash_password,
    verify_password,
    verify_token_from_request,
)
from backend.common.http import (
    ROUTED_METHODS,
    json_object,
    method_not_allowed,
    preflight,
    server_error,
)

auth_bp = Blueprint("auth", __name__)

DEFAULT_ROLE = "volunteer"
REGISTERED_MESSAGE = "User registered successfully. Please complete your profile."


# --- REQUEST LOGGING ---
@auth_bp.before_request
def before_request() -> None:
    """
    Log every incoming request method and path to the authentication service.
    """
    logging.info(f"[Auth] Incoming {request.method} {request.path}")


@auth_bp.after_request
def after_request(response: Response) -> Response:
    """
    Log the response status code for every request.

    Args:
        response (Response): The Flask response object.

    Returns:
        Response: The passed-through response object.
    """
    logging.info(f"[Auth] Response {response.status}")
    return response


# --- HELPERS ---
def get_user_store() -> UserStore:
    return current_app.extensions["user_store"]


def get_secure_user_store() -> UserStore:
    return current_app.extensions["secure_user_store"]


def read_credentials() -> Tuple[Optional[str], Optional[str], str]:
    """
    Pull (userId, password, role) from the JSON body; role defaults to volunteer.
    """
    data = json_object()
    return data.get("userId"), data.get("password"), data.get("role") or DEFAULT_ROLE


def build_profile(full_name: str) -> Dict[str, Any]:
    """
    Default profile shape returned until the user fills in their details.
    """
    return {
        "fullName": full_name,
        "address": "",
        "city": "",
        "state": "",
        "zipcode": "",
        "skills": [],
        "preferences": [],
        "availability": [],
    }


def user_payload(user: UserRecord, token: str, message: str) -> Dict[str, Any]:
    return {
        "_id": user["id"],
        "userId": user["email"],
        "role": user["role"],
        "profile": build_profile(user.get("name", "")),
        "token": token,
        "message": message,
    }


def missing_fields() -> Tuple[Response, int]:
    return jsonify({"message": "Please enter all fields"}), 400


def invalid_credentials() -> Tuple[Response, int]:
    return jsonify({"message": "Invalid credentials"}), 401


def already_registered() -> Tuple[Response, int]:
    return jsonify({"message": "User ID already registered for this role"}), 400


# --- SIMPLE LOGIN ---
@auth_bp.route("/simple-login", methods=ROUTED_METHODS)
def simple_login() -> Tuple[Response, int]:
    """
    Authenticate against the plaintext user store.

    Expects a JSON body with:
    - userId (str): The account email.
    - password (str)
    - role (str, optional): Defaults to "volunteer".

    Returns:
        200: User, default profile, and a simple token.
        400: Missing userId or password.
        401: Unknown (userId, role) or wrong password.
        405: Method other than POST.
        500: Unexpected error.
    """
    if request.method == "OPTIONS":
        return preflight()
    if request.method != "POST":
        return method_not_allowed()

    try:
        user_id, password, role = read_credentials()

        if not user_id or not password:
            return missing_fields()

        logging.info(f"Simple login attempt: userId={user_id} role={role}")

        user = get_user_store().get(user_id, role)

        if not user:
            logging.info(f"User not found: userId={user_id} role={role}")
            return invalid_credentials()

        if user.get("password") != password:
            logging.info(f"Password mismatch for user: {user_id}")
            return invalid_credentials()

        logging.info(f"Simple login successful for user: {user_id}")

        token = generate_simple_token(user["id"])
        return jsonify(user_payload(user, token, "Login successful")), 200

    except Exception as e:
        return server_error("Server error during login", e)


# --- SIMPLE REGISTER ---
@auth_bp.route("/simple-register", methods=ROUTED_METHODS)
def simple_register() -> Tuple[Response, int]:
    """
    Register a new plaintext account.

    Expects the same body as /simple-login. The stored name is always
    "New User" until the profile is completed.

    Returns:
        201: User, default profile, and a simple token.
        400: Missing fields, or (userId, role) already registered.
        405: Method other than POST.
        500: Unexpected error.
    """
    if request.method == "OPTIONS":
        return preflight()
    if request.method != "POST":
        return method_not_allowed()

    try:
        user_id, password, role = read_credentials()

        if not user_id or not password:
            return missing_fields()

        logging.info(f"Simple register attempt: userId={user_id} role={role}")

        new_user = get_user_store().register({
            "email": user_id,
            "password": password,
            "role": role,
            "name": "New User",
        })

        if new_user is None:
            logging.info(f"Duplicate registration rejected: userId={user_id} role={role}")
            return already_registered()

        logging.info(f"Simple registration successful for user: {user_id}")

        token = generate_simple_token(new_user["id"])
        return jsonify(user_payload(new_user, token, REGISTERED_MESSAGE)), 201

    except Exception as e:
        return server_error("Server error during registration", e)


# --- REGISTER ---
@auth_bp.route("/register", methods=ROUTED_METHODS)
def register() -> Tuple[Response, int]:
    """
    Register a user whose password is stored as an Argon2 hash.

    Expects a JSON body with userId, password and an optional role.

    Returns:
        201: User, default profile, and a signed JWT.
        400: Missing fields, or (userId, role) already registered.
        405: Method other than POST.
        500: Hashing, storage, or token configuration error.
    """
    if request.method == "OPTIONS":
        return preflight()
    if request.method != "POST":
        return method_not_allowed()

    try:
        user_id, password, role = read_credentials()

        if not user_id or not password:
            return missing_fields()

        logging.info(f"Register attempt: userId={user_id} role={role}")

        new_user = get_secure_user_store().register({
            "email": user_id,
            "password": hash_password(password),
            "role": role,
            "name": "New Volunteer",
        })

        if new_user is None:
            logging.info(f"Duplicate registration rejected: userId={user_id} role={role}")
            return already_registered()

        token = create_token(new_user["id"], new_user["role"])

        logging.info(f"Registration successful for user: {user_id}")

        return jsonify(user_payload(new_user, token, REGISTERED_MESSAGE)), 201

    except Exception as e:
        return server_error("Server error during registration", e)


# --- LOGIN ---
@auth_bp.route("/login", methods=ROUTED_METHODS)
def login() -> Tuple[Response, int]:
    """
    Authenticate against the hashed user store and return a JWT.

    Returns:
        200: User, default profile, and a signed JWT.
        400: Missing credentials.
        401: Invalid credentials (unknown user or wrong password).
        405: Method other than POST.
        500: Storage or token configuration error.
    """
    if request.method == "OPTIONS":
        return preflight()
    if request.method != "POST":
        return method_not_allowed()

    try:
        user_id, password, role = read_credentials()

        if not user_id or not password:
            return missing_fields()

        logging.info(f"Login attempt: userId={user_id} role={role}")

        user = get_secure_user_store().get(user_id, role)

        if not user:
            logging.info(f"User not found: userId={user_id} role={role}")
            return invalid_credentials()

        if not verify_password(user.get("password", ""), password):
            logging.info(f"Password mismatch for user: {user_id}")
            return invalid_credentials()

        token = create_token(user["id"], user["role"])

        logging.info(f"Login successful for user: {user_id}")

        return jsonify(user_payload(user, token, "Login successful")), 200

    except Exception as e:
        return server_error("Server error during login", e)


# --- GET CURRENT USER ---
@auth_bp.route("/me", methods=ROUTED_METHODS)
def get_current_user() -> Tuple[Response, int]:
    """
    Retrieve the current user's account and default profile.

    Requires Authorization header: Bearer <token>

    Returns:
        200: {_id, userId, role, profile}
        401: Missing, expired or invalid token.
        404: User no longer in the store.
        405: Method other than GET.
        500: Storage or token configuration error.
    """
    if request.method == "OPTIONS":
        return preflight()
    if request.method != "GET":
        return method_not_allowed()

    try:
        user_id, _, err, code = verify_token_from_request()
        if err:
            return err, code

        user = next((u for u in get_secure_user_store().all() if u.get("id") == user_id), None)
        if not user:
            return jsonify({"message": "User not found"}), 404

        return jsonify({
            "_id": user["id"],
            "userId": user["email"],
            "role": user["role"],
            "profile": build_profile(user.get("name", "")),
        }), 200

    except Exception as e:
        return server_error("Server error", e)


# --- LIST USERS (ADMIN ONLY) ---
@auth_bp.route("/users", methods=ROUTED_METHODS)
def list_users() -> Tuple[Response, int]:
    """
    Admin-only endpoint to list accounts in the secure store.
    Password hashes are never included.

    Returns:
        200: List of {_id, userId, role, name}.
        401/403: Unauthorized (not an admin).
        405: Method other than GET.
        500: Storage error.
    """
    if request.method == "OPTIONS":
        return preflight()
    if request.method != "GET":
        return method_not_allowed()

    try:
        _, _, err, code = verify_token_from_request(required_roles=["admin"])
        if err:
            return err, code

        users = [
            {"_id": u["id"], "userId": u["email"], "role": u["role"], "name": u.get("name", "")}
            for u in get_secure_user_store().all()
        ]
        return jsonify(users), 200

    except Exception as e:
        return server_error("Failed to retrieve users", e)
