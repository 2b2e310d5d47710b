"""
Shared authentication helpers.
Provides password hashing, token creation, and token verification for the
secure auth endpoints.
"""

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from datetime import datetime, timedelta, timezone
from typing import Tuple, Optional
from flask import jsonify, request, Response

from backend.common.config import get_jwt_secret, get_token_expiration_minutes

ph = PasswordHasher()


def _require_secret() -> str:
    secret = get_jwt_secret()
    if not secret:
        raise RuntimeError("Server misconfiguration: JWT_SECRET missing")
    return secret


# --- PASSWORD HASHING ---
def hash_password(password: str) -> str:
    return ph.hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    """
    Check a plaintext password against a stored Argon2 hash.

    Returns:
        bool: True on match. Mismatches and malformed hashes both give False.
    """
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


# --- JWT CREATION ---
def create_token(user_id: str, role: str) -> str:
    """
    Generates a new JWT for a given user.

    Args:
        user_id (str): The unique ID of the user.
        role (str): The role of the user (admin, volunteer, ...).

    Returns:
        str: Encoded JWT string.

    Raises:
        RuntimeError: If JWT_SECRET is not configured.
    """
    now = datetime.now(timezone.utc)

    payload = {
        "sub": str(user_id),
        "role": role,
        "exp": now + timedelta(minutes=get_token_expiration_minutes()),
        "iat": now
    }

    return jwt.encode(payload, _require_secret(), algorithm="HS256")


# --- JWT VALIDATION ---
def verify_token_from_request(required_roles: Optional[list] = None) -> Tuple[Optional[str], Optional[str], Optional[Response], Optional[int]]:
    """
    Verify the JWT in the Authorization header.

    Args:
        required_roles (list, optional): List of allowed roles.

    Returns:
        tuple: (user_id, role, error_response, status_code)
               If successful, error_response and status_code are None.
               If failed, user_id and role are None.
    """

    auth = request.headers.get("Authorization", "")

    if not auth.startswith("Bearer "):
        return None, None, jsonify({"message": "missing token"}), 401

    token = auth.split(" ", 1)[1]

    try:
        payload = jwt.decode(token, _require_secret(), algorithms=["HS256"])
    except jwt.ExpiredSignatureError:
        return None, None, jsonify({"message": "token expired"}), 401
    except jwt.InvalidTokenError:
        return None, None, jsonify({"message": "invalid token"}), 401

    user_id = payload.get("sub")
    role = payload.get("role")

    if required_roles and role not in required_roles:
        return None, None, jsonify({"message": "permission denied"}), 403

    return user_id, role, None, None
