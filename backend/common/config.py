"""
Environment-driven settings shared by every service.

Values are read on each call rather than cached at import so that tests
(and long-lived serverless containers) always see the current environment.
"""

import os
import tempfile
from typing import Optional

from dotenv import load_dotenv

# Load .env only once here
load_dotenv()

DEFAULT_ENVIRONMENT = "development"
DEFAULT_TOKEN_EXPIRATION_MINUTES = 60
DEFAULT_GATEWAY_PORT = 5050


def get_environment() -> str:
    """
    Name of the running environment, as reported by diagnostics.
    """
    return os.getenv("APP_ENV") or DEFAULT_ENVIRONMENT


def is_development() -> bool:
    """
    True only when APP_ENV is explicitly "development".

    An unset APP_ENV still reports "development" in diagnostics, but raw
    error text is only exposed when the flag is set on purpose.
    """
    return os.getenv("APP_ENV") == "development"


def get_database_url() -> Optional[str]:
    return os.getenv("DATABASE_URL") or None


def get_jwt_secret() -> Optional[str]:
    return os.getenv("JWT_SECRET") or None


def get_token_expiration_minutes() -> int:
    return int(os.getenv("TOKEN_EXPIRATION_MINUTES", DEFAULT_TOKEN_EXPIRATION_MINUTES))


def get_platform_marker() -> str:
    return os.getenv("VERCEL") or "not set"


def get_users_file() -> str:
    """
    Path of the shared JSON user file (plaintext records).
    """
    return os.getenv("USERS_FILE") or os.path.join(tempfile.gettempdir(), "users.json")


def get_secure_users_file() -> str:
    """
    Path of the JSON file holding Argon2-hashed user records.
    """
    return os.getenv("SECURE_USERS_FILE") or os.path.join(tempfile.gettempdir(), "secure_users.json")


def get_user_store_backend() -> str:
    return (os.getenv("USER_STORE_BACKEND") or "json").strip().lower()


def get_gateway_port() -> int:
    return int(os.getenv("GATEWAY_PORT", DEFAULT_GATEWAY_PORT))
