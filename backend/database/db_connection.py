"""
PostgreSQL connection helper.
Provides get_db() for the PostgreSQL user store and the debug endpoint.
"""

import logging

import psycopg2
from psycopg2.extras import DictCursor

from backend.common.config import get_database_url


def get_db():
    """
    Returns a new psycopg2 connection with dictionary-based row access.

    The URL is read on every call, so the JSON-backed deployment can run
    without DATABASE_URL at all.

    Usage:
        with get_db() as conn:
            with conn.cursor() as cur:
                cur.execute(...)

    Returns:
        psycopg2.extensions.connection: A connection object with DictCursor factory.

    Raises:
        RuntimeError: If DATABASE_URL is not set.
        psycopg2.Error: If connection fails.
    """
    database_url = get_database_url()
    if not database_url:
        raise RuntimeError("DATABASE_URL is not set. Please set the environment variable.")

    try:
        conn = psycopg2.connect(database_url)

        # Rows come back as dictionaries (e.g., {"id": "1", "email": "..."})
        conn.cursor_factory = DictCursor
        return conn
    except Exception as e:
        logging.error(f"Error connecting to database: {e}")
        # Re-raise the exception so the caller knows the connection failed
        raise
