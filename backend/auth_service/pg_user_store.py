"""
PostgreSQL-backed user store.

Uses the shared `get_db()` helper. Unlike the JSON store, database errors
are not masked here: they propagate to the route handler, which answers 500.
"""

from typing import List, Optional

from backend.auth_service.user_store import UserRecord, UserStore
from backend.database.db_connection import get_db

CREATE_USERS_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS {table} (
        id VARCHAR(32) PRIMARY KEY,
        email VARCHAR(255) NOT NULL,
        password TEXT NOT NULL,
        role VARCHAR(32) NOT NULL DEFAULT 'volunteer',
        name VARCHAR(255) NOT NULL DEFAULT 'New User',
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        UNIQUE (email, role)
    );
"""

USER_COLUMNS = "id, email, password, role, name"

USERS_TABLE = "app_users"
SECURE_USERS_TABLE = "secure_users"


def create_users_table_sql(table: str = USERS_TABLE) -> str:
    return CREATE_USERS_TABLE_SQL.format(table=table)


class PostgresUserStore(UserStore):
    """
    Users kept in one table, unique per (email, role).

    Args:
        table (str): `app_users` for plaintext records, `secure_users` for
            Argon2-hashed ones. Only these module constants are passed in.
    """

    def __init__(self, table: str = USERS_TABLE) -> None:
        self.table = table

    def get(self, email: str, role: str) -> Optional[UserRecord]:
        sql = f"SELECT {USER_COLUMNS} FROM {self.table} WHERE email = %s AND role = %s;"

        with get_db() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (email, role))
                row = cur.fetchone()

        return dict(row) if row else None

    def add(self, user_data: UserRecord) -> UserRecord:
        record = self.new_record(user_data)
        sql = f"""
            INSERT INTO {self.table} ({USER_COLUMNS})
            VALUES (%s, %s, %s, %s, %s)
            RETURNING {USER_COLUMNS};
        """

        with get_db() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, self._values(record))
                row = cur.fetchone()
                conn.commit()

        return dict(row)

    def register(self, user_data: UserRecord) -> Optional[UserRecord]:
        """
        Check-and-insert in one statement: the unique (email, role)
        constraint decides, so concurrent registrations cannot both win.
        """
        record = self.new_record(user_data)
        sql = f"""
            INSERT INTO {self.table} ({USER_COLUMNS})
            VALUES (%s, %s, %s, %s, %s)
            ON CONFLICT (email, role) DO NOTHING
            RETURNING {USER_COLUMNS};
        """

        with get_db() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, self._values(record))
                row = cur.fetchone()
                conn.commit()

        return dict(row) if row else None

    def all(self) -> List[UserRecord]:
        sql = f"SELECT {USER_COLUMNS} FROM {self.table} ORDER BY created_at ASC;"

        with get_db() as conn:
            with conn.cursor() as cur:
                cur.execute(sql)
                return [dict(row) for row in cur.fetchall()]

    @staticmethod
    def _values(record: UserRecord) -> tuple:
        return (
            record["id"],
            record.get("email"),
            record.get("password"),
            record.get("role", "volunteer"),
            record.get("name", "New User"),
        )
