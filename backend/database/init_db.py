"""
Database bootstrap and quick integrity test.

Creates the user tables used by PostgresUserStore (if missing), then runs an
insert / select / duplicate-insert / delete cycle to confirm the unique
(email, role) constraint is in place.

Usage:
    python -m backend.database.init_db
"""

import sys

from backend.auth_service.pg_user_store import (
    SECURE_USERS_TABLE,
    USERS_TABLE,
    create_users_table_sql,
)
from backend.database.db_connection import get_db

TEST_USER_ID = "init-db-check"
TEST_EMAIL = "init-db-check@example.com"


def main() -> int:
    print("--- Running Database Quick Test ---")

    conn = None
    cur = None
    inserted = False

    try:
        conn = get_db()
        cur = conn.cursor()

        # 1. Basic connection check
        cur.execute("SELECT NOW();")
        print(f"Connected! Database server time: {cur.fetchone()[0]}")

        # 2. Create tables
        print("\nEnsuring user tables exist...")
        for table in (USERS_TABLE, SECURE_USERS_TABLE):
            cur.execute(create_users_table_sql(table))
            print(f" - {table}: ready")
        conn.commit()

        # 3. Insert a test user
        print("\nInserting test user...")
        cur.execute(f"""
            INSERT INTO {USERS_TABLE} (id, email, password, role, name)
            VALUES (%s, %s, 'check', 'volunteer', 'Init Check')
            ON CONFLICT (email, role) DO NOTHING;
        """, (TEST_USER_ID, TEST_EMAIL))
        conn.commit()
        inserted = True

        # 4. The same (email, role) must not insert twice
        cur.execute(f"""
            INSERT INTO {USERS_TABLE} (id, email, password, role, name)
            VALUES (%s, %s, 'check', 'volunteer', 'Init Check')
            ON CONFLICT (email, role) DO NOTHING
            RETURNING id;
        """, (TEST_USER_ID + "-dup", TEST_EMAIL))
        if cur.fetchone():
            raise Exception("Duplicate (email, role) was accepted. Unique constraint is missing.")
        conn.commit()

        cur.execute(f"SELECT name FROM {USERS_TABLE} WHERE email = %s AND role = 'volunteer';", (TEST_EMAIL,))
        row = cur.fetchone()
        if not row:
            raise Exception("Failed to read back the test user.")
        print(f"Found user: '{row[0]}'")

        print("\nDatabase test PASSED successfully!")
        return 0

    except Exception as e:
        print("\nDatabase test FAILED:")
        print(f" Error: {e}")
        return 1

    finally:
        # 5. Mandatory Cleanup
        if conn and cur:
            print("\nCleaning up test data...")
            try:
                if inserted:
                    cur.execute(f"DELETE FROM {USERS_TABLE} WHERE email = %s;", (TEST_EMAIL,))
                    conn.commit()
                print("Cleanup complete.")
            except Exception as cleanup_error:
                print(f"Cleanup FAILED. Database may contain leftover test data: {cleanup_error}")
                conn.rollback()
            finally:
                cur.close()
                conn.close()
                print("Database connection closed.")


if __name__ == "__main__":
    sys.exit(main())
