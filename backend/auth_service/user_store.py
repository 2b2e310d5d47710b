"""
User stores for the authentication handlers.

A store is injected into the Flask app (see gateway.server.create_app) and
looked up by the route handlers, so the JSON file, in-memory, and PostgreSQL
backends are interchangeable.

Records look like:
    {"id": "1700000000000", "email": "...", "password": "...", "role": "volunteer", "name": "..."}
"""

import json
import logging
import os
import tempfile
import threading
import time
from typing import Any, Dict, List, Optional

UserRecord = Dict[str, Any]

# Seed accounts returned whenever the backing file is absent or unreadable
DEFAULT_USERS: List[UserRecord] = [
    {
        "id": "1",
        "email": "admin@volunteer.com",
        "password": "admin123",
        "role": "admin",
        "name": "Admin User",
    },
    {
        "id": "2",
        "email": "volunteer@test.com",
        "password": "test123",
        "role": "volunteer",
        "name": "Test Volunteer",
    },
]


def now_ms() -> int:
    """Current epoch time in milliseconds."""
    return int(time.time() * 1000)


def generate_simple_token(user_id: str) -> str:
    """
    Build the unsigned placeholder token used by the simple endpoints.

    Anyone who knows a user id can forge one of these; the signed tokens in
    auth_service.utils are the secure alternative.
    """
    return f"simple_token_{user_id}_{now_ms()}"


class UserStore:
    """
    Storage interface used by the auth routes.

    Subclasses implement `get`, `add`, `register` and `all`.
    """

    def get(self, email: str, role: str) -> Optional[UserRecord]:
        raise NotImplementedError

    def add(self, user_data: UserRecord) -> UserRecord:
        raise NotImplementedError

    def register(self, user_data: UserRecord) -> Optional[UserRecord]:
        """
        Atomically insert a record unless (email, role) is already taken.

        Returns:
            dict: The stored record, or None when the pair already exists.
        """
        raise NotImplementedError

    def all(self) -> List[UserRecord]:
        raise NotImplementedError

    @staticmethod
    def new_record(user_data: UserRecord) -> UserRecord:
        # Caller-supplied fields win, including an explicit id
        return {"id": str(now_ms()), **user_data}


class JsonUserStore(UserStore):
    """
    User list kept in a single JSON file, rewritten wholesale on every save.

    Reads and writes never raise: IO and parse errors are logged and the
    built-in defaults are served instead. A process-wide lock makes
    `add_user` and `register` atomic within one process; separate processes
    sharing the file can still lose updates.
    """

    def __init__(self, path: str, defaults: Optional[List[UserRecord]] = None) -> None:
        self.path = path
        self.defaults = DEFAULT_USERS if defaults is None else defaults
        self._lock = threading.Lock()

    def load_users(self) -> List[UserRecord]:
        try:
            if os.path.exists(self.path):
                with open(self.path, "r", encoding="utf-8") as f:
                    users = json.load(f)
                if isinstance(users, list) and all(isinstance(u, dict) for u in users):
                    return users
                logging.error(f"[UserStore] {self.path} does not hold a JSON array of user records, using defaults")
        except (OSError, ValueError) as e:
            logging.error(f"[UserStore] Error loading users from {self.path}: {e}")
        return [dict(u) for u in self.defaults]

    def save_users(self, users: List[UserRecord]) -> bool:
        directory = os.path.dirname(self.path) or "."
        try:
            # Write next to the target, then swap it in
            fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(users, f, indent=2)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
            return True
        except (OSError, TypeError, ValueError) as e:
            logging.error(f"[UserStore] Error saving users to {self.path}: {e}")
            return False

    def find_user(self, email: str, role: str) -> Optional[UserRecord]:
        for user in self.load_users():
            if user.get("email") == email and user.get("role") == role:
                return user
        return None

    def add_user(self, user_data: UserRecord) -> UserRecord:
        with self._lock:
            users = self.load_users()
            new_user = self.new_record(user_data)
            users.append(new_user)
            self.save_users(users)
        return new_user

    def register(self, user_data: UserRecord) -> Optional[UserRecord]:
        with self._lock:
            users = self.load_users()
            email, role = user_data.get("email"), user_data.get("role")
            if any(u.get("email") == email and u.get("role") == role for u in users):
                return None
            new_user = self.new_record(user_data)
            users.append(new_user)
            self.save_users(users)
        return new_user

    def all(self) -> List[UserRecord]:
        return self.load_users()

    get = find_user
    add = add_user


class MemoryUserStore(UserStore):
    """
    Process-local user list seeded from the defaults. Nothing is persisted.
    """

    def __init__(self, defaults: Optional[List[UserRecord]] = None) -> None:
        seed = DEFAULT_USERS if defaults is None else defaults
        self._users: List[UserRecord] = [dict(u) for u in seed]
        self._lock = threading.Lock()

    def get(self, email: str, role: str) -> Optional[UserRecord]:
        for user in self._users:
            if user.get("email") == email and user.get("role") == role:
                return user
        return None

    def add(self, user_data: UserRecord) -> UserRecord:
        new_user = self.new_record(user_data)
        with self._lock:
            self._users.append(new_user)
        return new_user

    def register(self, user_data: UserRecord) -> Optional[UserRecord]:
        with self._lock:
            if self.get(user_data.get("email"), user_data.get("role")):
                return None
            new_user = self.new_record(user_data)
            self._users.append(new_user)
        return new_user

    def all(self) -> List[UserRecord]:
        return list(self._users)
