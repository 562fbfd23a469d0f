# src/task_tracker/tasks/user_store.py

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from .task_models import Role, User
from .task_store import SQLiteStore

logger = logging.getLogger(__name__)


class UserStore(SQLiteStore):
    """
    SQLite user store.

    Users are owned by the authentication side of the system; the task service
    only reads them. save() exists so users can be provisioned (console, tests).
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        super().__init__(db_path)
        logger.info("UserStore ready db=%s total=%s", self._db_path, self.count())

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    email TEXT NOT NULL UNIQUE,
                    role TEXT NOT NULL DEFAULT 'USER'
                )
                """
            )
            self._add_missing_columns(cur, "users", {"role": "TEXT NOT NULL DEFAULT 'USER'"})
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_user(row: sqlite3.Row) -> User:
        return User(id=int(row["id"]), email=str(row["email"]), role=Role(str(row["role"])))

    def count(self) -> int:
        conn = self._get_conn()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM users").fetchone()
            return int(n)
        finally:
            conn.close()

    def find_by_id(self, user_id: int) -> User | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (int(user_id),)).fetchone()
            return self._row_to_user(row) if row else None
        finally:
            conn.close()

    def find_by_email(self, email: str) -> User | None:
        if not email:
            return None
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
            return self._row_to_user(row) if row else None
        finally:
            conn.close()

    def find_all(self) -> list[User]:
        conn = self._get_conn()
        try:
            rows = conn.execute("SELECT * FROM users ORDER BY id ASC").fetchall()
            return [self._row_to_user(r) for r in rows]
        finally:
            conn.close()

    def exists_by_id(self, user_id: int) -> bool:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT 1 FROM users WHERE id = ?", (int(user_id),)).fetchone()
            return row is not None
        finally:
            conn.close()

    def save(self, user: User) -> User:
        if not user.email or not user.email.strip():
            raise ValueError("email is required")

        conn = self._get_conn()
        try:
            cur = conn.cursor()
            if user.id is None:
                cur.execute(
                    "INSERT INTO users(email, role) VALUES (?, ?)",
                    (user.email.strip(), user.role.value),
                )
                rowid = cur.lastrowid
                if rowid is None:
                    raise RuntimeError("SQLite did not return lastrowid for users insert")
                user.id = int(rowid)
            else:
                cur.execute(
                    """
                    INSERT INTO users(id, email, role) VALUES (?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET email = excluded.email, role = excluded.role
                    """,
                    (int(user.id), user.email.strip(), user.role.value),
                )
            conn.commit()
            logger.debug("User saved id=%s email=%s role=%s", user.id, user.email, user.role.value)
            return user
        finally:
            conn.close()

    def delete_by_id(self, user_id: int) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM users WHERE id = ?", (int(user_id),))
            conn.commit()
        finally:
            conn.close()
