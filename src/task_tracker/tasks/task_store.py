# src/task_tracker/tasks/task_store.py

from __future__ import annotations

import abc
import contextlib
import logging
import sqlite3
from pathlib import Path

from .task_models import Page, Task, TaskFilters, TaskPriority, TaskStatus
from .task_query import build_task_query, page_bounds

logger = logging.getLogger(__name__)


class SQLiteStore(abc.ABC):
    """
    Shared plumbing for the SQLite stores.

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

    @property
    def db_path(self) -> Path:
        return self._db_path

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.DatabaseError):
            conn.execute("PRAGMA journal_mode=WAL")

    def _add_missing_columns(self, cur: sqlite3.Cursor, table: str, columns: dict[str, str]) -> None:
        cur.execute(f"PRAGMA table_info({table})")
        existing = {row["name"] for row in cur.fetchall()}
        for name, decl in columns.items():
            if name in existing:
                continue
            cur.execute(f"ALTER TABLE {table} ADD COLUMN {name} {decl}")
            logger.info("%s migration: added column %s.%s", type(self).__name__, table, name)

    @abc.abstractmethod
    def _ensure_schema(self) -> None:
        """Create the store's table(s) if missing and add missing columns."""


class TaskStore(SQLiteStore):
    """
    SQLite task store.

    The schema is simple and migration-safe:
    - create table if missing
    - add missing columns with ALTER TABLE

    author_id / assignee_id are plain integers with no foreign key: a task may
    reference a user id that does not exist.
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        super().__init__(db_path)
        logger.info("TaskStore ready db=%s total=%s", self._db_path, self.count())

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    description TEXT,
                    status TEXT NOT NULL DEFAULT 'TODO',
                    priority TEXT NOT NULL DEFAULT 'MEDIUM',
                    author_id INTEGER,
                    assignee_id INTEGER
                )
                """
            )
            self._add_missing_columns(
                cur,
                "tasks",
                {
                    "description": "TEXT",
                    "status": "TEXT NOT NULL DEFAULT 'TODO'",
                    "priority": "TEXT NOT NULL DEFAULT 'MEDIUM'",
                    "author_id": "INTEGER",
                    "assignee_id": "INTEGER",
                },
            )
            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks(status)")
            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_people ON tasks(author_id, assignee_id)")
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=int(row["id"]),
            title=str(row["title"]),
            description=row["description"],
            status=TaskStatus.from_db(row["status"]),
            priority=TaskPriority.from_db(row["priority"]),
            author_id=int(row["author_id"]) if row["author_id"] is not None else None,
            assignee_id=int(row["assignee_id"]) if row["assignee_id"] is not None else None,
        )

    # ---- public API ----

    def count(self) -> int:
        conn = self._get_conn()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
            return int(n)
        finally:
            conn.close()

    def find_by_id(self, task_id: int) -> Task | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (int(task_id),)).fetchone()
            return self._row_to_task(row) if row else None
        finally:
            conn.close()

    def exists_by_id(self, task_id: int) -> bool:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT 1 FROM tasks WHERE id = ?", (int(task_id),)).fetchone()
            return row is not None
        finally:
            conn.close()

    def find_all(self) -> list[Task]:
        conn = self._get_conn()
        try:
            rows = conn.execute("SELECT * FROM tasks ORDER BY id ASC").fetchall()
            return [self._row_to_task(r) for r in rows]
        finally:
            conn.close()

    def find_page(self, filters: TaskFilters, *, page: int, size: int) -> Page[Task]:
        """
        One page of tasks matching all provided filters, ordered by id.

        total is the number of matching rows across all pages.
        """
        limit, offset = page_bounds(page, size)
        query = build_task_query(filters)

        conn = self._get_conn()
        try:
            (total,) = conn.execute(query.count_sql(), query.params).fetchone()
            rows = conn.execute(query.select_page_sql(), (*query.params, limit, offset)).fetchall()
            return Page(
                items=[self._row_to_task(r) for r in rows],
                total=int(total),
                page=page,
                size=size,
            )
        finally:
            conn.close()

    def save(self, task: Task) -> Task:
        """Insert when task.id is None (the generated id is written back), update otherwise."""
        values = (
            task.title,
            task.description,
            task.status.value,
            task.priority.value,
            task.author_id,
            task.assignee_id,
        )

        conn = self._get_conn()
        try:
            cur = conn.cursor()
            if task.id is None:
                cur.execute(
                    """
                    INSERT INTO tasks(title, description, status, priority, author_id, assignee_id)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    values,
                )
                rowid = cur.lastrowid
                if rowid is None:
                    raise RuntimeError("SQLite did not return lastrowid for tasks insert")
                task.id = int(rowid)
            else:
                cur.execute(
                    """
                    INSERT INTO tasks(id, title, description, status, priority, author_id, assignee_id)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        title = excluded.title,
                        description = excluded.description,
                        status = excluded.status,
                        priority = excluded.priority,
                        author_id = excluded.author_id,
                        assignee_id = excluded.assignee_id
                    """,
                    (int(task.id), *values),
                )
            conn.commit()
            logger.debug("Task saved id=%s status=%s assignee=%s", task.id, task.status.value, task.assignee_id)
            return task
        finally:
            conn.close()

    def delete_by_id(self, task_id: int) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM tasks WHERE id = ?", (int(task_id),))
            conn.commit()
        finally:
            conn.close()
