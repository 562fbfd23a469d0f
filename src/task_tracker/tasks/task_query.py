# src/task_tracker/tasks/task_query.py

"""
Filter -> SQL translation for task listings.

Each provided filter adds one predicate; predicates are joined with AND.
Omitted filters (None, or an empty title) add nothing, so an empty
TaskFilters selects every row.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..core.errors import InvalidArgument
from .task_models import TaskFilters

LIKE_ESCAPE = "\\"


@dataclass(slots=True, frozen=True)
class TaskQuery:
    where: str
    params: tuple[Any, ...]

    def select_page_sql(self) -> str:
        return f"SELECT * FROM tasks{self.where} ORDER BY id ASC LIMIT ? OFFSET ?"

    def count_sql(self) -> str:
        return f"SELECT COUNT(*) FROM tasks{self.where}"


def _escape_like(fragment: str) -> str:
    return (
        fragment.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def build_task_query(filters: TaskFilters) -> TaskQuery:
    clauses: list[str] = []
    params: list[Any] = []

    if filters.title:
        # Case-insensitive substring; wildcards typed by the caller match literally.
        clauses.append(f"LOWER(title) LIKE ? ESCAPE '{LIKE_ESCAPE}'")
        params.append(f"%{_escape_like(filters.title.lower())}%")

    if filters.status is not None:
        clauses.append("status = ?")
        params.append(filters.status.value)

    if filters.priority is not None:
        clauses.append("priority = ?")
        params.append(filters.priority.value)

    if filters.author_id is not None:
        clauses.append("author_id = ?")
        params.append(int(filters.author_id))

    if filters.assignee_id is not None:
        clauses.append("assignee_id = ?")
        params.append(int(filters.assignee_id))

    where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
    return TaskQuery(where=where, params=tuple(params))


def page_bounds(page: int, size: int) -> tuple[int, int]:
    """Return (limit, offset) for a zero-based page."""
    if page < 0:
        raise InvalidArgument("Page index must not be less than zero")
    if size < 1:
        raise InvalidArgument("Page size must not be less than one")
    return size, page * size
