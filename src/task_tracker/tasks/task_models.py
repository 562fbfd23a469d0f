# src/task_tracker/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, StrEnum
from typing import Any, Generic, TypeVar

from ..core.errors import InvalidArgument

T = TypeVar("T")


class TaskStatus(StrEnum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"

    @classmethod
    def parse(cls, raw: str) -> TaskStatus:
        """Convert a status name ("IN_PROGRESS") into the enum; unknown names are rejected."""
        try:
            return cls[raw]
        except (KeyError, TypeError):
            raise InvalidArgument(f"Unknown task status: {raw!r}") from None

    @classmethod
    def from_db(cls, raw: str | None) -> TaskStatus:
        if not raw:
            return cls.TODO
        try:
            return cls(raw)
        except ValueError:
            return cls.TODO


class TaskPriority(StrEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @classmethod
    def parse(cls, raw: str) -> TaskPriority:
        try:
            return cls[raw]
        except (KeyError, TypeError):
            raise InvalidArgument(f"Unknown task priority: {raw!r}") from None

    @classmethod
    def from_db(cls, raw: str | None) -> TaskPriority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(raw)
        except ValueError:
            return cls.MEDIUM


class Role(StrEnum):
    ADMIN = "ADMIN"
    USER = "USER"

    @property
    def authority(self) -> str:
        return f"ROLE_{self.value}"


class _Unset(Enum):
    UNSET = "UNSET"

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


# Marks a request attribute as absent. None is a real value ("clear the field").
UNSET = _Unset.UNSET


def is_set(value: Any) -> bool:
    return value is not UNSET


@dataclass(slots=True)
class Task:
    """
    Mutable work item.

    author_id / assignee_id are weak references: plain user ids, never hydrated
    User objects. author_id is written once at creation.
    """

    id: int | None
    title: str
    description: str | None = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    author_id: int | None = None
    assignee_id: int | None = None


@dataclass(slots=True)
class User:
    id: int | None
    email: str
    role: Role = Role.USER


@dataclass(slots=True, frozen=True)
class TaskRequest:
    """
    Create/update payload.

    Each attribute defaults to UNSET. Only attributes that were explicitly
    supplied take part in a partial update. status/priority are raw strings and
    are converted by the service, so conversion errors surface there.
    """

    title: str | None | _Unset = UNSET
    description: str | None | _Unset = UNSET
    status: str | None | _Unset = UNSET
    priority: str | None | _Unset = UNSET
    assignee_id: int | None | _Unset = UNSET

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TaskRequest:
        """Build a request from a mapping; missing keys stay UNSET."""
        known = {"title", "description", "status", "priority", "assignee_id"}
        unknown = set(data) - known
        if unknown:
            raise InvalidArgument(f"Unknown task fields: {', '.join(sorted(unknown))}")
        return cls(**data)

    def supplied_fields(self) -> list[str]:
        return [
            name
            for name in ("title", "description", "status", "priority", "assignee_id")
            if is_set(getattr(self, name))
        ]


@dataclass(slots=True, frozen=True)
class TaskFilters:
    """
    Optional-predicate set for listing tasks.

    Every provided (non-None, non-empty) predicate narrows the result; the
    effective filter is their conjunction.
    """

    title: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    author_id: int | None = None
    assignee_id: int | None = None

    def matches(self, task: Task) -> bool:
        if self.title and self.title.lower() not in task.title.lower():
            return False
        if self.status is not None and task.status != self.status:
            return False
        if self.priority is not None and task.priority != self.priority:
            return False
        if self.author_id is not None and task.author_id != self.author_id:
            return False
        if self.assignee_id is not None and task.assignee_id != self.assignee_id:
            return False
        return True


@dataclass(slots=True, frozen=True)
class Page(Generic[T]):
    items: list[T]
    total: int
    page: int
    size: int

    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 0
        return (self.total + self.size - 1) // self.size

    def map(self, fn) -> Page[Any]:
        return Page(items=[fn(x) for x in self.items], total=self.total, page=self.page, size=self.size)


@dataclass(slots=True, frozen=True)
class TaskView:
    """Outbound representation of a stored task."""

    id: int
    title: str
    description: str | None
    status: str
    priority: str
    author_id: int | None
    assignee_id: int | None

    @classmethod
    def from_task(cls, task: Task) -> TaskView:
        if task.id is None:
            raise ValueError("Cannot build a view of an unsaved task")
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            status=task.status.value,
            priority=task.priority.value,
            author_id=task.author_id,
            assignee_id=task.assignee_id,
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "priority": self.priority,
            "author_id": self.author_id,
            "assignee_id": self.assignee_id,
        }
