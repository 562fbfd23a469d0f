# src/task_tracker/tasks/task_service.py

"""
Task service.

Listing goes through the query builder; every mutation goes through the
role check below and ends in exactly one TaskRepo.save().

Update rules (caller role is resolved once per call):
- ADMIN: every supplied field is applied (partial update).
- USER: only the status, and only on tasks assigned to the caller.
- anything else: rejected.

There is no locking around load + save. Two concurrent updates of the same
task are last-writer-wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..core.errors import Forbidden, InvalidArgument, InvalidState, TaskNotFound, UserNotFound
from ..core.identity import Caller, CallerRole
from ..core.ports import TaskRepo, UserRepo
from .task_models import (
    Page,
    Task,
    TaskFilters,
    TaskPriority,
    TaskRequest,
    TaskStatus,
    TaskView,
    is_set,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_PAGE_SIZE = 100


@dataclass(slots=True, frozen=True)
class _ValidatedChanges:
    """Request after conversion; only attributes listed in `fields` are applied."""

    fields: frozenset[str]
    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    assignee_id: int | None = None


class TaskService:
    def __init__(
        self,
        tasks: TaskRepo,
        users: UserRepo,
        *,
        max_page_size: int = DEFAULT_MAX_PAGE_SIZE,
    ) -> None:
        self._tasks = tasks
        self._users = users
        self._max_page_size = max(1, int(max_page_size))

    # ---- queries ----

    def get_filtered_tasks(
        self,
        filters: TaskFilters | None = None,
        *,
        page: int = 0,
        size: int = 10,
    ) -> Page[TaskView]:
        filters = filters or TaskFilters()
        logger.info(
            "Filtering tasks with parameters: title=%s, status=%s, priority=%s, "
            "authorId=%s, assigneeId=%s, page=%s, size=%s",
            filters.title,
            filters.status,
            filters.priority,
            filters.author_id,
            filters.assignee_id,
            page,
            size,
        )
        if size > self._max_page_size:
            logger.debug("Clamping page size %s to %s", size, self._max_page_size)
            size = self._max_page_size

        result = self._tasks.find_page(filters, page=page, size=size)
        logger.info("Retrieved %s tasks with filters", result.total)
        return result.map(TaskView.from_task)

    def get_all_tasks(self) -> list[TaskView]:
        logger.info("Retrieving all tasks")
        views = [TaskView.from_task(t) for t in self._tasks.find_all()]
        logger.info("Retrieved %s tasks", len(views))
        return views

    def get_task_by_id(self, task_id: int) -> TaskView:
        logger.info("Retrieving task with ID: %s", task_id)
        task = self._load_task(task_id)
        return TaskView.from_task(task)

    # ---- mutations ----

    def create_task(self, request: TaskRequest, *, author_id: int | None = None) -> TaskView:
        """
        Create a task from `request`.

        title is required. status/priority fall back to TODO/MEDIUM when not
        supplied. assignee_id, if supplied, is stored as given (weak reference).
        """
        title = request.title if is_set(request.title) else None
        logger.info("Creating new task with title: %s", title)

        changes = self._validate(request, require_title=True)
        task = Task(id=None, title=changes.title or "", author_id=author_id)
        self._apply(task, changes)

        task = self._tasks.save(task)
        logger.info("Task created successfully with ID: %s", task.id)
        return TaskView.from_task(task)

    def update_task(self, task_id: int, request: TaskRequest, caller: Caller) -> TaskView:
        logger.info("Updating task with ID: %s (caller=%s)", task_id, caller.email)
        task = self._load_task(task_id)

        role = caller.role
        if role is CallerRole.ADMIN:
            changes = self._validate(request)
        elif role is CallerRole.USER:
            changes = self._validate_assignee_update(task, request, caller)
        else:
            logger.warning("Rejected update of task %s: caller %s has no known role", task_id, caller.email)
            raise Forbidden("Unauthorized role")

        self._apply(task, changes)
        task = self._tasks.save(task)
        logger.info("Task updated successfully with ID: %s fields=%s", task_id, sorted(changes.fields))
        return TaskView.from_task(task)

    def delete_task(self, task_id: int) -> str:
        logger.info("Deleting task with ID: %s", task_id)
        if not self._tasks.exists_by_id(task_id):
            logger.error("Task with ID: %s not found", task_id)
            raise TaskNotFound("Task not found")
        self._tasks.delete_by_id(task_id)
        logger.info("Task with ID: %s deleted successfully", task_id)
        return f"Task with id: {task_id} deleted successfully"

    def assign_task_to_user(self, task_id: int, user_id: int) -> TaskView:
        logger.info("Assigning task %s to user %s", task_id, user_id)
        task = self._tasks.find_by_id(task_id)
        if task is None:
            logger.error("Task with ID: %s not found", task_id)
            raise TaskNotFound(f"Task not found with id: {task_id}")

        user = self._users.find_by_id(user_id)
        if user is None:
            logger.error("User with ID: %s not found", user_id)
            raise UserNotFound(f"User not found with id: {user_id}")

        if task.status is TaskStatus.COMPLETED:
            logger.warning("Refusing to assign completed task %s", task_id)
            raise InvalidState("Cannot assign a completed task.")

        task.assignee_id = user.id
        task = self._tasks.save(task)
        logger.info("Task %s assigned to user %s", task_id, user_id)
        return TaskView.from_task(task)

    # ---- helpers ----

    def _load_task(self, task_id: int) -> Task:
        task = self._tasks.find_by_id(task_id)
        if task is None:
            logger.error("Task with ID: %s not found", task_id)
            raise TaskNotFound("Task not found")
        return task

    def _is_assignee(self, task: Task, caller: Caller) -> bool:
        if task.assignee_id is None:
            return False
        assignee = self._users.find_by_id(task.assignee_id)
        return assignee is not None and assignee.email == caller.email

    def _validate_assignee_update(self, task: Task, request: TaskRequest, caller: Caller) -> _ValidatedChanges:
        if not self._is_assignee(task, caller):
            logger.warning("Rejected update of task %s: %s is not the assignee", task.id, caller.email)
            raise Forbidden("You are not allowed to update this task")

        if not is_set(request.status) or request.status is None:
            logger.warning("Rejected update of task %s: no status supplied by %s", task.id, caller.email)
            raise Forbidden("Users can only update the status of their assigned tasks")

        ignored = [f for f in request.supplied_fields() if f != "status"]
        if ignored:
            logger.debug("Ignoring fields %s from non-admin caller %s", ignored, caller.email)

        return _ValidatedChanges(fields=frozenset({"status"}), status=TaskStatus.parse(request.status))

    @staticmethod
    def _validate(request: TaskRequest, *, require_title: bool = False) -> _ValidatedChanges:
        """
        Convert and check every supplied attribute before anything is applied,
        so a failing request never leaves the task half-updated.
        """
        fields: set[str] = set()
        title = description = None
        status = priority = None
        assignee_id = None

        # A None/"" title on update is skipped like an absent one; titles never become empty.
        if is_set(request.title) and request.title:
            title = request.title
            fields.add("title")
        elif require_title:
            logger.error("Title cannot be null or empty")
            raise InvalidArgument("Title cannot be null or empty")

        if is_set(request.description):
            description = request.description
            fields.add("description")

        if is_set(request.status) and request.status is not None:
            status = TaskStatus.parse(request.status)
            fields.add("status")

        if is_set(request.priority) and request.priority is not None:
            priority = TaskPriority.parse(request.priority)
            fields.add("priority")

        if is_set(request.assignee_id):
            if request.assignee_id is not None:
                try:
                    assignee_id = int(request.assignee_id)
                except (TypeError, ValueError):
                    raise InvalidArgument(f"Invalid assignee id: {request.assignee_id!r}") from None
            fields.add("assignee_id")

        return _ValidatedChanges(
            fields=frozenset(fields),
            title=title,
            description=description,
            status=status,
            priority=priority,
            assignee_id=assignee_id,
        )

    @staticmethod
    def _apply(task: Task, changes: _ValidatedChanges) -> None:
        for name in changes.fields:
            setattr(task, name, getattr(changes, name))
