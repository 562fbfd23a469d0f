# src/task_tracker/cli/commands.py

from __future__ import annotations

import json
import logging
from collections.abc import Callable

from ..core.errors import InvalidArgument, TaskTrackerError
from ..core.identity import Caller
from ..core.state import AppState
from ..tasks.task_models import (
    Role,
    TaskFilters,
    TaskPriority,
    TaskRequest,
    TaskStatus,
    TaskView,
    User,
)

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)

# "/update 3 description=null" clears a nullable field.
NULL_TOKEN = "null"


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /list, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        Service errors are turned into a one-line reply.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return handler(state, args)
        except TaskTrackerError as e:
            logger.debug("Command /%s failed: %s", name, e)
            return f"[{type(e).__name__}] {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _int_arg(raw: str, what: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise InvalidArgument(f"{what} must be an integer, got {raw!r}") from None


def _split_kv(args: list[str]) -> tuple[dict[str, str], list[str]]:
    """Split ["a=1", "word", "b=2"] into ({"a": "1", "b": "2"}, ["word"])."""
    kv: dict[str, str] = {}
    rest: list[str] = []
    for a in args:
        key, sep, value = a.partition("=")
        if sep and key:
            kv[key.lower()] = value
        else:
            rest.append(a)
    return kv, rest


def _format_task(v: TaskView) -> str:
    assignee = v.assignee_id if v.assignee_id is not None else "-"
    author = v.author_id if v.author_id is not None else "-"
    line = f"#{v.id} [{v.status}] ({v.priority}) {v.title}  author={author} assignee={assignee}"
    if v.description:
        line += f"\n    {v.description}"
    return line


def _require_caller(state: AppState) -> Caller:
    if state.caller is None:
        raise InvalidArgument("No identity selected. Use /as <email> first.")
    return state.caller


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_whoami(state: AppState, args: list[str]) -> str:
    if state.caller is None:
        return "Anonymous (use /as <email>)."
    roles = ", ".join(sorted(state.caller.authorities)) or "no roles"
    return f"{state.caller.email} [{roles}]"


def cmd_as(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /as <email>"
    user = state.user_store.find_by_email(args[0])
    if user is None:
        return f"No user with email {args[0]}."
    state.caller = Caller.for_user(user)
    logger.info("Console identity switched to %s", user.email)
    return f"Now acting as {user.email} ({user.role.value})."


def cmd_users(state: AppState, args: list[str]) -> str:
    """
    /users                      -> list users
    /users add <email> <role>   -> provision a user (role: ADMIN | USER)
    """
    if args and args[0].lower() == "add":
        if len(args) != 3:
            return "Usage: /users add <email> <ADMIN|USER>"
        try:
            role = Role(args[2].upper())
        except ValueError:
            return f"Unknown role: {args[2]}. Use ADMIN or USER."
        if state.user_store.find_by_email(args[1]) is not None:
            return f"User {args[1]} already exists."
        user = state.user_store.save(User(id=None, email=args[1], role=role))
        return f"Added user #{user.id}: {user.email} ({user.role.value})"

    users = state.user_store.find_all()
    if not users:
        return "No users."
    return "\n".join(f"#{u.id} {u.email} ({u.role.value})" for u in users)


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list [title=..] [status=..] [priority=..] [author=..] [assignee=..] [page=..] [size=..]
    """
    kv, _ = _split_kv(args)
    filters = TaskFilters(
        title=kv.get("title") or None,
        status=TaskStatus.parse(kv["status"].upper()) if kv.get("status") else None,
        priority=TaskPriority.parse(kv["priority"].upper()) if kv.get("priority") else None,
        author_id=_int_arg(kv["author"], "author") if kv.get("author") else None,
        assignee_id=_int_arg(kv["assignee"], "assignee") if kv.get("assignee") else None,
    )
    page = _int_arg(kv["page"], "page") if kv.get("page") else 0
    size = (
        _int_arg(kv["size"], "size")
        if kv.get("size")
        else int(getattr(state.settings, "default_page_size", 10))
    )

    result = state.service.get_filtered_tasks(filters, page=page, size=size)
    if not result.items:
        return f"No tasks found (total={result.total})."
    lines = [_format_task(v) for v in result.items]
    lines.append(f"-- page {result.page + 1}/{max(1, result.total_pages)}, {result.total} total")
    return "\n".join(lines)


def cmd_show(state: AppState, args: list[str]) -> str:
    """
    /show <task_id>        -> one-line summary
    /show <task_id> json   -> the full view as JSON
    """
    if len(args) not in (1, 2) or (len(args) == 2 and args[1].lower() != "json"):
        return "Usage: /show <task_id> [json]"
    view = state.service.get_task_by_id(_int_arg(args[0], "task_id"))
    if len(args) == 2:
        return json.dumps(view.as_dict(), ensure_ascii=False, indent=2)
    return _format_task(view)


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <title words...> [description=..] [status=..] [priority=..] [assignee=..]
    The current identity (if it is a known user) becomes the author.
    """
    kv, words = _split_kv(args)
    data: dict[str, object] = {"title": " ".join(words)}
    if "description" in kv:
        data["description"] = kv["description"]
    if "status" in kv:
        data["status"] = kv["status"].upper()
    if "priority" in kv:
        data["priority"] = kv["priority"].upper()
    if "assignee" in kv:
        data["assignee_id"] = _int_arg(kv["assignee"], "assignee")

    author_id = None
    if state.caller is not None:
        author = state.user_store.find_by_email(state.caller.email)
        author_id = author.id if author else None

    view = state.service.create_task(TaskRequest.from_dict(data), author_id=author_id)
    return f"Created {_format_task(view)}"


def cmd_update(state: AppState, args: list[str]) -> str:
    """
    /update <task_id> field=value ...
    fields: title, description, status, priority, assignee ("null" clears description/assignee)
    """
    if len(args) < 2:
        return "Usage: /update <task_id> field=value ..."
    caller = _require_caller(state)
    task_id = _int_arg(args[0], "task_id")
    kv, rest = _split_kv(args[1:])
    if rest:
        return f"Expected field=value pairs, got: {' '.join(rest)}"

    data: dict[str, object] = {}
    for key, value in kv.items():
        if key == "assignee":
            data["assignee_id"] = None if value == NULL_TOKEN else _int_arg(value, "assignee")
        elif key in ("status", "priority"):
            data[key] = value.upper()
        elif key == "description":
            data[key] = None if value == NULL_TOKEN else value
        else:
            data[key] = value

    view = state.service.update_task(task_id, TaskRequest.from_dict(data), caller)
    return f"Updated {_format_task(view)}"


def cmd_assign(state: AppState, args: list[str]) -> str:
    if len(args) != 2:
        return "Usage: /assign <task_id> <user_id>"
    view = state.service.assign_task_to_user(
        _int_arg(args[0], "task_id"), _int_arg(args[1], "user_id")
    )
    return f"Assigned {_format_task(view)}"


def cmd_delete(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /delete <task_id>"
    return state.service.delete_task(_int_arg(args[0], "task_id"))


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("whoami", cmd_whoami, help_text="Show the identity commands run as.")
registry.register("as", cmd_as, help_text="Act as another user: /as <email>.")
registry.register("users", cmd_users, help_text="List users, or /users add <email> <ADMIN|USER>.")
registry.register(
    "list",
    cmd_list,
    help_text="List tasks: /list [title=] [status=] [priority=] [author=] [assignee=] [page=] [size=].",
    aliases=["ls"],
)
registry.register("show", cmd_show, help_text="Show one task: /show <id> [json].")
registry.register("add", cmd_add, help_text="Create a task: /add <title> [priority=HIGH] ...")
registry.register("update", cmd_update, help_text="Update a task: /update <id> status=COMPLETED ...")
registry.register("assign", cmd_assign, help_text="Assign a task: /assign <task_id> <user_id>.")
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
