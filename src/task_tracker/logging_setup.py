# src/task_tracker/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Per-row persistence chatter (saves, migrations) that only belongs in the file log.
STORE_LOGGERS = ("task_tracker.tasks.task_store", "task_tracker.tasks.user_store")

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def level_from_name(name: str | None, default: int = logging.INFO) -> int:
    """Map "debug" / "WARNING" / "10" to a logging level; unknown names give `default`."""
    if not name:
        return default
    name = str(name).strip().upper()
    if name.isdigit():
        return int(name)
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else default


class TaskTrackerConsoleFilter(logging.Filter):
    """
    Console filter for the interactive REPL.

    Service and CLI records pass at the handler level; store records need at
    least `store_level`; everything else (py.warnings, libraries) needs ERROR.
    """

    def __init__(self, store_level: int = logging.INFO) -> None:
        super().__init__()
        self.store_level = store_level

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith(STORE_LOGGERS):
            return record.levelno >= self.store_level
        if record.name == "task_tracker" or record.name.startswith("task_tracker."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/task-tracker",
    app_name: str = "task-tracker",
    console_level: int | str = logging.INFO,
    file_level: int | str = logging.DEBUG,
) -> Path:
    """
    Configure the root logger once at startup and return the log file path.

    Console: stderr, filtered by TaskTrackerConsoleFilter.
    File: `<log_dir>/<app_name>.log`, everything at `file_level`.
    """
    if isinstance(console_level, str):
        console_level = level_from_name(console_level)
    if isinstance(file_level, str):
        file_level = level_from_name(file_level, default=logging.DEBUG)

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    slug = "-".join(app_name.lower().split()) or "task-tracker"
    log_file = log_dir / f"{slug}.log"

    root = logging.getLogger()
    root.setLevel(min(console_level, file_level))

    # Re-running setup (tests, REPL restarts) must not stack handlers.
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(TaskTrackerConsoleFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    logging.getLogger(__name__).debug("Logging to %s (console=%s)", log_file, logging.getLevelName(console_level))
    return log_file
