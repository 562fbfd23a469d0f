# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKTRACKER_APP_NAME": "App display name (default: task-tracker).",
    "TASKTRACKER_LOG_LEVEL": "Console logging level (default: INFO).",
    # Paths (gitignored)
    "TASKTRACKER_DATA_DIR": "Local data directory for the database and logs (default: .local/task-tracker).",
    "TASKTRACKER_TASKS_DB_PATH": "SQLite path for tasks and users (default: <data_dir>/tasks.sqlite3).",
    # Listing
    "TASKTRACKER_DEFAULT_PAGE_SIZE": "Page size used by /list when size= is not given (default: 10).",
    "TASKTRACKER_MAX_PAGE_SIZE": "Larger page sizes are clamped to this (default: 100).",
    # Console
    "TASKTRACKER_CALLER_EMAIL": "Email of the user the console acts as on start (default: anonymous).",
}
