"""Task-tracking backend: filtered task listings and role-gated task mutations."""

__version__ = "0.1.0"
