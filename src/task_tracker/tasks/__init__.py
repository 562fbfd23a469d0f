"""
Task subsystem.

Components:
- task_models.py: data structures (Task, User, TaskRequest, TaskFilters, Page)
- task_query.py: filter -> SQL translation and page bounds
- task_store.py / user_store.py: SQLite-backed storage
- task_service.py: listing, CRUD and the role-gated update rules
"""
