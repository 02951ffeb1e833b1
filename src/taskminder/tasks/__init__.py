"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority, TaskStatus)
- errors.py: error taxonomy (validation, corrupt record, persistence)
- task_codec.py: flat CSV file persistence
- task_store.py: in-memory store, persisted after every mutation
- reminder_scheduler.py: background loop that reports due/overdue tasks
"""
