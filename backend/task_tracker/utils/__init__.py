# backend/task_tracker/utils/__init__.py
