# backend/task_tracker/models/__init__.py
from ..database import Base
from .account import Account
from .project import Project
from .task import Task, TaskStatus

__all__ = [
    "Base",
    "Account",
    "Project",
    "Task",
    "TaskStatus"
]
