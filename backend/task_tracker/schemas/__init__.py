# backend/task_tracker/schemas/__init__.py
from .account import Account, AccountCreate, LoginRequest, Token
from .project import Project, ProjectCreate, ProjectDetail
from .task import Task, TaskCreate, TaskUpdate
from .notification import NotificationRequest, NotificationOutcome, SweepResult

__all__ = [
    "Account", "AccountCreate", "LoginRequest", "Token",
    "Project", "ProjectCreate", "ProjectDetail",
    "Task", "TaskCreate", "TaskUpdate",
    "NotificationRequest", "NotificationOutcome", "SweepResult"
]
