# backend/task_tracker/api/__init__.py
from .auth import router as auth_router
from .projects import router as projects_router
from .tasks import router as tasks_router
from .notifications import router as notifications_router
from .deadlines import router as deadlines_router

__all__ = ["auth_router", "projects_router", "tasks_router", "notifications_router", "deadlines_router"]
