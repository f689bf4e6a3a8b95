# backend/task_tracker/schemas/task.py
from typing import Optional
from pydantic import Field
from .base import BaseSchema, TimestampMixin
from ..models.task import TaskStatus

class TaskBase(BaseSchema):
    name: str = Field(min_length=1, max_length=255)

class TaskCreate(TaskBase):
    project_id: str
    status: TaskStatus = TaskStatus.TODO

class TaskUpdate(BaseSchema):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    status: Optional[TaskStatus] = None

class Task(TaskBase, TimestampMixin):
    id: str
    project_id: str
    status: TaskStatus
