# backend/task_tracker/schemas/project.py
from datetime import date
from typing import List
from pydantic import Field
from .base import BaseSchema, TimestampMixin
from .task import Task

class ProjectBase(BaseSchema):
    title: str = Field(min_length=1, max_length=255)
    client_name: str = Field(min_length=1, max_length=255)
    deadline: date

class ProjectCreate(ProjectBase):
    pass

class Project(ProjectBase, TimestampMixin):
    id: str
    owner_id: str
    notification_sent: bool
    notification_scheduled: bool

class ProjectDetail(Project):
    tasks: List[Task] = []
