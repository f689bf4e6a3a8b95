# backend/task_tracker/models/task.py
import enum
import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from ..database import Base, utcnow


class TaskStatus(str, enum.Enum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    DONE = "done"


class Task(Base):
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    status = Column(
        Enum(TaskStatus, values_callable=lambda e: [m.value for m in e], name="task_status"),
        nullable=False,
        default=TaskStatus.TODO
    )
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow
    )

    project = relationship("Project", back_populates="tasks")
