# backend/task_tracker/models/project.py
import uuid

from sqlalchemy import Column, String, Date, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from ..database import Base, utcnow


class Project(Base):
    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    client_name = Column(String(255), nullable=False)
    deadline = Column(Date, nullable=False, index=True)
    notification_sent = Column(Boolean, nullable=False, default=False, server_default='0')
    notification_scheduled = Column(Boolean, nullable=False, default=False, server_default='0')
    # Token of the dispatch currently sending this project's reminder
    notification_claim = Column(String(36), nullable=True)
    notification_claimed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow
    )

    owner = relationship("Account", back_populates="projects")
    tasks = relationship("Task", back_populates="project", order_by="Task.created_at.desc()")
