# backend/task_tracker/models/account.py
import uuid

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from ..database import Base, utcnow


class Account(Base):
    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), nullable=False, unique=True, index=True)
    hashed_password = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    projects = relationship("Project", back_populates="owner")
