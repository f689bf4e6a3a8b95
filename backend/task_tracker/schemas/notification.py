# backend/task_tracker/schemas/notification.py
from typing import List, Optional
from pydantic import BaseModel
from .base import BaseSchema
from ..services.notifications import NotificationStatus

class NotificationRequest(BaseModel):
    project_id: str

class NotificationOutcome(BaseSchema):
    project_id: str
    status: NotificationStatus
    days_remaining: Optional[int] = None
    message_id: Optional[str] = None
    recipient: Optional[str] = None
    error: Optional[str] = None

class SweepResult(BaseSchema):
    checked: int
    sent: int
    errors: List[str] = []
    results: List[NotificationOutcome] = []
