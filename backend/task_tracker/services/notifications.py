# backend/task_tracker/services/notifications.py
"""Deadline reminder dispatch.

Every trigger (project creation, on-demand requests, the account sweep and
the global periodic sweep) goes through :func:`evaluate_and_notify`, so the
due-soon rule and the flag transitions live in exactly one place.
"""
import asyncio
import enum
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import repository
from ..config import settings
from ..models import Account, Project
from ..utils.logging import service_logger
from .composer import compose, compose_subject
from .deadlines import classify, due_soon_window, today_in_zone
from .mailer import TransportError

PAST_DEADLINE = "PastDeadline"


class NotificationStatus(str, enum.Enum):
    ALREADY_SENT = "already_sent"
    SENT = "sent"
    SCHEDULED = "scheduled"
    REJECTED = "rejected"
    FAILED = "failed"
    IN_PROGRESS = "in_progress"


@dataclass
class NotificationOutcome:
    project_id: str
    status: NotificationStatus
    days_remaining: Optional[int] = None
    message_id: Optional[str] = None
    recipient: Optional[str] = None
    error: Optional[str] = None


@dataclass
class SweepResult:
    checked: int = 0
    sent: int = 0
    errors: List[str] = field(default_factory=list)
    results: List[NotificationOutcome] = field(default_factory=list)


def resolve_recipient(db: Session, project: Project) -> str:
    """Owner's email, or the configured fallback if it cannot be resolved"""
    try:
        email = repository.resolve_email_for_account(db, project.owner_id)
    except Exception as e:
        db.rollback()
        service_logger.error("Failed to resolve owner email", extra={
            "project_id": project.id,
            "owner_id": project.owner_id,
            "error": str(e)
        })
        email = None

    if email:
        return email

    service_logger.warning("Using fallback notification address", extra={
        "project_id": project.id,
        "owner_id": project.owner_id
    })
    return settings.NOTIFICATION_FALLBACK_EMAIL


async def evaluate_and_notify(
    db: Session,
    project: Project,
    transport,
    today: Optional[date] = None,
    recipient: Optional[str] = None
) -> NotificationOutcome:
    """Decide whether to send, schedule or skip a reminder for one project"""
    project_id = project.id

    if project.notification_sent:
        service_logger.info("Notification already sent", extra={"project_id": project_id})
        return NotificationOutcome(project_id, NotificationStatus.ALREADY_SENT)

    status = classify(today or today_in_zone(), project.deadline)

    if status.is_overdue:
        service_logger.info("Deadline has passed, not notifying", extra={
            "project_id": project_id,
            "days_remaining": status.days_remaining
        })
        return NotificationOutcome(
            project_id,
            NotificationStatus.REJECTED,
            days_remaining=status.days_remaining,
            error=PAST_DEADLINE
        )

    if not status.is_due_soon:
        if not project.notification_scheduled:
            repository.update_project_notification_flags(db, project_id, scheduled=True)
        service_logger.info("Notification scheduled", extra={
            "project_id": project_id,
            "days_remaining": status.days_remaining
        })
        return NotificationOutcome(
            project_id,
            NotificationStatus.SCHEDULED,
            days_remaining=status.days_remaining
        )

    token = repository.claim_notification(db, project_id, settings.NOTIFICATION_CLAIM_TTL_SECONDS)
    if token is None:
        db.refresh(project)
        if project.notification_sent:
            return NotificationOutcome(project_id, NotificationStatus.ALREADY_SENT)
        service_logger.info("Notification already being dispatched", extra={"project_id": project_id})
        return NotificationOutcome(
            project_id,
            NotificationStatus.IN_PROGRESS,
            days_remaining=status.days_remaining
        )

    to = recipient or resolve_recipient(db, project)
    html = compose(project.title, project.client_name, project.deadline)
    subject = compose_subject(project.title, status.days_remaining)

    # Bounded well inside the claim TTL so the claim cannot lapse mid-send
    try:
        message_id = await asyncio.wait_for(
            transport.send(to, subject, html),
            timeout=settings.NOTIFICATION_SEND_TIMEOUT_SECONDS
        )
    except asyncio.TimeoutError:
        repository.release_notification_claim(db, project_id, token)
        service_logger.error("Notification send timed out", extra={
            "project_id": project_id,
            "timeout_seconds": settings.NOTIFICATION_SEND_TIMEOUT_SECONDS
        })
        return NotificationOutcome(
            project_id,
            NotificationStatus.FAILED,
            days_remaining=status.days_remaining,
            recipient=to,
            error=f"Send timed out after {settings.NOTIFICATION_SEND_TIMEOUT_SECONDS}s"
        )
    except TransportError as e:
        repository.release_notification_claim(db, project_id, token)
        return NotificationOutcome(
            project_id,
            NotificationStatus.FAILED,
            days_remaining=status.days_remaining,
            recipient=to,
            error=str(e)
        )
    except Exception:
        repository.release_notification_claim(db, project_id, token)
        raise

    outcome = NotificationOutcome(
        project_id,
        NotificationStatus.SENT,
        days_remaining=status.days_remaining,
        message_id=message_id,
        recipient=to
    )

    # The email is out; a failed write here is reported but not compensated
    try:
        marked = repository.mark_notification_sent(db, project_id, token)
    except SQLAlchemyError as e:
        db.rollback()
        service_logger.error("Notification sent but state update failed", extra={
            "project_id": project_id,
            "message_id": message_id,
            "error": str(e)
        })
        outcome.error = "Notification sent but state update failed"
        return outcome

    if not marked:
        service_logger.warning("Notification claim lost before state update", extra={
            "project_id": project_id,
            "message_id": message_id
        })
        outcome.error = "Notification sent but claim had expired"
        return outcome

    service_logger.info("Notification sent", extra={
        "project_id": project_id,
        "recipient": to,
        "message_id": message_id
    })
    return outcome


async def sweep_due(
    db: Session,
    transport,
    owner_id: Optional[str] = None,
    scheduled_only: bool = False,
    window_only: bool = False,
    today: Optional[date] = None,
    recipient: Optional[str] = None
) -> SweepResult:
    """Run the dispatcher over every pending project in scope.

    A failure on one project is recorded and the sweep moves on.
    """
    today = today or today_in_zone()

    if window_only:
        start, end = due_soon_window(today)
        projects = repository.find_projects_due_in_window(db, start, end, sent=False)
        if owner_id is not None:
            projects = [p for p in projects if p.owner_id == owner_id]
    else:
        projects = repository.find_pending_projects(db, owner_id=owner_id, scheduled_only=scheduled_only)

    result = SweepResult()
    for project in projects:
        project_id = project.id
        result.checked += 1
        try:
            outcome = await evaluate_and_notify(db, project, transport, today=today, recipient=recipient)
        except Exception as e:
            db.rollback()
            service_logger.error("Notification dispatch failed", extra={
                "project_id": project_id,
                "error": str(e)
            }, exc_info=True)
            outcome = NotificationOutcome(project_id, NotificationStatus.FAILED, error=str(e))

        if outcome.status == NotificationStatus.SENT:
            result.sent += 1
        elif outcome.status == NotificationStatus.FAILED:
            result.errors.append(project_id)
        result.results.append(outcome)

    service_logger.info("Deadline sweep finished", extra={
        "owner_id": owner_id,
        "checked": result.checked,
        "sent": result.sent,
        "error_count": len(result.errors)
    })
    return result


async def sweep_for_account(db: Session, transport, account: Account, today: Optional[date] = None) -> SweepResult:
    """Send reminders for the caller's scheduled projects that are now due"""
    return await sweep_due(
        db,
        transport,
        owner_id=account.id,
        scheduled_only=True,
        today=today,
        recipient=account.email
    )


async def sweep_all_due(db: Session, transport, today: Optional[date] = None) -> SweepResult:
    """Send reminders for every owner's projects falling due within the window"""
    return await sweep_due(db, transport, window_only=True, today=today)
