# backend/task_tracker/repository.py
"""Queries and writes for accounts, projects and tasks.

Project queries take an ``owner_id`` wherever the caller is an authenticated
account. Only the global deadline sweep reads across owners.

The notification flags are only ever set to true. Sending is guarded by a
claim token: a dispatch must win :func:`claim_notification` (a single
conditional UPDATE) before it may send, and only the holder of the claim can
mark the project as sent.
"""
import uuid
from datetime import date, timedelta
from typing import List, Optional

from sqlalchemy import update, or_
from sqlalchemy.orm import Session

from .database import utcnow
from .models import Account, Project, Task, TaskStatus
from .utils.logging import db_logger


# Accounts

def find_account_by_email(db: Session, email: str) -> Optional[Account]:
    return db.query(Account).filter(Account.email == email.lower()).first()


def insert_account(db: Session, email: str, hashed_password: str) -> Account:
    account = Account(email=email.lower(), hashed_password=hashed_password)
    db.add(account)
    db.commit()
    db.refresh(account)
    return account


def resolve_email_for_account(db: Session, account_id: str) -> Optional[str]:
    account = db.query(Account).filter(Account.id == account_id).first()
    return account.email if account else None


# Projects

def insert_project(db: Session, owner_id: str, title: str, client_name: str, deadline: date) -> Project:
    project = Project(
        owner_id=owner_id,
        title=title,
        client_name=client_name,
        deadline=deadline,
        notification_sent=False,
        notification_scheduled=False
    )
    db.add(project)
    db.commit()
    db.refresh(project)
    return project


def list_projects_for_owner(db: Session, owner_id: str) -> List[Project]:
    return (
        db.query(Project)
        .filter(Project.owner_id == owner_id)
        .order_by(Project.created_at.desc())
        .all()
    )


def find_project_by_id(db: Session, project_id: str, owner_id: str) -> Optional[Project]:
    return (
        db.query(Project)
        .filter(Project.id == project_id, Project.owner_id == owner_id)
        .first()
    )


def find_projects_due_in_window(db: Session, start: date, end: date, sent: bool = False) -> List[Project]:
    return (
        db.query(Project)
        .filter(
            Project.deadline >= start,
            Project.deadline <= end,
            Project.notification_sent == sent
        )
        .order_by(Project.deadline.asc(), Project.created_at.asc())
        .all()
    )


def find_pending_projects(db: Session, owner_id: Optional[str] = None, scheduled_only: bool = False) -> List[Project]:
    """Projects that have not had their reminder sent yet"""
    query = db.query(Project).filter(Project.notification_sent.is_(False))
    if owner_id is not None:
        query = query.filter(Project.owner_id == owner_id)
    if scheduled_only:
        query = query.filter(Project.notification_scheduled.is_(True))
    return query.order_by(Project.deadline.asc(), Project.created_at.asc()).all()


def update_project_notification_flags(
    db: Session,
    project_id: str,
    sent: Optional[bool] = None,
    scheduled: Optional[bool] = None
) -> Optional[Project]:
    """Raise notification flags on a project; flags are never lowered"""
    if sent is False or scheduled is False:
        raise ValueError("Notification flags cannot be reset")

    values = {}
    if sent:
        values["notification_sent"] = True
        values["notification_scheduled"] = True
    if scheduled:
        values["notification_scheduled"] = True

    project = db.query(Project).filter(Project.id == project_id).first()
    if not project:
        return None
    if not values:
        return project

    db.execute(update(Project).where(Project.id == project_id).values(**values))
    db.commit()
    db.refresh(project)
    db_logger.info("Updated notification flags", extra={"project_id": project_id, **values})
    return project


def claim_notification(db: Session, project_id: str, ttl_seconds: int) -> Optional[str]:
    """Atomically reserve a project for sending.

    Returns the claim token, or None if the reminder was already sent or
    another dispatch holds an unexpired claim.
    """
    token = str(uuid.uuid4())
    now = utcnow()
    stale_before = now - timedelta(seconds=ttl_seconds)
    result = db.execute(
        update(Project)
        .where(
            Project.id == project_id,
            Project.notification_sent.is_(False),
            or_(
                Project.notification_claim.is_(None),
                Project.notification_claimed_at < stale_before
            )
        )
        .values(notification_claim=token, notification_claimed_at=now)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    if result.rowcount != 1:
        return None
    return token


def mark_notification_sent(db: Session, project_id: str, token: str) -> bool:
    result = db.execute(
        update(Project)
        .where(Project.id == project_id, Project.notification_claim == token)
        .values(
            notification_sent=True,
            notification_scheduled=True,
            notification_claim=None,
            notification_claimed_at=None
        )
        .execution_options(synchronize_session=False)
    )
    db.commit()
    return result.rowcount == 1


def release_notification_claim(db: Session, project_id: str, token: str) -> None:
    db.execute(
        update(Project)
        .where(Project.id == project_id, Project.notification_claim == token)
        .values(notification_claim=None, notification_claimed_at=None)
        .execution_options(synchronize_session=False)
    )
    db.commit()


# Tasks

def find_tasks_for_project(db: Session, project_id: str) -> List[Task]:
    return (
        db.query(Task)
        .filter(Task.project_id == project_id)
        .order_by(Task.created_at.desc())
        .all()
    )


def list_tasks_for_owner(db: Session, owner_id: str, project_id: Optional[str] = None) -> List[Task]:
    query = db.query(Task).join(Project, Task.project_id == Project.id).filter(Project.owner_id == owner_id)
    if project_id:
        query = query.filter(Task.project_id == project_id)
    return query.order_by(Task.created_at.desc()).all()


def find_task_by_id(db: Session, task_id: str) -> Optional[Task]:
    return db.query(Task).filter(Task.id == task_id).first()


def insert_task(db: Session, project_id: str, name: str, status: TaskStatus = TaskStatus.TODO) -> Task:
    task = Task(project_id=project_id, name=name, status=status)
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def update_task(db: Session, task: Task, **fields) -> Task:
    for field, value in fields.items():
        setattr(task, field, value)
    task.updated_at = utcnow()
    db.commit()
    db.refresh(task)
    return task


def delete_task(db: Session, task: Task) -> None:
    db.delete(task)
    db.commit()
