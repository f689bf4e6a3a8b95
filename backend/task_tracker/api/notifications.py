# backend/task_tracker/api/notifications.py
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from .. import repository
from ..database import get_db
from ..models import Account
from ..schemas.notification import NotificationOutcome, NotificationRequest, SweepResult
from ..security import get_current_account
from ..services.mailer import get_mail_transport
from ..services.notifications import NotificationStatus, evaluate_and_notify, sweep_for_account
from ..utils.logging import api_logger

router = APIRouter(prefix="/api/notifications", tags=["notifications"])

STATUS_CODES = {
    NotificationStatus.REJECTED: 400,
    NotificationStatus.FAILED: 502,
}


@router.post("", response_model=NotificationOutcome)
async def notify_project(
    payload: NotificationRequest,
    db: Session = Depends(get_db),
    current_account: Account = Depends(get_current_account),
    transport=Depends(get_mail_transport)
):
    """Send or schedule the deadline reminder for one project"""
    api_logger.info("Notification requested", extra={"project_id": payload.project_id})

    project = repository.find_project_by_id(db, payload.project_id, current_account.id)
    if not project:
        api_logger.warning("Project not found for notification", extra={"project_id": payload.project_id})
        raise HTTPException(status_code=404, detail="Project not found or unauthorized")

    outcome = await evaluate_and_notify(db, project, transport, recipient=current_account.email)
    body = NotificationOutcome.model_validate(outcome)

    api_logger.info("Notification request handled", extra={
        "project_id": project.id,
        "status": outcome.status.value
    })
    if outcome.status in STATUS_CODES:
        return JSONResponse(status_code=STATUS_CODES[outcome.status], content=body.model_dump(mode="json"))
    return body


@router.get("", response_model=SweepResult)
async def check_my_notifications(
    db: Session = Depends(get_db),
    current_account: Account = Depends(get_current_account),
    transport=Depends(get_mail_transport)
):
    """Send any scheduled reminders of the caller that are now due"""
    result = await sweep_for_account(db, transport, current_account)
    api_logger.info("Account notification sweep complete", extra={
        "account_id": current_account.id,
        "checked": result.checked,
        "sent": result.sent
    })
    return SweepResult.model_validate(result)
