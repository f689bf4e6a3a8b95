# backend/task_tracker/api/deadlines.py
import hmac
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..schemas.notification import SweepResult
from ..services.mailer import get_mail_transport
from ..services.notifications import sweep_all_due
from ..utils.logging import api_logger

router = APIRouter(prefix="/api/check-deadlines", tags=["notifications"])


def verify_cron_secret(authorization: Optional[str] = Header(default=None)) -> None:
    """Require `Bearer <CRON_SECRET>` when a secret is configured"""
    if not settings.CRON_SECRET:
        return
    expected = f"Bearer {settings.CRON_SECRET}"
    if not authorization or not hmac.compare_digest(authorization.encode(), expected.encode()):
        api_logger.warning("Rejected check-deadlines call with bad secret")
        raise HTTPException(status_code=401, detail="Unauthorized")


@router.get("", response_model=SweepResult, dependencies=[Depends(verify_cron_secret)])
async def check_deadlines(db: Session = Depends(get_db), transport=Depends(get_mail_transport)):
    """Send reminders for all owners' projects due within the window"""
    result = await sweep_all_due(db, transport)
    api_logger.info("Global deadline sweep complete", extra={
        "checked": result.checked,
        "sent": result.sent,
        "errors": result.errors
    })
    return SweepResult.model_validate(result)
