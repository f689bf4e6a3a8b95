# backend/task_tracker/scheduler.py
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from .config import settings
from .database import SessionLocal
from .services.mailer import get_mail_transport
from .services.notifications import sweep_all_due
from .utils.logging import scheduler_logger

JOB_ID = "check_deadlines"

# Guards against starting the scheduler twice (reload, repeated lifespan)
_scheduler: Optional[AsyncIOScheduler] = None


def start_scheduler() -> Optional[AsyncIOScheduler]:
    global _scheduler

    if not settings.ENABLE_SCHEDULER:
        scheduler_logger.info("Scheduler disabled via settings (ENABLE_SCHEDULER=False)")
        return None

    if _scheduler is not None:
        scheduler_logger.info("Scheduler already running, skipping initialization")
        return _scheduler

    _scheduler = AsyncIOScheduler(timezone=settings.REMINDER_TIMEZONE)
    _scheduler.add_job(
        run_deadline_sweep,
        trigger="interval",
        minutes=settings.SCHEDULER_INTERVAL_MINUTES,
        id=JOB_ID,
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    _scheduler.start()

    scheduler_logger.info("Scheduler started", extra={
        "job_id": JOB_ID,
        "interval_minutes": settings.SCHEDULER_INTERVAL_MINUTES
    })
    return _scheduler


def shutdown_scheduler() -> None:
    global _scheduler

    if _scheduler is None:
        return
    _scheduler.shutdown(wait=False)
    _scheduler = None
    scheduler_logger.info("Scheduler stopped")


async def run_deadline_sweep():
    """Job body: one global sweep on a fresh session"""
    db = SessionLocal()
    try:
        result = await sweep_all_due(db, get_mail_transport())
        scheduler_logger.info("Scheduled deadline sweep complete", extra={
            "checked": result.checked,
            "sent": result.sent,
            "errors": result.errors
        })
        return result
    except Exception as e:
        scheduler_logger.error("Scheduled deadline sweep failed", extra={"error": str(e)}, exc_info=True)
        return None
    finally:
        db.close()
