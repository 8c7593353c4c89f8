# ============================================================================
# FILE: vibeshare/core/scheduler.py
# Periodic maintenance jobs
# ============================================================================
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from vibeshare.config import settings
from vibeshare.db.session import SessionLocal
from vibeshare.services.notification_service import notification_service
import logging

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler(
    job_defaults={"coalesce": True, "max_instances": 1},
    timezone="UTC",
)

def sweep_notifications_job():
    db = SessionLocal()
    try:
        notification_service.sweep_expired_notifications(db)
    except Exception as e:
        logger.error(f"Scheduled notification sweep failed: {e}")
    finally:
        db.close()

def start_scheduler() -> bool:
    interval = settings.NOTIFICATION_SWEEP_INTERVAL_SECONDS
    if interval <= 0:
        logger.info("Notification sweep job disabled")
        return False
    scheduler.add_job(
        sweep_notifications_job,
        IntervalTrigger(seconds=interval),
        id="sweep_notifications",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(f"Scheduler started (notification sweep every {interval}s)")
    return True

def shutdown_scheduler() -> None:
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
