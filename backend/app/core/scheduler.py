"""
Background scheduler for periodic tasks.

- Daily diary reminder: pushes a notification to every user who opted in
"""

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from app.core.config import settings
from app.core.database import SessionLocal
from app.services.notification_service import NotificationService
from app.storage.user_store import UserStore
import logging

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler(timezone="UTC")


def send_reminders_job() -> int:
    """
    Background job sending the daily reminder.

    Runs in its own session; failures are logged and never propagate into
    the scheduler thread.
    """
    db = SessionLocal()
    try:
        notifier = NotificationService.from_settings(settings)
        return notifier.send_reminders(UserStore(db))
    except Exception as e:
        logger.error(f"Error in send_reminders_job: {str(e)}")
        return 0
    finally:
        db.close()


def start_scheduler():
    """
    Start the background scheduler.

    Called from the FastAPI lifespan on startup.
    """
    if not settings.SCHEDULER_ENABLED:
        logger.info("Background scheduler disabled.")
        return

    if not scheduler.running:
        scheduler.add_job(
            send_reminders_job,
            trigger=CronTrigger(hour=settings.REMINDER_HOUR, minute=settings.REMINDER_MINUTE),
            id="send_diary_reminders",
            name="Send diary reminders",
            replace_existing=True
        )

        scheduler.start()
        logger.info(
            f"Background scheduler started. Reminders scheduled daily at "
            f"{settings.REMINDER_HOUR:02d}:{settings.REMINDER_MINUTE:02d} UTC."
        )


def stop_scheduler():
    """
    Stop the background scheduler.

    Called from the FastAPI lifespan on shutdown.
    """
    if scheduler.running:
        scheduler.shutdown()
        logger.info("Background scheduler stopped.")
