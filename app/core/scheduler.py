# app/core/scheduler.py

import logging
from datetime import timedelta

from apscheduler.schedulers.background import BackgroundScheduler
from sqlalchemy.orm import Session

from app.config import settings
from app.core import events, notifications
from app.core.reminders import process_reminders
from app.core.timeutils import utcnow
from app.db.session import SessionLocal

logger = logging.getLogger(__name__)

# Initialize the scheduler
scheduler = BackgroundScheduler()


# ---------------------------
# Todo Reminders / Overdue Notices
# ---------------------------

@scheduler.scheduled_job("interval", minutes=settings.REMINDER_INTERVAL_MINUTES, id="todo_reminders")
def run_reminder_tick():
    db: Session = SessionLocal()
    try:
        process_reminders(db, notifications.notifier)
    except Exception:
        # Next tick runs regardless
        logger.exception("Error processing reminders")
        db.rollback()
    finally:
        db.close()

# ---------------------------
# Deliver Queued Push Events
# ---------------------------

@scheduler.scheduled_job("interval", seconds=settings.OUTBOX_DISPATCH_INTERVAL_SECONDS, id="outbox_dispatch")
def run_outbox_dispatch():
    db: Session = SessionLocal()
    try:
        delivered = events.dispatch_pending_events(db, events.publisher, settings.OUTBOX_MAX_ATTEMPTS)
        if delivered:
            logger.debug("Delivered %s push events", delivered)

        cutoff = utcnow() - timedelta(hours=settings.OUTBOX_RETENTION_HOURS)
        purged = events.purge_outbox(db, settings.OUTBOX_MAX_ATTEMPTS, cutoff)
        if purged:
            logger.info("Purged %s old push events", purged)
    except Exception:
        logger.exception("Error dispatching push events")
        db.rollback()
    finally:
        db.close()

# ---------------------------
# Start / Stop Scheduler
# ---------------------------

def start_scheduler():
    scheduler.start()
    logger.info("Background Scheduler started...")


def shutdown_scheduler():
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Background Scheduler stopped")
