# app/core/reminders.py
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from app.config import settings
from app.core.notifications import NotificationSender
from app.core.timeutils import utcnow
from app.db.models.todo import Todo, TodoStatus

logger = logging.getLogger(__name__)


@dataclass
class ReminderRunResult:
    reminders_sent: int = 0
    overdue_notified: int = 0
    failures: int = 0


def _notify(send, todo: Todo) -> bool:
    try:
        send(todo, todo.user)
        return True
    except Exception as e:
        logger.warning("Notification for todo %s failed: %s", todo.id, e)
        return False


def process_reminders(
    db: Session,
    notifier: NotificationSender,
    now: Optional[datetime] = None,
    window_minutes: Optional[int] = None,
    renotify_overdue: Optional[bool] = None,
) -> ReminderRunResult:
    """
    One poller tick.

    Reminders falling inside the upcoming window fire once, then the reminder
    date is cleared. Overdue todos are reported on every tick unless
    `renotify_overdue` is off, in which case each todo is reported once until
    its due date changes.
    """
    now = now or utcnow()
    if window_minutes is None:
        window_minutes = settings.REMINDER_WINDOW_MINUTES
    if renotify_overdue is None:
        renotify_overdue = settings.OVERDUE_RENOTIFY_EVERY_TICK
    window_end = now + timedelta(minutes=window_minutes)
    result = ReminderRunResult()

    todos_to_remind = db.query(Todo).options(joinedload(Todo.user)).filter(
        Todo.status == TodoStatus.PENDING,
        Todo.reminder_date != None,
        Todo.reminder_date >= now,
        Todo.reminder_date <= window_end,
        or_(Todo.due_date == None, Todo.due_date >= now)
    ).all()

    for todo in todos_to_remind:
        if _notify(notifier.send_reminder, todo):
            result.reminders_sent += 1
        else:
            result.failures += 1
        # Fires at most once, even when delivery failed
        todo.reminder_date = None

    overdue_query = db.query(Todo).options(joinedload(Todo.user)).filter(
        Todo.status == TodoStatus.PENDING,
        Todo.due_date != None,
        Todo.due_date < now
    )
    if not renotify_overdue:
        overdue_query = overdue_query.filter(Todo.overdue_notified_at == None)

    for todo in overdue_query.all():
        if _notify(notifier.send_overdue, todo):
            result.overdue_notified += 1
            if not renotify_overdue:
                todo.overdue_notified_at = now
        else:
            result.failures += 1

    db.commit()

    if result.reminders_sent or result.overdue_notified:
        logger.info(
            "Processed %s reminders and %s overdue notifications",
            result.reminders_sent, result.overdue_notified,
        )
    return result
