# app/core/events.py
"""
Outbox for real-time push events.

Services enqueue `OutboxEvent` rows inside their own transaction; the
scheduler's dispatcher job later hands them to a `RealtimePublisher`. A failed
delivery only bumps the attempt counter, it never reaches the request that
produced the event.
"""
import logging
from abc import ABC, abstractmethod
from datetime import datetime

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from app.core.timeutils import utcnow
from app.db.models.outbox_event import OutboxEvent

logger = logging.getLogger(__name__)


class RealtimePublisher(ABC):
    @abstractmethod
    def publish(self, group_key: str, event_name: str, payload: dict) -> None:
        ...


class LoggingRealtimePublisher(RealtimePublisher):
    def publish(self, group_key: str, event_name: str, payload: dict) -> None:
        logger.info("[push] %s -> %s %s", event_name, group_key, payload)


publisher: RealtimePublisher = LoggingRealtimePublisher()


def user_group(user_id: int) -> str:
    return f"user_{user_id}"


def todo_group(todo_id: int) -> str:
    return f"todo_{todo_id}"


def enqueue_event(db: Session, group_key: str, event_name: str, payload: dict) -> OutboxEvent:
    # Caller commits; the event lands together with the change that caused it
    event = OutboxEvent(group_key=group_key, event_name=event_name)
    event.payload = payload
    db.add(event)
    return event


def dispatch_pending_events(db: Session, target: RealtimePublisher, max_attempts: int, batch_size: int = 100) -> int:
    events = db.query(OutboxEvent).filter(
        OutboxEvent.delivered_at == None,
        OutboxEvent.attempts < max_attempts
    ).order_by(OutboxEvent.id).limit(batch_size).all()

    delivered = 0
    for event in events:
        event.attempts += 1
        try:
            target.publish(event.group_key, event.event_name, event.payload)
        except Exception as e:
            event.last_error = str(e)
            logger.warning(
                "Push delivery failed for event %s (%s, attempt %s): %s",
                event.id, event.event_name, event.attempts, e,
            )
            continue
        event.delivered_at = utcnow()
        delivered += 1

    db.commit()
    return delivered


def purge_outbox(db: Session, max_attempts: int, older_than: datetime) -> int:
    """Deletes delivered events and events that ran out of attempts before `older_than`."""
    purged = db.query(OutboxEvent).filter(
        or_(
            OutboxEvent.delivered_at < older_than,
            and_(
                OutboxEvent.delivered_at == None,
                OutboxEvent.attempts >= max_attempts,
                OutboxEvent.created_at < older_than
            )
        )
    ).delete(synchronize_session=False)
    db.commit()
    return purged
