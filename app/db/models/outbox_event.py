import json

from sqlalchemy import Column, Integer, String, DateTime, Text
from app.core.timeutils import utcnow
from app.db.session import Base

class OutboxEvent(Base):
    """A push notification waiting to be delivered by the dispatcher job."""

    __tablename__ = "outbox_events"

    id = Column(Integer, primary_key=True, index=True)
    group_key = Column(String(100), nullable=False)
    event_name = Column(String(100), nullable=False)
    payload_json = Column("payload", Text, nullable=False, default="{}")

    attempts = Column(Integer, default=0, nullable=False)
    last_error = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    delivered_at = Column(DateTime, nullable=True, index=True)

    @property
    def payload(self) -> dict:
        return json.loads(self.payload_json)

    @payload.setter
    def payload(self, value: dict):
        self.payload_json = json.dumps(value, default=str)
