import enum

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Enum
from sqlalchemy.orm import relationship
from app.core.timeutils import utcnow
from app.db.session import Base


class ActivityType(str, enum.Enum):
    CREATED = "created"
    UPDATED = "updated"
    COMPLETED = "completed"
    UNCOMPLETED = "uncompleted"
    DELETED = "deleted"
    SHARED = "shared"
    UNSHARED = "unshared"
    ASSIGNED = "assigned"
    UNASSIGNED = "unassigned"
    COMMENT_ADDED = "comment_added"
    PERMISSION_CHANGED = "permission_changed"


class TodoActivity(Base):
    """Append-only audit row. Never updated once written."""

    __tablename__ = "todo_activities"

    id = Column(Integer, primary_key=True, index=True)
    activity_type = Column(Enum(ActivityType, name="activity_type"), nullable=False)
    description = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=utcnow, index=True)

    # Foreign Keys
    todo_id = Column(Integer, ForeignKey("todos.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    related_user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    # Relationships
    todo = relationship("Todo", back_populates="activities")
    user = relationship("User", foreign_keys=[user_id])
    related_user = relationship("User", foreign_keys=[related_user_id])
