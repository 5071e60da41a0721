import enum

from sqlalchemy import Column, Integer, Boolean, ForeignKey, DateTime, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from app.core.timeutils import utcnow
from app.db.session import Base


class SharePermission(str, enum.Enum):
    VIEW_ONLY = "view_only"
    EDIT = "edit"
    ADMIN = "admin"


class TodoShare(Base):
    __tablename__ = "todo_shares"
    __table_args__ = (
        UniqueConstraint("todo_id", "shared_with_user_id", name="uq_todo_share_target"),
    )

    id = Column(Integer, primary_key=True, index=True)
    permission = Column(Enum(SharePermission, name="share_permission"), default=SharePermission.VIEW_ONLY, nullable=False)
    is_assigned = Column(Boolean, default=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, nullable=True)

    # Foreign Keys
    todo_id = Column(Integer, ForeignKey("todos.id", ondelete="CASCADE"), nullable=False, index=True)
    shared_with_user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    shared_by_user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    # Relationships
    todo = relationship("Todo", back_populates="shares")
    shared_with_user = relationship("User", foreign_keys=[shared_with_user_id])
    shared_by_user = relationship("User", foreign_keys=[shared_by_user_id])
