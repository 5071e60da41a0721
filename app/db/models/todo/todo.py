import enum
from datetime import timedelta

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Enum
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import relationship
from app.core.timeutils import utcnow
from app.db.session import Base

APPROACHING_DUE_WINDOW = timedelta(days=3)


class TodoStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    ARCHIVED = "archived"


# Archived todos were completed before being archived
_DONE_STATES = (TodoStatus.COMPLETED, TodoStatus.ARCHIVED)


class Todo(Base):
    __tablename__ = "todos"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(500), nullable=False)
    description = Column(String(2000), nullable=True)
    status = Column(Enum(TodoStatus, name="todo_status"), default=TodoStatus.PENDING, nullable=False, index=True)
    priority = Column(Integer, default=0)  # 0 = low, 1 = medium, 2 = high
    display_order = Column(Integer, default=0)

    due_date = Column(DateTime, nullable=True)
    reminder_date = Column(DateTime, nullable=True)
    overdue_notified_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    archived_at = Column(DateTime, nullable=True)

    # Foreign Keys
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Relationships
    user = relationship("User", back_populates="todos")
    todo_categories = relationship("TodoCategory", back_populates="todo", cascade="all, delete-orphan")
    todo_tags = relationship("TodoTag", back_populates="todo", cascade="all, delete-orphan")
    shares = relationship("TodoShare", back_populates="todo", cascade="all, delete-orphan")
    comments = relationship("TodoComment", back_populates="todo", cascade="all, delete-orphan")
    activities = relationship("TodoActivity", back_populates="todo", cascade="all, delete-orphan")

    @hybrid_property
    def is_completed(self):
        return self.status in _DONE_STATES

    @is_completed.expression
    def is_completed(cls):
        return cls.status.in_(_DONE_STATES)

    @hybrid_property
    def is_archived(self):
        return self.status == TodoStatus.ARCHIVED

    @property
    def categories(self):
        return [tc.category for tc in self.todo_categories]

    @property
    def tags(self):
        return [tt.tag for tt in self.todo_tags]

    @property
    def is_overdue(self) -> bool:
        return self.due_date is not None and not self.is_completed and self.due_date < utcnow()

    @property
    def is_approaching_due(self) -> bool:
        if self.due_date is None or self.is_completed:
            return False
        now = utcnow()
        return now <= self.due_date <= now + APPROACHING_DUE_WINDOW

    # State transitions

    def mark_completed(self, now):
        self.status = TodoStatus.COMPLETED
        self.completed_at = now
        self.archived_at = None

    def mark_pending(self):
        self.status = TodoStatus.PENDING
        self.completed_at = None
        self.archived_at = None

    def archive(self, now):
        self.status = TodoStatus.ARCHIVED
        self.archived_at = now
