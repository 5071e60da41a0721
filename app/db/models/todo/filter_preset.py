import json

from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, DateTime, Text
from sqlalchemy.orm import relationship
from app.core.timeutils import utcnow
from app.db.session import Base


def _load_ids(raw):
    return json.loads(raw) if raw is not None else None


def _dump_ids(ids):
    return json.dumps(list(ids)) if ids is not None else None


class FilterPreset(Base):
    __tablename__ = "filter_presets"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)

    search_query = Column(String, nullable=True)
    is_completed = Column(Boolean, nullable=True)
    is_archived = Column(Boolean, nullable=True)
    is_overdue = Column(Boolean, nullable=True)
    hide_completed = Column(Boolean, nullable=True)
    status = Column(String(20), nullable=True)
    priority = Column(Integer, nullable=True)
    category_ids_json = Column("category_ids", Text, nullable=True)  # JSON array
    tag_ids_json = Column("tag_ids", Text, nullable=True)  # JSON array
    due_date_from = Column(DateTime, nullable=True)
    due_date_to = Column(DateTime, nullable=True)
    created_at_from = Column(DateTime, nullable=True)
    created_at_to = Column(DateTime, nullable=True)
    sort_by = Column(String(20), nullable=True)
    sort_order = Column(String(4), nullable=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, nullable=True)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    user = relationship("User", back_populates="filter_presets")

    @property
    def category_ids(self):
        return _load_ids(self.category_ids_json)

    @category_ids.setter
    def category_ids(self, ids):
        self.category_ids_json = _dump_ids(ids)

    @property
    def tag_ids(self):
        return _load_ids(self.tag_ids_json)

    @tag_ids.setter
    def tag_ids(self, ids):
        self.tag_ids_json = _dump_ids(ids)
