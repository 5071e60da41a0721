from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

from app.core.timeutils import to_naive_utc
from app.db.models.todo import TodoStatus


class FilterPresetFields(BaseModel):
    search_query: Optional[str] = None
    is_completed: Optional[bool] = None
    is_archived: Optional[bool] = None
    is_overdue: Optional[bool] = None
    hide_completed: Optional[bool] = None
    status: Optional[TodoStatus] = None
    priority: Optional[int] = Field(None, ge=0, le=2)
    category_ids: Optional[list[int]] = None
    tag_ids: Optional[list[int]] = None
    due_date_from: Optional[datetime] = None
    due_date_to: Optional[datetime] = None
    created_at_from: Optional[datetime] = None
    created_at_to: Optional[datetime] = None
    sort_by: Optional[str] = Field(None, max_length=20)
    sort_order: Optional[str] = Field(None, max_length=4)

    @field_validator("due_date_from", "due_date_to", "created_at_from", "created_at_to")
    @classmethod
    def _store_as_utc(cls, value):
        return to_naive_utc(value)

class FilterPresetCreate(FilterPresetFields):
    name: str = Field(..., max_length=100)

class FilterPresetUpdate(FilterPresetFields):
    name: Optional[str] = Field(None, max_length=100)

class FilterPresetOut(FilterPresetFields):
    id: int
    name: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }

class ApplyPresetRequest(BaseModel):
    page_number: Optional[int] = Field(None, ge=1)
    page_size: Optional[int] = Field(None, ge=1)
