from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

from app.config import settings
from app.core.timeutils import to_naive_utc
from app.db.models.todo.todo import TodoStatus
from app.api.todo.category.schemas import CategoryOut
from app.api.todo.tag.schemas import TagOut


class TodoBase(BaseModel):
    title: str = Field(..., max_length=500)
    description: Optional[str] = Field(None, max_length=2000)
    due_date: Optional[datetime] = None          # 🗓 Due Date
    reminder_date: Optional[datetime] = None     # ⏰ Reminder
    priority: int = Field(0, ge=0, le=2)         # 0 = low, 1 = medium, 2 = high

    @field_validator("due_date", "reminder_date")
    @classmethod
    def _store_as_utc(cls, value):
        return to_naive_utc(value)

class TodoCreate(TodoBase):
    category_ids: list[int] = []
    tag_ids: list[int] = []

class TodoUpdate(BaseModel):
    # Only fields present in the payload are applied (model_fields_set).
    # An explicit [] for category_ids / tag_ids clears the associations.
    title: Optional[str] = Field(None, max_length=500)
    description: Optional[str] = Field(None, max_length=2000)
    is_completed: Optional[bool] = None
    due_date: Optional[datetime] = None
    reminder_date: Optional[datetime] = None
    priority: Optional[int] = Field(None, ge=0, le=2)
    category_ids: Optional[list[int]] = None
    tag_ids: Optional[list[int]] = None

    @field_validator("due_date", "reminder_date")
    @classmethod
    def _store_as_utc(cls, value):
        return to_naive_utc(value)

class TodoOut(BaseModel):
    id: int
    user_id: int
    title: str
    description: Optional[str] = None
    status: TodoStatus
    is_completed: bool
    is_archived: bool
    priority: int
    display_order: int
    due_date: Optional[datetime] = None
    reminder_date: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    archived_at: Optional[datetime] = None

    # Derived at read time
    is_overdue: bool
    is_approaching_due: bool

    categories: list[CategoryOut] = []
    tags: list[TagOut] = []

    model_config = {
        "from_attributes": True
    }


# -------------------------------
# Search / Filter
# -------------------------------

class SearchFilterRequest(BaseModel):
    search_query: Optional[str] = None
    is_completed: Optional[bool] = None
    is_archived: Optional[bool] = None
    status: Optional[TodoStatus] = None
    is_overdue: Optional[bool] = None
    hide_completed: Optional[bool] = None
    priority: Optional[int] = None
    category_ids: Optional[list[int]] = None
    tag_ids: Optional[list[int]] = None
    due_date_from: Optional[datetime] = None
    due_date_to: Optional[datetime] = None
    created_at_from: Optional[datetime] = None
    created_at_to: Optional[datetime] = None
    sort_by: Optional[str] = None      # "title", "priority", "dueDate", "createdAt"
    sort_order: Optional[str] = None   # "asc", "desc"
    page_number: int = Field(1, ge=1)
    page_size: int = Field(settings.DEFAULT_PAGE_SIZE, ge=1)

    @field_validator("due_date_from", "due_date_to", "created_at_from", "created_at_to")
    @classmethod
    def _store_as_utc(cls, value):
        return to_naive_utc(value)

class SearchFilterResponse(BaseModel):
    todos: list[TodoOut]
    total_count: int
    page_number: int
    page_size: int
    total_pages: int


# -------------------------------
# Bulk / Ordering / Statistics
# -------------------------------

class BulkTodoRequest(BaseModel):
    todo_ids: list[int]
    is_completed: bool

class BulkTodoResult(BaseModel):
    updated: int

class TodoOrderItem(BaseModel):
    todo_id: int
    display_order: int

class ReorderTodosRequest(BaseModel):
    todo_orders: list[TodoOrderItem]

class TodoStatistics(BaseModel):
    total_todos: int = 0
    completed_todos: int = 0
    pending_todos: int = 0
    archived_todos: int = 0
    overdue_todos: int = 0
    high_priority_todos: int = 0
    medium_priority_todos: int = 0
    low_priority_todos: int = 0
    completion_rate: float = 0.0
    completion_by_date: dict[str, int] = {}
