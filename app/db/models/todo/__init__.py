# app/db/models/todo/__init__.py
from .todo import Todo, TodoStatus
from .category import Category
from .tag import Tag
from .todo_category import TodoCategory
from .todo_tag import TodoTag
from .share import TodoShare, SharePermission
from .comment import TodoComment
from .activity import TodoActivity, ActivityType
from .filter_preset import FilterPreset

__all__ = [
    "Todo", "TodoStatus", "Category", "Tag", "TodoCategory", "TodoTag",
    "TodoShare", "SharePermission", "TodoComment", "TodoActivity", "ActivityType",
    "FilterPreset",
]
