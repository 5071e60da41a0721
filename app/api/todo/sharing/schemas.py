from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from app.db.models.todo import ActivityType, SharePermission
from app.api.todo.item.schemas import TodoOut


class ShareTodoRequest(BaseModel):
    todo_id: int
    shared_with_user_id: int
    permission: SharePermission = SharePermission.VIEW_ONLY
    is_assigned: bool = False

class UpdateSharePermissionRequest(BaseModel):
    permission: SharePermission

class TodoShareOut(BaseModel):
    id: int
    todo_id: int
    shared_with_user_id: int
    shared_with_user_email: str
    shared_with_user_name: Optional[str] = None
    shared_by_user_id: int
    shared_by_user_email: str
    permission: SharePermission
    is_assigned: bool
    created_at: datetime

    @classmethod
    def from_share(cls, share) -> "TodoShareOut":
        return cls(
            id=share.id,
            todo_id=share.todo_id,
            shared_with_user_id=share.shared_with_user_id,
            shared_with_user_email=share.shared_with_user.email,
            shared_with_user_name=share.shared_with_user.full_name or None,
            shared_by_user_id=share.shared_by_user_id,
            shared_by_user_email=share.shared_by_user.email,
            permission=share.permission,
            is_assigned=bool(share.is_assigned),
            created_at=share.created_at,
        )

class SharedTodoOut(TodoOut):
    owner_user_id: int
    owner_email: str
    owner_name: Optional[str] = None
    user_permission: Optional[SharePermission] = None
    is_assigned_to_user: bool = False
    shared_with: list[TodoShareOut] = []

class ActivityOut(BaseModel):
    id: int
    todo_id: int
    user_id: int
    user_email: str
    user_name: Optional[str] = None
    activity_type: ActivityType
    description: Optional[str] = None
    related_user_id: Optional[int] = None
    related_user_email: Optional[str] = None
    related_user_name: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_activity(cls, activity) -> "ActivityOut":
        related = activity.related_user
        return cls(
            id=activity.id,
            todo_id=activity.todo_id,
            user_id=activity.user_id,
            user_email=activity.user.email,
            user_name=activity.user.full_name or None,
            activity_type=activity.activity_type,
            description=activity.description,
            related_user_id=activity.related_user_id,
            related_user_email=related.email if related else None,
            related_user_name=(related.full_name or None) if related else None,
            created_at=activity.created_at,
        )
