from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class CommentCreate(BaseModel):
    todo_id: int
    comment: str = Field(..., max_length=5000)

class CommentUpdate(BaseModel):
    comment: str = Field(..., max_length=5000)

class CommentOut(BaseModel):
    id: int
    todo_id: int
    user_id: int
    user_email: str
    user_name: Optional[str] = None
    comment: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_comment(cls, db_comment) -> "CommentOut":
        return cls(
            id=db_comment.id,
            todo_id=db_comment.todo_id,
            user_id=db_comment.user_id,
            user_email=db_comment.user.email,
            user_name=db_comment.user.full_name or None,
            comment=db_comment.comment,
            created_at=db_comment.created_at,
            updated_at=db_comment.updated_at,
        )
