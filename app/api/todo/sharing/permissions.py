# app/api/todo/sharing/permissions.py
"""
Who may do what with a todo.

The owner always holds admin rights. Anyone else holds exactly the permission
on their share row, or nothing at all.
"""
from typing import Optional

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.db.models.todo import SharePermission, Todo, TodoShare


def get_share(db: Session, todo_id: int, user_id: int) -> Optional[TodoShare]:
    return db.query(TodoShare).filter(
        TodoShare.todo_id == todo_id,
        TodoShare.shared_with_user_id == user_id
    ).first()


def permission_of(db: Session, todo_id: int, user_id: int) -> Optional[SharePermission]:
    todo = db.get(Todo, todo_id)
    if todo is None:
        return None
    if todo.user_id == user_id:
        return SharePermission.ADMIN

    share = get_share(db, todo_id, user_id)
    return share.permission if share else None


def can_access(db: Session, todo_id: int, user_id: int) -> bool:
    return permission_of(db, todo_id, user_id) is not None


def has_admin_rights(db: Session, todo: Todo, user_id: int) -> bool:
    if todo.user_id == user_id:
        return True
    share = get_share(db, todo.id, user_id)
    return share is not None and share.permission == SharePermission.ADMIN


def require_access(db: Session, todo_id: int, user_id: int) -> Todo:
    """Loads a todo the caller can see; anything else looks like a missing todo."""
    todo = db.get(Todo, todo_id)
    if todo is None or not can_access(db, todo_id, user_id):
        raise NotFoundError("Todo not found")
    return todo
