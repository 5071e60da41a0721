import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

from app.core import events
from app.core.exceptions import ConflictError, NotFoundError, PermissionDeniedError
from app.core.timeutils import utcnow
from app.db.models.todo import (
    ActivityType, SharePermission, Todo, TodoActivity, TodoCategory, TodoShare, TodoTag,
)
from app.db.models.user import User
from app.api.todo.item.schemas import TodoOut
from . import schemas
from .permissions import can_access, get_share, has_admin_rights, require_access

logger = logging.getLogger(__name__)

_ALREADY_SHARED = "Todo is already shared with this user"


# -------------------------------
# Activity log
# -------------------------------

def log_activity(
    db: Session,
    todo_id: int,
    user_id: int,
    activity_type: ActivityType,
    description: Optional[str] = None,
    related_user_id: Optional[int] = None,
) -> TodoActivity:
    # Joins the caller's transaction; the caller commits
    activity = TodoActivity(
        todo_id=todo_id,
        user_id=user_id,
        activity_type=activity_type,
        description=description,
        related_user_id=related_user_id,
        created_at=utcnow(),
    )
    db.add(activity)
    return activity

def list_activity(db: Session, todo_id: int, acting_user_id: int) -> list[schemas.ActivityOut]:
    if not can_access(db, todo_id, acting_user_id):
        raise NotFoundError("Todo not found")

    activities = db.query(TodoActivity).options(
        joinedload(TodoActivity.user),
        joinedload(TodoActivity.related_user)
    ).filter(TodoActivity.todo_id == todo_id).order_by(
        TodoActivity.created_at.desc(), TodoActivity.id.desc()
    ).all()
    return [schemas.ActivityOut.from_activity(a) for a in activities]


# -------------------------------
# Share / Unshare
# -------------------------------

def share_todo(db: Session, request: schemas.ShareTodoRequest, acting_user_id: int) -> schemas.TodoShareOut:
    todo = require_access(db, request.todo_id, acting_user_id)
    if todo.user_id != acting_user_id:
        raise PermissionDeniedError("Only the owner can share this todo")

    target = db.get(User, request.shared_with_user_id)
    if target is None:
        raise NotFoundError("User not found")
    if target.id == acting_user_id:
        raise ConflictError("Cannot share a todo with yourself")
    if get_share(db, todo.id, target.id):
        raise ConflictError(_ALREADY_SHARED)

    share = TodoShare(
        todo_id=todo.id,
        shared_with_user_id=target.id,
        shared_by_user_id=acting_user_id,
        permission=request.permission,
        is_assigned=request.is_assigned,
        created_at=utcnow(),
    )
    db.add(share)

    if request.is_assigned:
        log_activity(db, todo.id, acting_user_id, ActivityType.ASSIGNED,
                     f"Assigned to {target.email}", related_user_id=target.id)
    else:
        log_activity(db, todo.id, acting_user_id, ActivityType.SHARED,
                     f"Shared with {target.email} ({request.permission.value} permission)",
                     related_user_id=target.id)

    events.enqueue_event(db, events.user_group(target.id), "TodoShared",
                         {"todoId": todo.id, "sharedBy": acting_user_id})
    events.enqueue_event(db, events.todo_group(todo.id), "TodoUpdated",
                         {"todoId": todo.id, "action": "shared"})
    try:
        db.commit()
    except IntegrityError:
        # A concurrent share of the same pair won the unique constraint
        db.rollback()
        logger.info("Duplicate share of todo %s with user %s rejected", request.todo_id, request.shared_with_user_id)
        raise ConflictError(_ALREADY_SHARED)
    db.refresh(share)

    logger.info("Todo %s shared with user %s by user %s", todo.id, target.id, acting_user_id)
    return schemas.TodoShareOut.from_share(share)

def unshare_todo(db: Session, todo_id: int, target_user_id: int, acting_user_id: int) -> None:
    todo = require_access(db, todo_id, acting_user_id)

    allowed = (
        todo.user_id == acting_user_id
        or target_user_id == acting_user_id
        or has_admin_rights(db, todo, acting_user_id)
    )
    if not allowed:
        raise PermissionDeniedError("You do not have permission to remove this share")

    share = get_share(db, todo_id, target_user_id)
    if share is None:
        raise NotFoundError("Share not found")

    activity = ActivityType.UNASSIGNED if share.is_assigned else ActivityType.UNSHARED
    email = share.shared_with_user.email
    description = f"Unassigned from {email}" if share.is_assigned else f"Unshared from {email}"

    db.delete(share)
    log_activity(db, todo_id, acting_user_id, activity, description, related_user_id=target_user_id)
    events.enqueue_event(db, events.user_group(target_user_id), "TodoUnshared", {"todoId": todo_id})
    events.enqueue_event(db, events.todo_group(todo_id), "TodoUpdated",
                         {"todoId": todo_id, "action": "unshared"})
    db.commit()

    logger.info("Todo %s unshared from user %s by user %s", todo_id, target_user_id, acting_user_id)

def update_share_permission(
    db: Session,
    todo_id: int,
    target_user_id: int,
    permission: SharePermission,
    acting_user_id: int,
) -> schemas.TodoShareOut:
    todo = require_access(db, todo_id, acting_user_id)
    if not has_admin_rights(db, todo, acting_user_id):
        raise PermissionDeniedError("You do not have permission to change this share")

    share = get_share(db, todo_id, target_user_id)
    if share is None:
        raise NotFoundError("Share not found")

    previous = share.permission
    share.permission = permission
    share.updated_at = utcnow()

    log_activity(db, todo_id, acting_user_id, ActivityType.PERMISSION_CHANGED,
                 f"Permission changed from {previous.value} to {permission.value}",
                 related_user_id=target_user_id)
    events.enqueue_event(db, events.todo_group(todo_id), "TodoUpdated",
                         {"todoId": todo_id, "action": "permission_changed"})
    db.commit()
    db.refresh(share)
    return schemas.TodoShareOut.from_share(share)


# -------------------------------
# Listings
# -------------------------------

def _shares_of(db: Session, todo_id: int) -> list[TodoShare]:
    return db.query(TodoShare).options(
        joinedload(TodoShare.shared_with_user),
        joinedload(TodoShare.shared_by_user)
    ).filter(TodoShare.todo_id == todo_id).order_by(TodoShare.created_at, TodoShare.id).all()

def list_shares(db: Session, todo_id: int, acting_user_id: int) -> list[schemas.TodoShareOut]:
    todo = require_access(db, todo_id, acting_user_id)

    # Plain viewers and editors do not see the share list
    if not has_admin_rights(db, todo, acting_user_id):
        return []
    return [schemas.TodoShareOut.from_share(s) for s in _shares_of(db, todo_id)]

def list_shared_with_me(db: Session, user_id: int) -> list[schemas.SharedTodoOut]:
    my_shares = db.query(TodoShare).options(
        joinedload(TodoShare.todo).joinedload(Todo.user),
        joinedload(TodoShare.todo).selectinload(Todo.todo_categories).selectinload(TodoCategory.category),
        joinedload(TodoShare.todo).selectinload(Todo.todo_tags).selectinload(TodoTag.tag),
        joinedload(TodoShare.todo).selectinload(Todo.shares).joinedload(TodoShare.shared_with_user),
        joinedload(TodoShare.todo).selectinload(Todo.shares).joinedload(TodoShare.shared_by_user),
    ).filter(TodoShare.shared_with_user_id == user_id).order_by(TodoShare.created_at.desc()).all()

    result = []
    for share in my_shares:
        todo = share.todo
        owner = todo.user
        result.append(schemas.SharedTodoOut(
            **TodoOut.model_validate(todo).model_dump(),
            owner_user_id=owner.id,
            owner_email=owner.email,
            owner_name=owner.full_name or None,
            user_permission=share.permission,
            is_assigned_to_user=bool(share.is_assigned),
            shared_with=[schemas.TodoShareOut.from_share(s) for s in todo.shares],
        ))
    return result
