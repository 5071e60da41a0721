from sqlalchemy.orm import Session, joinedload

from app.core import events
from app.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from app.core.timeutils import utcnow
from app.db.models.todo import ActivityType, Todo, TodoComment
from app.api.todo.sharing.permissions import can_access
from app.api.todo.sharing.services import log_activity
from . import schemas


def _clean(text: str) -> str:
    text = (text or "").strip()
    if not text:
        raise ValidationError("Comment cannot be empty")
    return text

def _load(db: Session, comment_id: int):
    return db.query(TodoComment).options(joinedload(TodoComment.user)).filter(TodoComment.id == comment_id).first()

def create_comment(db: Session, comment: schemas.CommentCreate, user_id: int) -> schemas.CommentOut:
    text = _clean(comment.comment)
    if not can_access(db, comment.todo_id, user_id):
        raise PermissionDeniedError("You do not have access to this todo")

    db_comment = TodoComment(todo_id=comment.todo_id, user_id=user_id, comment=text, created_at=utcnow())
    db.add(db_comment)
    db.flush()

    out = schemas.CommentOut.from_comment(db_comment)
    log_activity(db, comment.todo_id, user_id, ActivityType.COMMENT_ADDED, "Added a comment")
    events.enqueue_event(db, events.todo_group(comment.todo_id), "CommentAdded",
                         {"comment": out.model_dump(mode="json")})
    db.commit()
    return out

def get_comment(db: Session, comment_id: int, user_id: int):
    db_comment = _load(db, comment_id)
    if not db_comment:
        return None
    if not can_access(db, db_comment.todo_id, user_id):
        raise NotFoundError("Comment not found")
    return schemas.CommentOut.from_comment(db_comment)

def list_comments(db: Session, todo_id: int, user_id: int) -> list[schemas.CommentOut]:
    if not can_access(db, todo_id, user_id):
        raise NotFoundError("Todo not found")
    comments = db.query(TodoComment).options(joinedload(TodoComment.user)).filter(
        TodoComment.todo_id == todo_id
    ).order_by(TodoComment.created_at, TodoComment.id).all()
    return [schemas.CommentOut.from_comment(c) for c in comments]

def update_comment(db: Session, comment_id: int, comment: schemas.CommentUpdate, user_id: int) -> schemas.CommentOut:
    db_comment = _load(db, comment_id)
    # Only the author can edit; other users' comments look missing
    if not db_comment or db_comment.user_id != user_id:
        raise NotFoundError("Comment not found")
    if not can_access(db, db_comment.todo_id, user_id):
        raise PermissionDeniedError("You no longer have access to this todo")

    db_comment.comment = _clean(comment.comment)
    db_comment.updated_at = utcnow()
    db.commit()
    db.refresh(db_comment)
    return schemas.CommentOut.from_comment(db_comment)

def delete_comment(db: Session, comment_id: int, user_id: int) -> None:
    db_comment = _load(db, comment_id)
    if not db_comment or not can_access(db, db_comment.todo_id, user_id):
        raise NotFoundError("Comment not found")

    owner_id = db.query(Todo.user_id).filter(Todo.id == db_comment.todo_id).scalar()
    if user_id not in (db_comment.user_id, owner_id):
        raise PermissionDeniedError("Only the author or the todo owner can delete this comment")

    db.delete(db_comment)
    db.commit()
