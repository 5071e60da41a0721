from collections import Counter
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from app.core.exceptions import NotFoundError, ValidationError
from app.core.timeutils import utcnow
from app.db.models.todo import (
    ActivityType, Category, Tag, Todo, TodoCategory, TodoStatus, TodoTag,
)
from app.api.todo.sharing.services import log_activity
from . import schemas

COMPLETION_HISTORY_DAYS = 30


def _with_labels(query):
    return query.options(
        selectinload(Todo.todo_categories).selectinload(TodoCategory.category),
        selectinload(Todo.todo_tags).selectinload(TodoTag.tag)
    )


def _existing_ids(db: Session, model, ids) -> list[int]:
    # Unknown ids are dropped silently
    if not ids:
        return []
    found = {row[0] for row in db.query(model.id).filter(model.id.in_(ids)).all()}
    return [i for i in dict.fromkeys(ids) if i in found]


def _set_categories(db: Session, todo: Todo, category_ids):
    current = {tc.category_id: tc for tc in todo.todo_categories}
    todo.todo_categories = [
        current.get(cid) or TodoCategory(category_id=cid)
        for cid in _existing_ids(db, Category, category_ids)
    ]


def _set_tags(db: Session, todo: Todo, tag_ids):
    current = {tt.tag_id: tt for tt in todo.todo_tags}
    todo.todo_tags = [
        current.get(tid) or TodoTag(tag_id=tid)
        for tid in _existing_ids(db, Tag, tag_ids)
    ]


# -------------------------------
# Reads
# -------------------------------

def get_todo(db: Session, todo_id: int, user_id: int):
    return _with_labels(db.query(Todo)).filter(Todo.id == todo_id, Todo.user_id == user_id).first()

def list_todos(db: Session, user_id: int, sort_by: Optional[str] = None, priority: Optional[int] = None):
    """Plain listing: manual order first, archived todos never included."""
    query = db.query(Todo).filter(Todo.user_id == user_id, Todo.status != TodoStatus.ARCHIVED)
    if priority is not None:
        query = query.filter(Todo.priority == priority)

    variant = (sort_by or "").lower()
    query = query.order_by(Todo.display_order)
    if variant == "priority":
        query = query.order_by(Todo.priority.desc(), Todo.created_at.desc())
    elif variant == "priority_asc":
        query = query.order_by(Todo.priority.asc(), Todo.created_at.desc())
    elif variant == "duedate":
        query = query.order_by(Todo.due_date.isnot(None), Todo.due_date.asc(), Todo.created_at.desc())
    elif variant == "duedate_desc":
        query = query.order_by(Todo.due_date.isnot(None).desc(), Todo.due_date.desc(), Todo.created_at.desc())
    else:
        query = query.order_by(Todo.created_at.desc())

    return _with_labels(query).all()

def list_todos_by_category(db: Session, user_id: int, category_id: int):
    return _with_labels(db.query(Todo)).filter(
        Todo.user_id == user_id,
        Todo.todo_categories.any(TodoCategory.category_id == category_id)
    ).order_by(Todo.created_at.desc()).all()

def list_todos_by_tag(db: Session, user_id: int, tag_id: int):
    return _with_labels(db.query(Todo)).filter(
        Todo.user_id == user_id,
        Todo.todo_tags.any(TodoTag.tag_id == tag_id)
    ).order_by(Todo.created_at.desc()).all()


# -------------------------------
# Create / Update / Delete
# -------------------------------

def create_todo(db: Session, todo: schemas.TodoCreate, user_id: int):
    title = (todo.title or "").strip()
    if not title:
        raise ValidationError("Title is required")

    max_order = db.query(func.max(Todo.display_order)).filter(Todo.user_id == user_id).scalar()
    db_todo = Todo(
        **todo.model_dump(exclude={"title", "category_ids", "tag_ids"}),
        title=title,
        user_id=user_id,
        status=TodoStatus.PENDING,
        display_order=(max_order or 0) + 1,
        created_at=utcnow(),
    )
    try:
        _set_categories(db, db_todo, todo.category_ids)
        _set_tags(db, db_todo, todo.tag_ids)
        db.add(db_todo)
        db.flush()
        log_activity(db, db_todo.id, user_id, ActivityType.CREATED, "Created todo")
        db.commit()
    except Exception:
        db.rollback()
        raise
    return get_todo(db, db_todo.id, user_id)

def update_todo(db: Session, todo_id: int, todo: schemas.TodoUpdate, user_id: int):
    db_todo = get_todo(db, todo_id, user_id)
    if not db_todo:
        return None

    data = todo.model_dump(exclude_unset=True)
    now = utcnow()

    for key in ("priority", "is_completed"):
        if key in data and data[key] is None:
            raise ValidationError(f"{key} cannot be null")
    if "title" in data:
        title = (data.pop("title") or "").strip()
        if not title:
            raise ValidationError("Title cannot be empty")
        db_todo.title = title

    try:
        activity = ActivityType.UPDATED
        if "is_completed" in data:
            wants_done = data.pop("is_completed")
            if wants_done and not db_todo.is_completed:
                db_todo.mark_completed(now)
                activity = ActivityType.COMPLETED
            elif not wants_done and db_todo.is_completed:
                db_todo.mark_pending()
                activity = ActivityType.UNCOMPLETED

        if "category_ids" in data:
            _set_categories(db, db_todo, data.pop("category_ids") or [])
        if "tag_ids" in data:
            _set_tags(db, db_todo, data.pop("tag_ids") or [])

        if "due_date" in data and data["due_date"] != db_todo.due_date:
            db_todo.overdue_notified_at = None

        for key, value in data.items():
            setattr(db_todo, key, value)
        db_todo.updated_at = now

        log_activity(db, db_todo.id, user_id, activity)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return get_todo(db, todo_id, user_id)

def delete_todo(db: Session, todo_id: int, user_id: int):
    db_todo = db.query(Todo).filter(Todo.id == todo_id, Todo.user_id == user_id).first()
    if db_todo:
        db.delete(db_todo)
        db.commit()
    return db_todo


# -------------------------------
# Bulk operations
# -------------------------------

def bulk_mark_complete(db: Session, user_id: int, todo_ids: list[int], is_completed: bool) -> int:
    """Returns the number of matched todos, not the number that changed state."""
    if not todo_ids:
        return 0
    todos = db.query(Todo).filter(Todo.user_id == user_id, Todo.id.in_(todo_ids)).all()

    now = utcnow()
    for todo in todos:
        if is_completed:
            todo.mark_completed(now)
        else:
            todo.mark_pending()
        todo.updated_at = now

    db.commit()
    return len(todos)

def reorder_todos(db: Session, user_id: int, items: list[schemas.TodoOrderItem]):
    if not items:
        raise ValidationError("No todos to reorder")

    orders = {item.todo_id: item.display_order for item in items}
    todos = db.query(Todo).filter(Todo.user_id == user_id, Todo.id.in_(orders)).all()
    if len(todos) != len(orders):
        # Nothing is written unless every todo belongs to the user
        raise NotFoundError("One or more todos were not found")

    now = utcnow()
    for todo in todos:
        todo.display_order = orders[todo.id]
        todo.updated_at = now
    db.commit()

def archive_old_completed(db: Session, user_id: int, days_old: int = 30) -> int:
    now = utcnow()
    cutoff = now - timedelta(days=days_old)
    todos = db.query(Todo).filter(
        Todo.user_id == user_id,
        Todo.status == TodoStatus.COMPLETED,
        Todo.completed_at != None,
        Todo.completed_at < cutoff
    ).all()

    for todo in todos:
        todo.archive(now)
        todo.updated_at = now
    db.commit()
    return len(todos)


# -------------------------------
# Statistics
# -------------------------------

def get_statistics(db: Session, user_id: int, now: Optional[datetime] = None) -> schemas.TodoStatistics:
    now = now or utcnow()
    history_start = now - timedelta(days=COMPLETION_HISTORY_DAYS)
    stats = schemas.TodoStatistics()
    by_day = Counter()

    for todo in db.query(Todo).filter(Todo.user_id == user_id).all():
        stats.total_todos += 1
        if todo.status == TodoStatus.COMPLETED:
            stats.completed_todos += 1
        elif todo.status == TodoStatus.PENDING:
            stats.pending_todos += 1
        else:
            stats.archived_todos += 1

        if not todo.is_completed:
            if todo.due_date is not None and todo.due_date < now:
                stats.overdue_todos += 1
            if todo.priority == 2:
                stats.high_priority_todos += 1
            elif todo.priority == 1:
                stats.medium_priority_todos += 1
            elif todo.priority == 0:
                stats.low_priority_todos += 1

        if todo.completed_at is not None and todo.completed_at >= history_start:
            by_day[todo.completed_at.strftime("%Y-%m-%d")] += 1

    if stats.total_todos:
        stats.completion_rate = round(stats.completed_todos / stats.total_todos * 100, 2)
    stats.completion_by_date = dict(sorted(by_day.items()))
    return stats
