# app/api/todo/item/query.py
"""
Search / filter / sort / paginate over a user's todos.

Filters are applied in a fixed order because later ones are defined in terms
of earlier ones:

    1. owner scope
    2. free-text search (title, description, category names, tag names)
    3. overdue flag
    4. archived handling (archived rows are hidden by default)
    5. explicit status, else the is_completed split
    6. hide_completed
    7. priority, category membership, tag membership
    8. due date range   (upper bound extended to end of day)
    9. created-at range (upper bound extended to end of day)

The total count is taken after filtering and before sorting / paging.
"""
import math
from datetime import datetime
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session, selectinload

from app.core.timeutils import end_of_day, start_of_day, utcnow
from app.db.models.todo import Category, Tag, Todo, TodoCategory, TodoStatus, TodoTag
from . import schemas

SORT_COLUMNS = {
    "title": Todo.title,
    "priority": Todo.priority,
    "duedate": Todo.due_date,
    "createdat": Todo.created_at,
}
DEFAULT_SORT = "createdat"
DEFAULT_ORDER = "desc"


def normalize_sort(sort_by: Optional[str], sort_order: Optional[str]) -> tuple[str, str]:
    """Unknown values fall back to the defaults instead of raising."""
    field = (sort_by or "").replace("_", "").lower()
    if field not in SORT_COLUMNS:
        field = DEFAULT_SORT
    order = (sort_order or "").lower()
    if order not in ("asc", "desc"):
        order = DEFAULT_ORDER
    return field, order


def apply_filters(query: Query, request: schemas.SearchFilterRequest, now: datetime) -> Query:
    today = start_of_day(now)

    # Text search
    if request.search_query and request.search_query.strip():
        term = request.search_query.strip()
        query = query.filter(or_(
            Todo.title.icontains(term, autoescape=True),
            Todo.description.icontains(term, autoescape=True),
            Todo.todo_categories.any(TodoCategory.category.has(Category.name.icontains(term, autoescape=True))),
            Todo.todo_tags.any(TodoTag.tag.has(Tag.name.icontains(term, autoescape=True))),
        ))

    # Overdue has to come before the completed split; it wins when both are asked for
    if request.is_overdue:
        query = query.filter(
            Todo.status == TodoStatus.PENDING,
            Todo.due_date != None,
            Todo.due_date < today
        )

    if request.is_archived is not None:
        if request.is_archived:
            query = query.filter(Todo.status == TodoStatus.ARCHIVED)
        else:
            query = query.filter(Todo.status != TodoStatus.ARCHIVED)
    elif not request.hide_completed:
        query = query.filter(Todo.status != TodoStatus.ARCHIVED)

    if request.status is not None:
        query = query.filter(Todo.status == request.status)
    elif request.is_completed is not None and not request.is_overdue:
        if request.is_completed:
            query = query.filter(Todo.status == TodoStatus.COMPLETED)
        else:
            # Pending and not overdue
            query = query.filter(
                Todo.status == TodoStatus.PENDING,
                or_(Todo.due_date == None, Todo.due_date >= today)
            )

    if request.hide_completed:
        query = query.filter(Todo.status != TodoStatus.COMPLETED)

    if request.priority is not None:
        query = query.filter(Todo.priority == request.priority)

    if request.category_ids:
        query = query.filter(Todo.todo_categories.any(TodoCategory.category_id.in_(request.category_ids)))

    if request.tag_ids:
        query = query.filter(Todo.todo_tags.any(TodoTag.tag_id.in_(request.tag_ids)))

    if request.due_date_from is not None:
        query = query.filter(Todo.due_date != None, Todo.due_date >= request.due_date_from)
    if request.due_date_to is not None:
        query = query.filter(Todo.due_date != None, Todo.due_date <= end_of_day(request.due_date_to))

    if request.created_at_from is not None:
        query = query.filter(Todo.created_at >= request.created_at_from)
    if request.created_at_to is not None:
        query = query.filter(Todo.created_at <= end_of_day(request.created_at_to))

    return query


def apply_sort(query: Query, sort_by: Optional[str], sort_order: Optional[str]) -> Query:
    field, order = normalize_sort(sort_by, sort_order)
    column = SORT_COLUMNS[field]
    direction = column.asc() if order == "asc" else column.desc()

    if field == "duedate":
        # Todos without a due date go last in either direction
        query = query.order_by(Todo.due_date.is_(None), direction)
    else:
        query = query.order_by(direction)
    # id keeps page boundaries stable between requests
    return query.order_by(Todo.id.asc() if order == "asc" else Todo.id.desc())


def search_todos(db: Session, user_id: int, request: schemas.SearchFilterRequest, now: Optional[datetime] = None):
    now = now or utcnow()

    query = db.query(Todo).filter(Todo.user_id == user_id)
    query = apply_filters(query, request, now)

    total_count = query.count()

    query = apply_sort(query, request.sort_by, request.sort_order)
    page_number = request.page_number
    page_size = request.page_size
    todos = query.options(
        selectinload(Todo.todo_categories).selectinload(TodoCategory.category),
        selectinload(Todo.todo_tags).selectinload(TodoTag.tag)
    ).offset((page_number - 1) * page_size).limit(page_size).all()

    return schemas.SearchFilterResponse(
        todos=[schemas.TodoOut.model_validate(t) for t in todos],
        total_count=total_count,
        page_number=page_number,
        page_size=page_size,
        total_pages=math.ceil(total_count / page_size),
    )
