from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.config import settings
from app.db.session import get_db
from app.core.security import get_current_user
from app.db.models.todo import TodoStatus
from app.db.models.user import User
from . import query, schemas, services

router = APIRouter()


def _search_params(
    search_query: Optional[str] = None,
    is_completed: Optional[bool] = None,
    is_archived: Optional[bool] = None,
    status: Optional[TodoStatus] = None,
    is_overdue: Optional[bool] = None,
    hide_completed: Optional[bool] = None,
    priority: Optional[int] = None,
    category_ids: Optional[list[int]] = Query(None),
    tag_ids: Optional[list[int]] = Query(None),
    due_date_from: Optional[datetime] = None,
    due_date_to: Optional[datetime] = None,
    created_at_from: Optional[datetime] = None,
    created_at_to: Optional[datetime] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
    page_number: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1),
) -> schemas.SearchFilterRequest:
    return schemas.SearchFilterRequest(**{k: v for k, v in locals().items() if v is not None})


@router.get("/", response_model=list[schemas.TodoOut])
def list_todos(
    sort_by: Optional[str] = None,
    priority: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return services.list_todos(db, current_user.id, sort_by, priority)

@router.get("/search", response_model=schemas.SearchFilterResponse)
def search_todos_by_query(
    request: schemas.SearchFilterRequest = Depends(_search_params),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return query.search_todos(db, current_user.id, request)

@router.post("/search", response_model=schemas.SearchFilterResponse)
def search_todos(
    request: schemas.SearchFilterRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return query.search_todos(db, current_user.id, request)

@router.get("/statistics", response_model=schemas.TodoStatistics)
def get_statistics(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return services.get_statistics(db, current_user.id)

@router.get("/category/{category_id}", response_model=list[schemas.TodoOut])
def list_todos_by_category(
    category_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return services.list_todos_by_category(db, current_user.id, category_id)

@router.get("/tag/{tag_id}", response_model=list[schemas.TodoOut])
def list_todos_by_tag(
    tag_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return services.list_todos_by_tag(db, current_user.id, tag_id)

@router.post("/bulk-complete", response_model=schemas.BulkTodoResult)
def bulk_mark_complete(
    request: schemas.BulkTodoRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    updated = services.bulk_mark_complete(db, current_user.id, request.todo_ids, request.is_completed)
    return {"updated": updated}

@router.post("/reorder")
def reorder_todos(
    request: schemas.ReorderTodosRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    services.reorder_todos(db, current_user.id, request.todo_orders)
    return {"message": "Todos reordered"}

@router.post("/archive-completed", response_model=schemas.BulkTodoResult)
def archive_old_completed(
    days_old: int = Query(30, ge=0),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    archived = services.archive_old_completed(db, current_user.id, days_old)
    return {"updated": archived}

@router.post("/", response_model=schemas.TodoOut, status_code=201)
def create_todo(
    todo: schemas.TodoCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return services.create_todo(db, todo, current_user.id)

@router.get("/{todo_id}", response_model=schemas.TodoOut)
def get_todo(
    todo_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    todo = services.get_todo(db, todo_id, current_user.id)
    if not todo:
        raise HTTPException(status_code=404, detail="Todo not found")
    return todo

@router.put("/{todo_id}", response_model=schemas.TodoOut)
def update_todo(
    todo_id: int,
    todo: schemas.TodoUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    updated = services.update_todo(db, todo_id, todo, current_user.id)
    if not updated:
        raise HTTPException(status_code=404, detail="Todo not found")
    return updated

@router.delete("/{todo_id}")
def delete_todo(
    todo_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    deleted = services.delete_todo(db, todo_id, current_user.id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Todo not found")
    return {"message": "Todo deleted"}
