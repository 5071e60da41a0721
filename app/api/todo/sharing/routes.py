from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.core.security import get_current_user
from app.db.models.user import User
from . import schemas, services

router = APIRouter()

@router.post("/share", response_model=schemas.TodoShareOut, status_code=201)
def share_todo(
    request: schemas.ShareTodoRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return services.share_todo(db, request, current_user.id)

@router.delete("/unshare/{todo_id}/{shared_with_user_id}")
def unshare_todo(
    todo_id: int,
    shared_with_user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    services.unshare_todo(db, todo_id, shared_with_user_id, current_user.id)
    return {"message": "Todo unshared"}

@router.put("/permission/{todo_id}/{shared_with_user_id}", response_model=schemas.TodoShareOut)
def update_share_permission(
    todo_id: int,
    shared_with_user_id: int,
    request: schemas.UpdateSharePermissionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return services.update_share_permission(db, todo_id, shared_with_user_id, request.permission, current_user.id)

@router.get("/todo/{todo_id}", response_model=list[schemas.TodoShareOut])
def list_shares(
    todo_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return services.list_shares(db, todo_id, current_user.id)

@router.get("/shared", response_model=list[schemas.SharedTodoOut])
def list_shared_with_me(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return services.list_shared_with_me(db, current_user.id)

@router.get("/activity/{todo_id}", response_model=list[schemas.ActivityOut])
def list_activity(
    todo_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return services.list_activity(db, todo_id, current_user.id)
