from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.core.security import get_current_user
from app.db.models.user import User
from app.api.todo.item.schemas import SearchFilterResponse
from . import schemas, services

router = APIRouter()

@router.get("/", response_model=list[schemas.FilterPresetOut])
def list_presets(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return services.get_presets(db, current_user.id)

@router.get("/{preset_id}", response_model=schemas.FilterPresetOut)
def get_preset(
    preset_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    preset = services.get_preset(db, preset_id, current_user.id)
    if not preset:
        raise HTTPException(status_code=404, detail="Filter preset not found")
    return preset

@router.post("/", response_model=schemas.FilterPresetOut, status_code=201)
def create_preset(
    preset: schemas.FilterPresetCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return services.create_preset(db, preset, current_user.id)

@router.put("/{preset_id}", response_model=schemas.FilterPresetOut)
def update_preset(
    preset_id: int,
    preset: schemas.FilterPresetUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    updated = services.update_preset(db, preset_id, preset, current_user.id)
    if not updated:
        raise HTTPException(status_code=404, detail="Filter preset not found")
    return updated

@router.delete("/{preset_id}")
def delete_preset(
    preset_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    deleted = services.delete_preset(db, preset_id, current_user.id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Filter preset not found")
    return {"message": "Filter preset deleted"}

@router.post("/{preset_id}/apply", response_model=SearchFilterResponse)
def apply_preset(
    preset_id: int,
    paging: Optional[schemas.ApplyPresetRequest] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    paging = paging or schemas.ApplyPresetRequest()
    return services.apply_preset(db, preset_id, current_user.id, paging.page_number, paging.page_size)
