from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.core.security import get_current_user
from app.db.models.user import User
from . import schemas, services

router = APIRouter()

@router.get("/", response_model=schemas.Profile)
def read_profile(current_user: User = Depends(get_current_user)):
    """
    Retrieve current user's profile and preferences.
    """
    return current_user

@router.put("/", response_model=schemas.Profile)
def update_profile(
    profile: schemas.ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    updated_user = services.update_profile(db=db, user_id=current_user.id, profile=profile)
    if not updated_user:
        raise HTTPException(status_code=404, detail="User not found")
    return updated_user

@router.get("/theme", response_model=schemas.ThemePreference)
def read_theme(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    theme = services.get_theme(db, current_user.id)
    if not theme:
        raise HTTPException(status_code=404, detail="User not found")
    return theme

@router.put("/theme", response_model=schemas.ThemePreference)
def update_theme(
    request: schemas.ThemePreference,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Switch between the light and dark theme.
    """
    theme = services.update_theme(db, current_user.id, request.theme)
    if not theme:
        raise HTTPException(status_code=404, detail="User not found")
    return theme
