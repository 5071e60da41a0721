from sqlalchemy.orm import Session

from app.core.exceptions import ValidationError
from app.core.timeutils import utcnow
from app.db.models.user import User
from . import schemas

def get_theme(db: Session, user_id: int):
    db_user = db.get(User, user_id)
    if not db_user:
        return None
    return schemas.ThemePreference(theme=db_user.theme_preference or "light")

def update_theme(db: Session, user_id: int, theme: str):
    if theme not in schemas.THEMES:
        raise ValidationError("Theme must be 'light' or 'dark'")

    db_user = db.get(User, user_id)
    if not db_user:
        return None
    db_user.theme_preference = theme
    db_user.updated_at = utcnow()
    db.commit()
    return schemas.ThemePreference(theme=db_user.theme_preference)

def update_profile(db: Session, user_id: int, profile: schemas.ProfileUpdate) -> User:
    db_user = db.get(User, user_id)
    if db_user:
        for key, value in profile.model_dump(exclude_unset=True).items():
            setattr(db_user, key, value)
        db_user.updated_at = utcnow()
        db.commit()
        db.refresh(db_user)
    return db_user
