import logging
import secrets
from datetime import timedelta
from typing import Optional

from sqlalchemy.orm import Session

from app.config import settings
from app.core.hashing import Hasher
from app.core.security import create_access_token
from app.core.timeutils import utcnow
from app.db.models.refresh_token import RefreshToken
from app.db.models.user import User
from . import schemas

logger = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.lower()).first()


def create_user(db: Session, user: schemas.UserCreate) -> User:
    new_user = User(
        email=user.email.lower(),
        hashed_password=Hasher.hash_password(user.password),
        first_name=user.first_name,
        last_name=user.last_name,
        created_at=utcnow(),
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    logger.info("Registered user %s", new_user.id)
    return new_user


def authenticate(db: Session, email: str, password: str) -> Optional[User]:
    db_user = get_user_by_email(db, email)
    if not db_user or not Hasher.verify_password(password, db_user.hashed_password):
        return None
    return db_user


def issue_tokens(db: Session, user: User) -> schemas.Token:
    refresh = RefreshToken(
        token=secrets.token_urlsafe(48),
        user_id=user.id,
        expires_at=utcnow() + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    )
    db.add(refresh)
    db.commit()
    return schemas.Token(
        access_token=create_access_token({"sub": user.email}),
        refresh_token=refresh.token,
    )


def rotate_refresh_token(db: Session, token: str) -> Optional[schemas.Token]:
    """Swaps a live refresh token for a fresh pair; the old one stops working."""
    stored = db.query(RefreshToken).filter(RefreshToken.token == token).first()
    now = utcnow()
    if not stored or not stored.is_active(now):
        return None

    stored.revoked_at = now
    return issue_tokens(db, stored.user)


def revoke_refresh_token(db: Session, token: str, user_id: int) -> bool:
    stored = db.query(RefreshToken).filter(
        RefreshToken.token == token,
        RefreshToken.user_id == user_id
    ).first()
    if not stored:
        return False
    if stored.revoked_at is None:
        stored.revoked_at = utcnow()
        db.commit()
    return True
