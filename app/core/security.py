import logging
from datetime import timedelta
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.config import settings
from app.core.timeutils import utcnow
from app.db.session import get_db
from app.db.models.user import User

logger = logging.getLogger(__name__)

# Bearer token taken from the Authorization header
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


def create_access_token(data: dict, expires_in: Optional[timedelta] = None) -> str:
    claims = dict(data)
    claims["exp"] = utcnow() + (expires_in or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[str]:
    """Returns the subject (email) of a valid token, or None."""
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except ExpiredSignatureError:
        logger.info("Rejected expired access token")
        return None
    except JWTError as e:
        logger.info("Rejected malformed access token: %s", e)
        return None
    return claims.get("sub")


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> User:
    email = decode_access_token(token)
    if not email:
        raise _unauthorized()

    user = db.query(User).filter(User.email == email).first()
    if user is None:
        logger.warning("Token subject %s has no matching user", email)
        raise _unauthorized()
    return user
