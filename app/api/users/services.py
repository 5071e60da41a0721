from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.exceptions import ValidationError
from app.db.models.user import User

SEARCH_LIMIT = 10


def search_users(db: Session, acting_user_id: int, email: Optional[str] = None, query: Optional[str] = None):
    """Finds people to share with. The caller never appears in the results."""
    email = (email or "").strip()
    query = (query or "").strip()
    if not email and not query:
        raise ValidationError("Either email or query must be provided")

    users = db.query(User).filter(User.id != acting_user_id)
    if email:
        users = users.filter(User.email.icontains(email, autoescape=True))
    else:
        users = users.filter(or_(
            User.email.icontains(query, autoescape=True),
            User.first_name.icontains(query, autoescape=True),
            User.last_name.icontains(query, autoescape=True),
        ))
    return users.order_by(User.email).limit(SEARCH_LIMIT).all()
