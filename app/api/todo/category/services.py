from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, ValidationError
from app.core.timeutils import utcnow
from app.db.models.todo.category import Category
from . import schemas


def _clean_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Name is required")
    return name


def _ensure_name_free(db: Session, name: str, exclude_id: Optional[int] = None):
    query = db.query(Category).filter(func.lower(Category.name) == name.lower())
    if exclude_id is not None:
        query = query.filter(Category.id != exclude_id)
    if query.first():
        raise ConflictError(f"Category with name '{name}' already exists.")


def create_category(db: Session, category: schemas.CategoryCreate):
    name = _clean_name(category.name)
    _ensure_name_free(db, name)

    db_category = Category(**category.model_dump(exclude={"name"}), name=name, created_at=utcnow())
    db.add(db_category)
    db.commit()
    db.refresh(db_category)
    return db_category

def get_categories(db: Session):
    return db.query(Category).order_by(Category.name).all()

def get_category(db: Session, category_id: int):
    return db.query(Category).filter(Category.id == category_id).first()

def update_category(db: Session, category_id: int, category: schemas.CategoryUpdate):
    db_category = get_category(db, category_id)
    if not db_category:
        return None

    data = category.model_dump(exclude_unset=True)
    if "name" in data:
        data["name"] = _clean_name(data["name"])
        if data["name"].lower() != db_category.name.lower():
            _ensure_name_free(db, data["name"], exclude_id=category_id)
    if not data.get("color", True):
        # A blank color keeps the current one
        data.pop("color")

    for key, value in data.items():
        setattr(db_category, key, value)
    db_category.updated_at = utcnow()
    db.commit()
    db.refresh(db_category)
    return db_category

def delete_category(db: Session, category_id: int):
    db_category = get_category(db, category_id)
    if db_category:
        db.delete(db_category)
        db.commit()
    return db_category
