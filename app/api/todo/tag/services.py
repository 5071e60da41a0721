from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, ValidationError
from app.core.timeutils import utcnow
from app.db.models.todo.tag import Tag
from . import schemas


def _find_by_name(db: Session, name: str) -> Optional[Tag]:
    return db.query(Tag).filter(func.lower(Tag.name) == name.lower()).first()


def create_tag(db: Session, tag: schemas.TagCreate):
    name = (tag.name or "").strip()
    if not name:
        raise ValidationError("Name is required")
    if _find_by_name(db, name):
        raise ConflictError(f"Tag with name '{name}' already exists.")

    db_tag = Tag(**tag.model_dump(exclude={"name"}), name=name, created_at=utcnow())
    db.add(db_tag)
    db.commit()
    db.refresh(db_tag)
    return db_tag

def get_tags(db: Session):
    return db.query(Tag).order_by(Tag.name).all()

def get_tag(db: Session, tag_id: int):
    return db.query(Tag).filter(Tag.id == tag_id).first()

def update_tag(db: Session, tag_id: int, tag: schemas.TagUpdate):
    db_tag = get_tag(db, tag_id)
    if not db_tag:
        return None

    data = tag.model_dump(exclude_unset=True)
    if "name" in data:
        name = (data["name"] or "").strip()
        if not name:
            raise ValidationError("Name is required")
        clash = _find_by_name(db, name)
        if clash and clash.id != tag_id:
            raise ConflictError(f"Tag with name '{name}' already exists.")
        data["name"] = name
    if "color" in data and not data["color"]:
        del data["color"]

    for key, value in data.items():
        setattr(db_tag, key, value)
    db_tag.updated_at = utcnow()
    db.commit()
    db.refresh(db_tag)
    return db_tag

def delete_tag(db: Session, tag_id: int):
    db_tag = get_tag(db, tag_id)
    if db_tag:
        db.delete(db_tag)
        db.commit()
    return db_tag
