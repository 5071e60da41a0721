from typing import Optional

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, ValidationError
from app.core.timeutils import utcnow
from app.db.models.todo import FilterPreset
from app.api.todo.item import query
from app.api.todo.item.schemas import SearchFilterRequest
from . import schemas

# Filter fields shared by presets and search requests
SEARCH_FIELDS = tuple(schemas.FilterPresetFields.model_fields)


def _assign(db_preset: FilterPreset, data: dict):
    for key, value in data.items():
        if key == "status" and value is not None:
            value = value.value
        setattr(db_preset, key, value)

def create_preset(db: Session, preset: schemas.FilterPresetCreate, user_id: int):
    name = (preset.name or "").strip()
    if not name:
        raise ValidationError("Preset name is required")

    db_preset = FilterPreset(name=name, user_id=user_id, created_at=utcnow())
    _assign(db_preset, preset.model_dump(exclude={"name"}))
    db.add(db_preset)
    db.commit()
    db.refresh(db_preset)
    return db_preset

def get_presets(db: Session, user_id: int):
    return db.query(FilterPreset).filter(FilterPreset.user_id == user_id).order_by(FilterPreset.name).all()

def get_preset(db: Session, preset_id: int, user_id: int):
    return db.query(FilterPreset).filter(FilterPreset.id == preset_id, FilterPreset.user_id == user_id).first()

def update_preset(db: Session, preset_id: int, preset: schemas.FilterPresetUpdate, user_id: int):
    db_preset = get_preset(db, preset_id, user_id)
    if not db_preset:
        return None

    data = preset.model_dump(exclude_unset=True)
    if "name" in data:
        name = (data.pop("name") or "").strip()
        if not name:
            raise ValidationError("Preset name cannot be empty")
        db_preset.name = name

    _assign(db_preset, data)
    db_preset.updated_at = utcnow()
    db.commit()
    db.refresh(db_preset)
    return db_preset

def delete_preset(db: Session, preset_id: int, user_id: int):
    db_preset = get_preset(db, preset_id, user_id)
    if db_preset:
        db.delete(db_preset)
        db.commit()
    return db_preset

def to_search_request(db: Session, preset_id: int, user_id: int) -> SearchFilterRequest:
    db_preset = get_preset(db, preset_id, user_id)
    if not db_preset:
        raise NotFoundError("Filter preset not found")
    values = {field: getattr(db_preset, field) for field in SEARCH_FIELDS}
    return SearchFilterRequest(**{k: v for k, v in values.items() if v is not None})

def apply_preset(
    db: Session,
    preset_id: int,
    user_id: int,
    page_number: Optional[int] = None,
    page_size: Optional[int] = None,
):
    request = to_search_request(db, preset_id, user_id)
    if page_number is not None:
        request.page_number = page_number
    if page_size is not None:
        request.page_size = page_size
    return query.search_todos(db, user_id, request)
