from __future__ import annotations

import pytest

from app.api.todo.category import schemas as category_schemas, services as category_services
from app.api.todo.tag import schemas as tag_schemas, services as tag_services
from app.core.exceptions import ConflictError, ValidationError


def test_category_names_are_unique_ignoring_case(db) -> None:
    category_services.create_category(db, category_schemas.CategoryCreate(name="Home"))

    with pytest.raises(ConflictError):
        category_services.create_category(db, category_schemas.CategoryCreate(name="home"))


def test_category_name_is_required(db) -> None:
    with pytest.raises(ValidationError):
        category_services.create_category(db, category_schemas.CategoryCreate(name="  "))


def test_categories_are_listed_by_name(db) -> None:
    for name in ("Work", "Errands", "Home"):
        category_services.create_category(db, category_schemas.CategoryCreate(name=name))

    assert [c.name for c in category_services.get_categories(db)] == ["Errands", "Home", "Work"]


def test_category_partial_update(db) -> None:
    category = category_services.create_category(
        db, category_schemas.CategoryCreate(name="Work", color="#111111", description="Office"),
    )

    updated = category_services.update_category(db, category.id, category_schemas.CategoryUpdate(color=""))
    assert updated.color == "#111111"
    assert updated.description == "Office"

    renamed = category_services.update_category(db, category.id, category_schemas.CategoryUpdate(name="WORK"))
    assert renamed.name == "WORK"
    assert category_services.update_category(db, 999, category_schemas.CategoryUpdate(name="x")) is None


def test_renaming_onto_existing_category_conflicts(db) -> None:
    category_services.create_category(db, category_schemas.CategoryCreate(name="Home"))
    work = category_services.create_category(db, category_schemas.CategoryCreate(name="Work"))

    with pytest.raises(ConflictError):
        category_services.update_category(db, work.id, category_schemas.CategoryUpdate(name="HOME"))


def test_deleting_category_unlinks_todos(db, user) -> None:
    from app.api.todo.item import schemas as item_schemas, services as item_services

    category = category_services.create_category(db, category_schemas.CategoryCreate(name="Temp"))
    todo = item_services.create_todo(db, item_schemas.TodoCreate(title="t", category_ids=[category.id]), user.id)

    assert category_services.delete_category(db, category.id)

    assert item_services.get_todo(db, todo.id, user.id).categories == []


def test_tag_crud(db) -> None:
    tag = tag_services.create_tag(db, tag_schemas.TagCreate(name="urgent"))

    with pytest.raises(ConflictError):
        tag_services.create_tag(db, tag_schemas.TagCreate(name="URGENT"))

    updated = tag_services.update_tag(db, tag.id, tag_schemas.TagUpdate(description="Do it now"))
    assert updated.description == "Do it now"
    assert updated.name == "urgent"

    assert tag_services.delete_tag(db, tag.id)
    assert tag_services.get_tag(db, tag.id) is None
