from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from app.api.todo.item import query
from app.api.todo.item.schemas import SearchFilterRequest
from app.db.models import TodoCategory, TodoStatus, TodoTag


def _titles(response) -> set[str]:
    return {t.title for t in response.todos}


def _search(db, user, now, **filters):
    return query.search_todos(db, user.id, SearchFilterRequest(**filters), now=now)


@pytest.fixture
def board(db, user, make_todo, now):
    """One todo per interesting state, all owned by `user`."""
    make_todo(user, "overdue", due_date=now - timedelta(days=1))
    make_todo(user, "due-earlier-today", due_date=now - timedelta(hours=2))
    make_todo(user, "due-tomorrow", due_date=now + timedelta(days=1))
    make_todo(user, "no-due-date")
    make_todo(user, "completed-late", status=TodoStatus.COMPLETED,
              due_date=now - timedelta(days=1), completed_at=now - timedelta(hours=1))
    make_todo(user, "archived", status=TodoStatus.ARCHIVED,
              completed_at=now - timedelta(days=40), archived_at=now - timedelta(days=1))


@pytest.mark.parametrize(
    ("filters", "expected"),
    [
        ({}, {"overdue", "due-earlier-today", "due-tomorrow", "no-due-date", "completed-late"}),
        ({"is_overdue": True}, {"overdue"}),
        ({"is_completed": False}, {"due-earlier-today", "due-tomorrow", "no-due-date"}),
        ({"is_completed": True}, {"completed-late"}),
        ({"is_overdue": True, "is_completed": False}, {"overdue"}),
        ({"is_overdue": True, "is_completed": True}, {"overdue"}),
        ({"is_archived": True}, {"archived"}),
        ({"status": "completed"}, {"completed-late"}),
        ({"status": "archived"}, set()),
        ({"status": "archived", "is_archived": True}, {"archived"}),
        ({"hide_completed": True}, {"overdue", "due-earlier-today", "due-tomorrow", "no-due-date", "archived"}),
        ({"hide_completed": True, "is_archived": False}, {"overdue", "due-earlier-today", "due-tomorrow", "no-due-date"}),
    ],
)
def test_pending_and_overdue_truth_table(db, user, now, board, filters, expected) -> None:
    assert _titles(_search(db, user, now, **filters)) == expected


def test_past_due_todo_is_not_in_the_pending_split(db, user, make_todo, now) -> None:
    make_todo(user, "T", due_date=now - timedelta(days=1))

    assert _titles(_search(db, user, now, is_overdue=True)) == {"T"}
    assert _titles(_search(db, user, now, is_completed=False)) == set()


def test_overdue_never_returns_completed_or_undated(db, user, now, board) -> None:
    result = _search(db, user, now, is_overdue=True)

    assert result.todos
    for todo in result.todos:
        assert not todo.is_completed
        assert todo.due_date is not None


def test_search_is_scoped_to_owner(db, user, make_user, make_todo, now) -> None:
    other = make_user()
    make_todo(user, "mine")
    make_todo(other, "theirs")

    result = _search(db, user, now)

    assert _titles(result) == {"mine"}
    assert all(t.user_id == user.id for t in result.todos)


def test_text_search_covers_title_description_category_and_tag(db, user, make_todo, category, tag, now) -> None:
    make_todo(user, "Buy milk")
    make_todo(user, "Call Bob", description="about the MILK order")
    in_category = make_todo(user, "Quarterly report")
    in_tag = make_todo(user, "Dentist")
    make_todo(user, "Unrelated")
    db.add_all([
        TodoCategory(todo_id=in_category.id, category_id=category.id),
        TodoTag(todo_id=in_tag.id, tag_id=tag.id),
    ])
    db.commit()

    assert _titles(_search(db, user, now, search_query="milk")) == {"Buy milk", "Call Bob"}
    assert _titles(_search(db, user, now, search_query="work")) == {"Quarterly report"}
    assert _titles(_search(db, user, now, search_query="URGENT")) == {"Dentist"}


def test_text_search_treats_wildcards_literally(db, user, make_todo, now) -> None:
    make_todo(user, "100% done")
    make_todo(user, "100 done")

    assert _titles(_search(db, user, now, search_query="100%")) == {"100% done"}


def test_category_and_tag_membership(db, user, make_todo, category, tag, now) -> None:
    both = make_todo(user, "both")
    only_category = make_todo(user, "only-category")
    make_todo(user, "neither")
    db.add_all([
        TodoCategory(todo_id=both.id, category_id=category.id),
        TodoTag(todo_id=both.id, tag_id=tag.id),
        TodoCategory(todo_id=only_category.id, category_id=category.id),
    ])
    db.commit()

    assert _titles(_search(db, user, now, category_ids=[category.id])) == {"both", "only-category"}
    assert _titles(_search(db, user, now, category_ids=[category.id], tag_ids=[tag.id])) == {"both"}
    assert _titles(_search(db, user, now, category_ids=[category.id, 9999])) == {"both", "only-category"}


def test_priority_filter(db, user, make_todo, now) -> None:
    make_todo(user, "low", priority=0)
    make_todo(user, "high", priority=2)

    assert _titles(_search(db, user, now, priority=2)) == {"high"}


def test_due_date_upper_bound_covers_whole_day(db, user, make_todo, now) -> None:
    day = datetime(2024, 7, 1)
    make_todo(user, "morning", due_date=day.replace(hour=8))
    make_todo(user, "last-minute", due_date=day.replace(hour=23, minute=59, second=59))
    make_todo(user, "next-day", due_date=day + timedelta(days=1))
    make_todo(user, "undated")

    result = _search(db, user, now, due_date_from=day, due_date_to=day)

    assert _titles(result) == {"morning", "last-minute"}


def test_created_at_range(db, user, make_todo, now) -> None:
    make_todo(user, "old", created_at=datetime(2024, 1, 1, 9))
    make_todo(user, "recent", created_at=datetime(2024, 6, 1, 23, 30))

    result = _search(db, user, now, created_at_from=datetime(2024, 5, 1), created_at_to=datetime(2024, 6, 1))

    assert _titles(result) == {"recent"}


def test_sort_by_title_ascending(db, user, make_todo, now) -> None:
    for title in ("banana", "apple", "cherry"):
        make_todo(user, title)

    result = _search(db, user, now, sort_by="title", sort_order="asc")

    assert [t.title for t in result.todos] == ["apple", "banana", "cherry"]


@pytest.mark.parametrize("order", ["asc", "desc"])
def test_undated_todos_sort_last(db, user, make_todo, now, order) -> None:
    make_todo(user, "undated")
    make_todo(user, "soon", due_date=now + timedelta(days=1))
    make_todo(user, "later", due_date=now + timedelta(days=5))

    result = _search(db, user, now, sort_by="dueDate", sort_order=order)

    titles = [t.title for t in result.todos]
    assert titles[-1] == "undated"
    assert titles[:2] == (["soon", "later"] if order == "asc" else ["later", "soon"])


def test_unknown_sort_falls_back_to_newest_first(db, user, make_todo, now) -> None:
    make_todo(user, "first", created_at=now - timedelta(days=2))
    make_todo(user, "second", created_at=now - timedelta(days=1))

    result = _search(db, user, now, sort_by="colour", sort_order="sideways")

    assert [t.title for t in result.todos] == ["second", "first"]


def test_normalize_sort_accepts_mixed_case_and_underscores() -> None:
    assert query.normalize_sort("Due_Date", "ASC") == ("duedate", "asc")
    assert query.normalize_sort(None, None) == ("createdat", "desc")


def test_pages_partition_the_result_set(db, user, make_todo, now) -> None:
    same_moment = now - timedelta(hours=1)
    for i in range(7):
        make_todo(user, f"todo-{i}", created_at=same_moment)

    seen: list[int] = []
    for page in range(1, 4):
        result = _search(db, user, now, page_number=page, page_size=3)
        assert result.total_count == 7
        assert result.total_pages == 3
        seen.extend(t.id for t in result.todos)

    assert len(seen) == 7
    assert len(set(seen)) == 7


def test_page_past_the_end_is_empty_but_keeps_total(db, user, make_todo, now) -> None:
    make_todo(user, "only")

    result = _search(db, user, now, page_number=5, page_size=10)

    assert result.todos == []
    assert result.total_count == 1
    assert result.page_number == 5


def test_page_number_must_be_positive() -> None:
    with pytest.raises(ValueError):
        SearchFilterRequest(page_number=0)


def test_timezone_aware_bounds_are_normalized_to_utc() -> None:
    request = SearchFilterRequest(due_date_from=datetime(2024, 1, 1, 12, tzinfo=timezone(timedelta(hours=2))))

    assert request.due_date_from == datetime(2024, 1, 1, 10)
