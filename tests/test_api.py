from __future__ import annotations

from datetime import timedelta

from app.core.timeutils import utcnow


def _create(client, **fields) -> dict:
    fields.setdefault("title", "Write tests")
    response = client.post("/todos/", json=fields)
    assert response.status_code == 201, response.text
    return response.json()


def test_ping(client) -> None:
    assert client.get("/ping").json() == {"message": "pong"}


def test_create_and_fetch_todo(client) -> None:
    created = _create(client, priority=2, description="with pytest")

    assert created["status"] == "pending"
    assert created["is_completed"] is False
    assert created["display_order"] == 1

    fetched = client.get(f"/todos/{created['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["description"] == "with pytest"


def test_missing_todo_is_404(client) -> None:
    response = client.get("/todos/12345")

    assert response.status_code == 404
    assert response.json() == {"detail": "Todo not found"}


def test_blank_title_is_400(client) -> None:
    response = client.post("/todos/", json={"title": "  "})

    assert response.status_code == 400
    assert response.json()["detail"] == "Title is required"


def test_derived_due_flags(client) -> None:
    overdue = _create(client, title="late", due_date=(utcnow() - timedelta(days=1)).isoformat())
    soon = _create(client, title="soon", due_date=(utcnow() + timedelta(days=1)).isoformat())

    assert overdue["is_overdue"] is True
    assert overdue["is_approaching_due"] is False
    assert soon["is_overdue"] is False
    assert soon["is_approaching_due"] is True


def test_patch_semantics_over_http(client) -> None:
    todo = _create(client, description="keep me", priority=1)

    response = client.put(f"/todos/{todo['id']}", json={"is_completed": True})

    body = response.json()
    assert body["status"] == "completed"
    assert body["description"] == "keep me"
    assert body["priority"] == 1


def test_search_get_and_post_agree(client) -> None:
    _create(client, title="alpha")
    _create(client, title="beta")

    by_query = client.get("/todos/search", params={"search_query": "alp"}).json()
    by_body = client.post("/todos/search", json={"search_query": "alp"}).json()

    assert [t["title"] for t in by_query["todos"]] == ["alpha"]
    assert by_query["total_count"] == by_body["total_count"] == 1
    assert by_query["page_size"] == 50


def test_search_rejects_page_zero(client) -> None:
    assert client.post("/todos/search", json={"page_number": 0}).status_code == 422


def test_reorder_with_foreign_id_is_404(client) -> None:
    todo = _create(client)

    response = client.post("/todos/reorder", json={"todo_orders": [
        {"todo_id": todo["id"], "display_order": 5},
        {"todo_id": 9999, "display_order": 6},
    ]})

    assert response.status_code == 404
    assert client.get(f"/todos/{todo['id']}").json()["display_order"] == 1


def test_bulk_complete_and_statistics(client) -> None:
    ids = [_create(client, title=f"t{i}")["id"] for i in range(3)]

    response = client.post("/todos/bulk-complete", json={"todo_ids": ids[:2], "is_completed": True})
    assert response.json() == {"updated": 2}

    stats = client.get("/todos/statistics").json()
    assert stats["total_todos"] == 3
    assert stats["completed_todos"] == 2
    assert stats["completion_rate"] == 66.67


def test_sharing_flow(client, acting_user, user, make_user) -> None:
    bob = make_user("bob@example.com")
    todo = _create(client, title="Plan trip")

    shared = client.post("/sharing/share", json={
        "todo_id": todo["id"], "shared_with_user_id": bob.id, "permission": "view_only",
    })
    assert shared.status_code == 201
    assert client.post("/sharing/share", json={
        "todo_id": todo["id"], "shared_with_user_id": bob.id,
    }).status_code == 409

    acting_user["id"] = bob.id
    mine = client.get("/sharing/shared").json()
    assert [t["title"] for t in mine] == ["Plan trip"]
    assert mine[0]["user_permission"] == "view_only"

    denied = client.put(f"/sharing/permission/{todo['id']}/{bob.id}", json={"permission": "admin"})
    assert denied.status_code == 403

    comment = client.post("/comments/", json={"todo_id": todo["id"], "comment": "Count me in"})
    assert comment.status_code == 201

    acting_user["id"] = user.id
    comments = client.get(f"/comments/todo/{todo['id']}").json()
    assert [c["comment"] for c in comments] == ["Count me in"]

    activity = client.get(f"/sharing/activity/{todo['id']}").json()
    assert [a["activity_type"] for a in activity][:2] == ["comment_added", "shared"]


def test_stranger_gets_404_for_shared_resources(client, acting_user, make_user) -> None:
    todo = _create(client)
    acting_user["id"] = make_user().id

    assert client.get(f"/sharing/todo/{todo['id']}").status_code == 404
    assert client.get(f"/comments/todo/{todo['id']}").status_code == 404
    assert client.post("/comments/", json={"todo_id": todo["id"], "comment": "hi"}).status_code == 403


def test_filter_preset_apply(client) -> None:
    _create(client, title="important", priority=2)
    _create(client, title="whatever", priority=0)

    preset = client.post("/filter-presets/", json={"name": "High", "priority": 2}).json()
    applied = client.post(f"/filter-presets/{preset['id']}/apply", json={"page_size": 10})

    assert applied.status_code == 200
    assert [t["title"] for t in applied.json()["todos"]] == ["important"]
    assert applied.json()["page_size"] == 10


def test_theme_preference(client) -> None:
    assert client.get("/settings/theme").json() == {"theme": "light"}
    assert client.put("/settings/theme", json={"theme": "dark"}).json() == {"theme": "dark"}
    assert client.put("/settings/theme", json={"theme": "purple"}).status_code == 400


def test_user_search_excludes_caller(client, make_user) -> None:
    make_user("bob@example.com", "Bob")
    make_user("bobby@example.com")

    found = client.get("/users/search", params={"query": "bob"}).json()
    assert [u["email"] for u in found] == ["bob@example.com", "bobby@example.com"]

    assert client.get("/users/search", params={"query": "owner"}).json() == []
    assert client.get("/users/search").status_code == 400
