from datetime import date, timedelta

import pytest

from tasktracker.models import Task
from tasktracker.services.task_repository import TaskRepository


@pytest.fixture()
def alice_task(db, alice):
    return TaskRepository(db).create({"employee_id": alice.id, "title": "Alice's task"})


def test_employee_creates_task_with_defaults(client, alice, headers_for):
    response = client.post("/tasks", json={"title": "Prepare demo"}, headers=headers_for(alice))
    assert response.status_code == 201

    body = response.json()
    assert body["title"] == "Prepare demo"
    assert body["status"] == "To Do"
    assert body["priority"] == "Medium"
    assert body["dueDate"] is None
    assert body["employeeId"] == alice.id
    assert body["employee"] == {"id": alice.id, "name": "Alice Engineer", "department": "Engineering"}
    assert body["createdAt"]


def test_create_accepts_client_date_formats(client, alice, headers_for):
    response = client.post(
        "/tasks",
        json={"title": "Dated", "dueDate": "2024-09-01T00:00:00.000Z", "employeeId": alice.id},
        headers=headers_for(alice),
    )
    assert response.status_code == 201
    assert response.json()["dueDate"] == "2024-09-01"

    cleared = client.post("/tasks", json={"title": "Undated", "dueDate": ""}, headers=headers_for(alice))
    assert cleared.status_code == 201
    assert cleared.json()["dueDate"] is None


def test_employee_cannot_create_for_someone_else(client, db, alice, bob, headers_for):
    response = client.post("/tasks", json={"title": "Sneaky", "employeeId": bob.id}, headers=headers_for(alice))
    assert response.status_code == 403
    assert response.json()["kind"] == "Forbidden"
    assert db.query(Task).count() == 0


def test_admin_creates_task_for_employee(client, admin, bob, headers_for):
    response = client.post("/tasks", json={"title": "Assigned", "employeeId": bob.id}, headers=headers_for(admin))
    assert response.status_code == 201
    assert response.json()["employeeId"] == bob.id


@pytest.mark.parametrize("payload", [
    {"title": ""},
    {"title": "x" * 101},
    {"title": "ok", "description": "d" * 501},
    {"title": "ok", "status": "Blocked"},
    {"title": "ok", "priority": "Critical"},
    {"description": "no title"},
])
def test_create_rejects_invalid_payloads(client, alice, headers_for, payload):
    response = client.post("/tasks", json=payload, headers=headers_for(alice))
    assert response.status_code == 400
    assert response.json()["kind"] == "ValidationError"


def test_list_all_is_admin_only(client, db, admin, alice, bob, headers_for):
    repository = TaskRepository(db)
    repository.create({"employee_id": alice.id, "title": "older"})
    repository.create({"employee_id": bob.id, "title": "newer"})

    assert client.get("/tasks", headers=headers_for(alice)).status_code == 403

    response = client.get("/tasks", headers=headers_for(admin))
    assert response.status_code == 200
    assert [task["title"] for task in response.json()] == ["newer", "older"]
    assert response.json()[0]["employee"]["department"] == "Marketing"


def test_employee_task_list_is_self_or_admin(client, alice, bob, admin, alice_task, headers_for):
    own = client.get(f"/tasks/employee/{alice.id}", headers=headers_for(alice))
    assert own.status_code == 200
    assert [task["id"] for task in own.json()] == [alice_task.id]

    assert client.get(f"/tasks/employee/{alice.id}", headers=headers_for(bob)).status_code == 403
    assert client.get(f"/tasks/employee/{alice.id}", headers=headers_for(admin)).status_code == 200


def test_read_single_task(client, alice, bob, admin, alice_task, headers_for):
    assert client.get(f"/tasks/{alice_task.id}", headers=headers_for(alice)).status_code == 200
    assert client.get(f"/tasks/{alice_task.id}", headers=headers_for(admin)).status_code == 200
    assert client.get(f"/tasks/{alice_task.id}", headers=headers_for(bob)).status_code == 403
    assert client.get("/tasks/9999", headers=headers_for(admin)).status_code == 404


@pytest.mark.parametrize("actor, allowed", [("alice", True), ("admin", True), ("bob", False)])
def test_update_requires_owner_or_admin(client, request, alice_task, headers_for, actor, allowed):
    user = request.getfixturevalue(actor)
    response = client.put(
        f"/tasks/{alice_task.id}",
        json={"status": "Review", "priority": "Urgent"},
        headers=headers_for(user),
    )
    if allowed:
        assert response.status_code == 200
        assert response.json()["status"] == "Review"
        assert response.json()["priority"] == "Urgent"
        assert response.json()["title"] == "Alice's task"
    else:
        assert response.status_code == 403


@pytest.mark.parametrize("actor, allowed", [("alice", True), ("admin", True), ("bob", False)])
def test_delete_requires_owner_or_admin(client, db, request, alice_task, headers_for, actor, allowed):
    user = request.getfixturevalue(actor)
    response = client.delete(f"/tasks/{alice_task.id}", headers=headers_for(user))
    if allowed:
        assert response.status_code == 204
        assert client.delete(f"/tasks/{alice_task.id}", headers=headers_for(user)).status_code == 404
    else:
        assert response.status_code == 403
        assert db.query(Task).count() == 1


def test_update_cannot_change_owner(client, alice, bob, alice_task, headers_for):
    response = client.put(
        f"/tasks/{alice_task.id}",
        json={"employeeId": bob.id},
        headers=headers_for(alice),
    )
    assert response.status_code == 400


def test_update_missing_task_is_not_found(client, alice, headers_for):
    response = client.put("/tasks/12345", json={"title": "x"}, headers=headers_for(alice))
    assert response.status_code == 404
    assert response.json()["kind"] == "NotFoundError"


def test_admin_department_search_scenario(client, db, admin, alice, bob, headers_for):
    repository = TaskRepository(db)
    repository.create({"employee_id": alice.id, "title": "Fix login bug"})
    repository.create({"employee_id": alice.id, "title": "Refactor", "description": "Known BUG in cache"})
    repository.create({"employee_id": alice.id, "title": "Roadmap"})
    repository.create({"employee_id": bob.id, "title": "Campaign bug"})

    response = client.get(
        "/tasks",
        params={"department": "Engineering", "search": "bug"},
        headers=headers_for(admin),
    )
    assert response.status_code == 200
    assert sorted(task["title"] for task in response.json()) == ["Fix login bug", "Refactor"]


def test_overdue_and_date_range_query_params(client, db, alice, headers_for):
    today = date.today()
    repository = TaskRepository(db)
    repository.create({"employee_id": alice.id, "title": "late", "due_date": today - timedelta(days=1)})
    repository.create({"employee_id": alice.id, "title": "due today", "due_date": today})
    repository.create({"employee_id": alice.id, "title": "late but done", "status": "Done",
                       "due_date": today - timedelta(days=3)})
    repository.create({"employee_id": alice.id, "title": "undated"})

    overdue = client.get(f"/tasks/employee/{alice.id}", params={"filter": "overdue"}, headers=headers_for(alice))
    assert [task["title"] for task in overdue.json()] == ["late"]

    ranged = client.get(
        f"/tasks/employee/{alice.id}",
        params={"startDate": today.isoformat()},
        headers=headers_for(alice),
    )
    assert [task["title"] for task in ranged.json()] == ["due today"]


def test_invalid_query_params_are_validation_errors(client, alice, headers_for):
    bad_filter = client.get(f"/tasks/employee/{alice.id}", params={"filter": "someday"}, headers=headers_for(alice))
    assert bad_filter.status_code == 400

    inverted = client.get(
        f"/tasks/employee/{alice.id}",
        params={"startDate": "2024-06-10", "endDate": "2024-06-01"},
        headers=headers_for(alice),
    )
    assert inverted.status_code == 400


def test_title_padding_does_not_count_toward_length(client, alice, headers_for):
    padded = "  " + "x" * 100 + "  "
    response = client.post("/tasks", json={"title": padded}, headers=headers_for(alice))
    assert response.status_code == 201
    assert response.json()["title"] == "x" * 100

    task_id = response.json()["id"]
    updated = client.put(f"/tasks/{task_id}", json={"title": " " + "y" * 100 + " "}, headers=headers_for(alice))
    assert updated.status_code == 200
    assert updated.json()["title"] == "y" * 100
