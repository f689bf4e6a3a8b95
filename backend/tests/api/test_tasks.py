# tests/api/test_tasks.py
from fastapi import status

from task_tracker.models import Task, TaskStatus


def create_task(client, headers, project_id, name="Collect receipts", **extra):
    return client.post("/api/tasks", json={"project_id": project_id, "name": name, **extra}, headers=headers)


def test_create_task_defaults_to_todo(client, auth_headers, sample_project):
    response = create_task(client, auth_headers, sample_project.id)

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["name"] == "Collect receipts"
    assert data["status"] == "todo"
    assert data["project_id"] == sample_project.id


def test_create_task_with_status(client, auth_headers, sample_project):
    response = create_task(client, auth_headers, sample_project.id, status="in-progress")
    assert response.json()["status"] == "in-progress"


def test_create_task_invalid_status(client, auth_headers, sample_project):
    response = create_task(client, auth_headers, sample_project.id, status="blocked")
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_create_task_on_foreign_project(client, other_auth_headers, sample_project):
    response = create_task(client, other_auth_headers, sample_project.id)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_create_task_missing_name(client, auth_headers, sample_project):
    response = client.post("/api/tasks", json={"project_id": sample_project.id}, headers=auth_headers)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_list_tasks_filters_by_project(client, auth_headers, make_project, other_account, other_auth_headers):
    first = make_project(title="First")
    second = make_project(title="Second")
    create_task(client, auth_headers, first.id, name="A")
    create_task(client, auth_headers, second.id, name="B")

    all_tasks = client.get("/api/tasks", headers=auth_headers).json()
    assert sorted(t["name"] for t in all_tasks) == ["A", "B"]

    filtered = client.get("/api/tasks", params={"project_id": first.id}, headers=auth_headers).json()
    assert [t["name"] for t in filtered] == ["A"]

    assert client.get("/api/tasks", headers=other_auth_headers).json() == []


def test_update_task_status(client, auth_headers, sample_project):
    task_id = create_task(client, auth_headers, sample_project.id).json()["id"]

    response = client.patch(f"/api/tasks/{task_id}", json={"status": "done"}, headers=auth_headers)

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "done"
    assert response.json()["name"] == "Collect receipts"


def test_update_task_forbidden_for_other_owner(client, auth_headers, other_auth_headers, sample_project, db_session):
    task_id = create_task(client, auth_headers, sample_project.id).json()["id"]

    response = client.patch(f"/api/tasks/{task_id}", json={"status": "done"}, headers=other_auth_headers)

    assert response.status_code == status.HTTP_403_FORBIDDEN
    task = db_session.query(Task).filter(Task.id == task_id).first()
    db_session.refresh(task)
    assert task.status == TaskStatus.TODO


def test_update_missing_task(client, auth_headers):
    response = client.patch("/api/tasks/does-not-exist", json={"status": "done"}, headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_delete_task(client, auth_headers, sample_project):
    task_id = create_task(client, auth_headers, sample_project.id).json()["id"]

    response = client.delete(f"/api/tasks/{task_id}", headers=auth_headers)

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True}
    assert client.delete(f"/api/tasks/{task_id}", headers=auth_headers).status_code == status.HTTP_404_NOT_FOUND


def test_delete_task_forbidden_for_other_owner(client, auth_headers, other_auth_headers, sample_project):
    task_id = create_task(client, auth_headers, sample_project.id).json()["id"]

    response = client.delete(f"/api/tasks/{task_id}", headers=other_auth_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_tasks_require_authentication(client):
    assert client.get("/api/tasks").status_code == status.HTTP_401_UNAUTHORIZED
