"""API tests for time tracking, hours and tasks."""
from timedesk.models.task import TaskStatus, TaskType


def _create_task(client, headers, assignee_id, **extra):
    payload = {"title": "Fix login bug", "assignee_id": str(assignee_id), **extra}
    response = client.post("/api/v1/tasks", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_shift_open_and_start(client, employee_headers):
    response = client.get("/api/v1/tracking/shift", headers=employee_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["record"]["status"] == "not-started"
    assert body["worked_ms"] == 0
    assert body["task"] is None

    response = client.post("/api/v1/tracking/shift/start", headers=employee_headers)
    assert response.status_code == 200
    assert response.json()["record"]["status"] == "working"

    response = client.post("/api/v1/tracking/shift/start", headers=employee_headers)
    assert response.status_code == 409


def test_task_session_lifecycle(client, auth_headers, employee_headers, employee_profile):
    task = _create_task(client, auth_headers, employee_profile.id)

    available = client.get("/api/v1/tracking/tasks/available", headers=employee_headers).json()
    assert [item["id"] for item in available] == [task["id"]]

    response = client.post(f"/api/v1/tracking/tasks/{task['id']}/accept", headers=employee_headers)
    assert response.status_code == 201, response.text
    session = response.json()
    record_id = session["record"]["id"]
    assert session["record"]["status"] == "working"
    assert session["task"]["status"] == "in-progress"

    response = client.post(f"/api/v1/tracking/tasks/{task['id']}/accept", headers=employee_headers)
    assert response.status_code == 409

    assert client.get("/api/v1/tracking/tasks/available", headers=employee_headers).json() == []
    active = client.get("/api/v1/tracking/tasks/active", headers=employee_headers).json()
    assert [item["record"]["id"] for item in active] == [record_id]

    response = client.post(f"/api/v1/tracking/records/{record_id}/pause", headers=employee_headers)
    assert response.status_code == 200
    assert response.json()["record"]["status"] == "paused"
    assert response.json()["record"]["pause_started_at"] is not None

    response = client.post(f"/api/v1/tracking/records/{record_id}/pause", headers=employee_headers)
    assert response.status_code == 409

    response = client.post(f"/api/v1/tracking/records/{record_id}/resume", headers=employee_headers)
    assert response.status_code == 200
    assert response.json()["record"]["status"] == "working"

    response = client.post(f"/api/v1/tracking/records/{record_id}/finish", headers=employee_headers)
    assert response.status_code == 200
    finished = response.json()
    assert finished["record"]["status"] == "finished"
    assert finished["record"]["total_hours"] is not None
    assert finished["task"]["status"] == "completed"

    response = client.get(f"/api/v1/tracking/records/{record_id}", headers=employee_headers)
    assert response.status_code == 200
    assert response.json()["record"]["status"] == "finished"

    assert client.get("/api/v1/tracking/tasks/active", headers=employee_headers).json() == []

    worked = client.get("/api/v1/tracking/worked-today", headers=employee_headers)
    assert worked.status_code == 200
    assert worked.json()["daily_hours"] == 8.0


def test_other_employees_records_are_hidden(client, auth_headers, employee_headers, employee_profile):
    task = _create_task(client, auth_headers, employee_profile.id)
    record_id = client.post(
        f"/api/v1/tracking/tasks/{task['id']}/accept", headers=employee_headers
    ).json()["record"]["id"]

    response = client.post(f"/api/v1/tracking/records/{record_id}/pause", headers=auth_headers)
    assert response.status_code == 404


def test_admin_can_impersonate_employee(client, auth_headers, employee_headers, employee_profile):
    task = _create_task(client, auth_headers, employee_profile.id)
    headers = {**auth_headers, "X-Impersonate-Employee": str(employee_profile.id)}

    response = client.post(f"/api/v1/tracking/tasks/{task['id']}/accept", headers=headers)
    assert response.status_code == 201
    assert response.json()["record"]["employee_id"] == str(employee_profile.id)

    # Regular employees may not impersonate
    headers = {**employee_headers, "X-Impersonate-Employee": str(employee_profile.id)}
    assert client.get("/api/v1/tracking/shift", headers=headers).status_code == 403

    headers = {**auth_headers, "X-Impersonate-Employee": "not-a-uuid"}
    assert client.get("/api/v1/tracking/shift", headers=headers).status_code == 422


def test_hours_endpoints(client, employee_headers, auth_headers, employee_profile, test_user):
    response = client.get("/api/v1/hours/stats", headers=employee_headers)
    assert response.status_code == 200
    assert response.json()["this_month"] == 0

    response = client.get(
        "/api/v1/hours/calendar",
        params={"start": "2024-03-01", "end": "2024-03-07"},
        headers=employee_headers,
    )
    assert response.status_code == 200
    assert len(response.json()) == 7

    response = client.get(
        "/api/v1/hours/calendar",
        params={"start": "2024-01-01", "end": "2025-06-01"},
        headers=employee_headers,
    )
    assert response.status_code == 422

    # Admin may read any employee's hours
    response = client.get(
        "/api/v1/hours/stats", params={"employee_id": str(employee_profile.id)}, headers=auth_headers
    )
    assert response.status_code == 200

    other = client.get("/api/v1/employees/me", headers=auth_headers).json()
    response = client.get(
        "/api/v1/hours/stats", params={"employee_id": other["id"]}, headers=employee_headers
    )
    assert response.status_code == 403


def test_task_maintenance_endpoints(client, auth_headers, employee_headers, employee_profile):
    _create_task(client, auth_headers, employee_profile.id, due_date="2000-01-01")
    _create_task(client, auth_headers, employee_profile.id, title="Stand-up", task_type=TaskType.DAILY.value)

    response = client.post("/api/v1/tasks/maintenance/update-overdue", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["affected"] == 1

    overdue = client.get("/api/v1/tasks/overdue", headers=employee_headers).json()
    assert len(overdue) == 1
    assert overdue[0]["days_overdue"] > 0

    stats = client.get("/api/v1/tasks/overdue/stats", headers=auth_headers).json()
    assert stats["total_overdue"] == 1

    response = client.post("/api/v1/tasks/maintenance/duplicate-daily", headers=auth_headers)
    assert response.json()["affected"] == 1

    response = client.post("/api/v1/tasks/maintenance/reset-daily", headers=auth_headers)
    assert response.status_code == 200

    # Employees cannot run maintenance
    response = client.post("/api/v1/tasks/maintenance/reset-daily", headers=employee_headers)
    assert response.status_code == 403


def test_task_status_and_delete(client, auth_headers, employee_headers, employee_profile):
    task = _create_task(client, auth_headers, employee_profile.id)

    response = client.patch(
        f"/api/v1/tasks/{task['id']}/status",
        json={"status": TaskStatus.COMPLETED.value},
        headers=employee_headers,
    )
    assert response.status_code == 200
    assert response.json()["completed_at"] is not None

    listed = client.get("/api/v1/tasks", params={"status": "completed"}, headers=employee_headers).json()
    assert [item["id"] for item in listed] == [task["id"]]

    assert client.delete(f"/api/v1/tasks/{task['id']}", headers=employee_headers).status_code == 403
    assert client.delete(f"/api/v1/tasks/{task['id']}", headers=auth_headers).status_code == 204
    assert client.get("/api/v1/tasks", headers=auth_headers).json() == []


def test_create_employee_with_account(client, auth_headers):
    response = client.post(
        "/api/v1/employees",
        json={
            "full_name": "New Hire",
            "email": "new.hire@example.com",
            "department": "support",
            "password": "secret123",
        },
        headers=auth_headers,
    )
    assert response.status_code == 201, response.text
    assert response.json()["user_id"] is not None

    response = client.post(
        "/api/v1/auth/login",
        data={"username": "new.hire@example.com", "password": "secret123"},
    )
    assert response.status_code == 200

    response = client.post(
        "/api/v1/employees",
        json={"full_name": "Dup", "email": "new.hire@example.com"},
        headers=auth_headers,
    )
    assert response.status_code == 409


def test_health_and_metrics(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["checks"]["database"] == "ok"

    response = client.get("/metrics")
    assert response.status_code == 200
    assert "http_requests_total" in response.text


def test_update_employee_and_task(client, auth_headers, employee_headers, employee_profile):
    response = client.patch(
        f"/api/v1/employees/{employee_profile.id}",
        json={"daily_hours": 6, "department": "support"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["daily_hours"] == 6.0
    assert response.json()["department"] == "support"

    task = _create_task(client, auth_headers, employee_profile.id)
    response = client.patch(
        f"/api/v1/tasks/{task['id']}",
        json={"title": "Fix signup bug", "archived": True},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["title"] == "Fix signup bug"
    assert response.json()["archived"] is True

    # Archived tasks are no longer offered for tracking
    assert client.get("/api/v1/tracking/tasks/available", headers=employee_headers).json() == []


def test_null_on_required_fields_is_rejected(client, auth_headers, employee_profile):
    for field in ("full_name", "department", "position", "daily_hours"):
        response = client.patch(
            f"/api/v1/employees/{employee_profile.id}", json={field: None}, headers=auth_headers
        )
        assert response.status_code == 422, field

    task = _create_task(client, auth_headers, employee_profile.id)
    for field in ("title", "priority", "task_type", "archived"):
        response = client.patch(f"/api/v1/tasks/{task['id']}", json={field: None}, headers=auth_headers)
        assert response.status_code == 422, field

    # Nullable columns can still be cleared
    response = client.patch(
        f"/api/v1/tasks/{task['id']}", json={"assignee_id": None}, headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["assignee_id"] is None
    assert response.json()["title"] == "Fix login bug"


def test_task_lists_require_employee_profile(client, profileless_headers):
    assert client.get("/api/v1/tasks", headers=profileless_headers).status_code == 403

    response = client.get(
        "/api/v1/tasks/overdue", headers={**profileless_headers, "Accept-Language": "ru"}
    )
    assert response.status_code == 403
    assert response.json()["detail"] == "У пользователя нет профиля сотрудника"


def test_delete_missing_task_is_localized(client, auth_headers):
    response = client.delete(
        "/api/v1/tasks/00000000-0000-0000-0000-000000000001",
        headers={**auth_headers, "Accept-Language": "ru"},
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "Задача не найдена"
