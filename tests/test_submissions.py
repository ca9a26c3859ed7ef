"""Write-once submissions and grading."""

from __future__ import annotations

from fastapi.testclient import TestClient

from conftest import register


def _task(client: TestClient, teacher: dict, group_id: int) -> dict:
    response = client.post(
        f"/api/groups/{group_id}/tasks",
        data={"title": "Essay", "dueDate": "2030-06-01T12:00:00+02:00"},
        headers=teacher["headers"],
    )
    assert response.status_code == 201, response.text
    return response.json()


def _submit(client: TestClient, student: dict, task_id: int, **kwargs):
    return client.post(f"/api/tasks/{task_id}/submit", headers=student["headers"], **kwargs)


def test_member_submits_text(
    client: TestClient, teacher: dict, student: dict, joined_group: dict
):
    task = _task(client, teacher, joined_group["id"])

    response = _submit(client, student, task["id"], data={"textContent": "  done  "})

    assert response.status_code == 201
    body = response.json()
    assert body["taskId"] == task["id"]
    assert body["studentId"] == student["user"]["id"]
    assert body["textContent"] == "done"
    assert body["score"] is None


def test_submission_with_file_only(
    client: TestClient, teacher: dict, student: dict, joined_group: dict
):
    task = _task(client, teacher, joined_group["id"])

    response = _submit(
        client,
        student,
        task["id"],
        files={"file": ("answer.pdf", b"%PDF-1.4 answer", "application/pdf")},
    )

    assert response.status_code == 201
    assert response.json()["textContent"] is None
    assert response.json()["fileUrl"].endswith(".pdf")


def test_empty_submission_is_rejected(
    client: TestClient, teacher: dict, student: dict, joined_group: dict
):
    task = _task(client, teacher, joined_group["id"])

    response = _submit(client, student, task["id"], data={"textContent": "   "})

    assert response.status_code == 400
    assert response.json()["code"] == "validation_error"


def test_empty_submission_is_rejected_before_lookups(client: TestClient, student: dict):
    response = _submit(client, student, 321, data={"textContent": ""})

    assert response.status_code == 400
    assert response.json()["message"] == "Provide text content or a file"


def test_second_submission_is_conflict(
    client: TestClient, teacher: dict, student: dict, joined_group: dict
):
    task = _task(client, teacher, joined_group["id"])
    assert _submit(client, student, task["id"], data={"textContent": "one"}).status_code == 201

    response = _submit(client, student, task["id"], data={"textContent": "two"})

    assert response.status_code == 409
    mine = client.get(
        f"/api/tasks/{task['id']}/my-submission", headers=student["headers"]
    ).json()
    assert mine["textContent"] == "one"


def test_non_member_cannot_submit(client: TestClient, teacher: dict, group: dict):
    task = _task(client, teacher, group["id"])
    outsider = register(client, "student")

    response = _submit(client, outsider, task["id"], data={"textContent": "hi"})

    assert response.status_code == 403


def test_submit_to_missing_task_is_not_found(client: TestClient, student: dict):
    response = _submit(client, student, 321, data={"textContent": "hi"})

    assert response.status_code == 404


def test_my_submission_is_null_before_submitting(
    client: TestClient, teacher: dict, student: dict, joined_group: dict
):
    task = _task(client, teacher, joined_group["id"])

    response = client.get(
        f"/api/tasks/{task['id']}/my-submission", headers=student["headers"]
    )

    assert response.status_code == 200
    assert response.json() is None


def test_owner_lists_task_submissions(
    client: TestClient, teacher: dict, student: dict, joined_group: dict
):
    task = _task(client, teacher, joined_group["id"])
    _submit(client, student, task["id"], data={"textContent": "done"})

    response = client.get(
        f"/api/tasks/{task['id']}/submissions", headers=teacher["headers"]
    )

    assert response.status_code == 200
    (row,) = response.json()
    assert row["studentName"] == "Arnold"
    assert row["studentEmail"] == student["user"]["email"]

    other = register(client, "teacher")
    denied = client.get(f"/api/tasks/{task['id']}/submissions", headers=other["headers"])
    assert denied.status_code == 403


def test_scoring_overwrites_and_updates_pending(
    client: TestClient, teacher: dict, student: dict, joined_group: dict
):
    task = _task(client, teacher, joined_group["id"])
    submission = _submit(client, student, task["id"], data={"textContent": "done"}).json()

    pending = client.get("/api/submissions/pending", headers=teacher["headers"]).json()
    assert [item["id"] for item in pending] == [submission["id"]]
    assert pending[0]["taskTitle"] == "Essay"

    first = client.patch(
        f"/api/submissions/{submission['id']}/score",
        json={"score": 70},
        headers=teacher["headers"],
    )
    second = client.patch(
        f"/api/submissions/{submission['id']}/score",
        json={"score": 95},
        headers=teacher["headers"],
    )

    assert first.status_code == 200
    assert second.json()["score"] == 95
    assert client.get("/api/submissions/pending", headers=teacher["headers"]).json() == []
    all_rows = client.get("/api/submissions/all", headers=teacher["headers"]).json()
    assert [row["score"] for row in all_rows] == [95]


def test_score_must_be_in_range(
    client: TestClient, teacher: dict, student: dict, joined_group: dict
):
    task = _task(client, teacher, joined_group["id"])
    submission = _submit(client, student, task["id"], data={"textContent": "done"}).json()

    response = client.patch(
        f"/api/submissions/{submission['id']}/score",
        json={"score": 101},
        headers=teacher["headers"],
    )

    assert response.status_code == 400


def test_only_owning_teacher_scores(
    client: TestClient, teacher: dict, student: dict, joined_group: dict
):
    task = _task(client, teacher, joined_group["id"])
    submission = _submit(client, student, task["id"], data={"textContent": "done"}).json()
    other = register(client, "teacher")

    by_other = client.patch(
        f"/api/submissions/{submission['id']}/score",
        json={"score": 50},
        headers=other["headers"],
    )
    by_student = client.patch(
        f"/api/submissions/{submission['id']}/score",
        json={"score": 50},
        headers=student["headers"],
    )
    missing = client.patch(
        "/api/submissions/999/score", json={"score": 50}, headers=teacher["headers"]
    )

    assert by_other.status_code == 403
    assert by_student.status_code == 403
    assert missing.status_code == 404
