"""Group creation, join codes and membership management."""

from __future__ import annotations

from fastapi.testclient import TestClient

from classroom.services.join_codes import JOIN_CODE_ALPHABET, generate_join_code
from conftest import register


def test_teacher_creates_group_with_join_code(client: TestClient, teacher: dict):
    response = client.post(
        "/api/groups", json={"name": "  Math 101  "}, headers=teacher["headers"]
    )

    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Math 101"
    assert body["ownerId"] == teacher["user"]["id"]
    assert body["ownerName"] == "Ms Frizzle"
    assert body["memberCount"] == 0
    assert len(body["joinCode"]) == 6
    assert set(body["joinCode"]) <= set(JOIN_CODE_ALPHABET)


def test_join_codes_are_unique(client: TestClient, teacher: dict):
    codes = {
        client.post(
            "/api/groups", json={"name": f"G{i}"}, headers=teacher["headers"]
        ).json()["joinCode"]
        for i in range(10)
    }

    assert len(codes) == 10


def test_generate_join_code_uses_fixed_alphabet():
    code = generate_join_code()

    assert len(code) == 6
    assert all(ch in JOIN_CODE_ALPHABET for ch in code)


def test_student_cannot_create_group(client: TestClient, student: dict):
    response = client.post("/api/groups", json={"name": "Nope"}, headers=student["headers"])

    assert response.status_code == 403
    assert response.json()["message"] == "Teacher access required"


def test_blank_group_name_is_rejected(client: TestClient, teacher: dict):
    response = client.post("/api/groups", json={"name": "   "}, headers=teacher["headers"])

    assert response.status_code == 400


def test_join_flow_and_membership_listing(
    client: TestClient, teacher: dict, student: dict, group: dict
):
    response = client.post(
        "/api/groups/join",
        json={"joinCode": group["joinCode"].lower()},
        headers=student["headers"],
    )

    assert response.status_code == 200
    assert response.json()["group"]["memberCount"] == 1

    members = client.get(
        f"/api/groups/{group['id']}/members", headers=teacher["headers"]
    ).json()
    assert [member["id"] for member in members] == [student["user"]["id"]]

    listed = client.get("/api/groups", headers=student["headers"]).json()
    assert [item["id"] for item in listed] == [group["id"]]


def test_join_twice_is_conflict(client: TestClient, student: dict, joined_group: dict):
    response = client.post(
        "/api/groups/join",
        json={"joinCode": joined_group["joinCode"]},
        headers=student["headers"],
    )

    assert response.status_code == 409
    assert response.json()["message"] == "Already a member"


def test_teacher_cannot_join(client: TestClient, group: dict):
    other = register(client, "teacher")

    response = client.post(
        "/api/groups/join", json={"joinCode": group["joinCode"]}, headers=other["headers"]
    )

    assert response.status_code == 403


def test_join_with_unknown_code_is_not_found(client: TestClient, student: dict):
    response = client.post(
        "/api/groups/join", json={"joinCode": "ZZZZZZ"}, headers=student["headers"]
    )

    assert response.status_code == 404


def test_teacher_lists_only_owned_groups(client: TestClient, teacher: dict, group: dict):
    other = register(client, "teacher")
    client.post("/api/groups", json={"name": "Other"}, headers=other["headers"])

    listed = client.get("/api/groups", headers=teacher["headers"]).json()

    assert [item["id"] for item in listed] == [group["id"]]


def test_outsider_cannot_read_group(client: TestClient, group: dict):
    outsider = register(client, "student")

    response = client.get(f"/api/groups/{group['id']}", headers=outsider["headers"])

    assert response.status_code == 403


def test_missing_group_is_not_found_before_ownership(client: TestClient, teacher: dict):
    response = client.delete("/api/groups/999", headers=teacher["headers"])

    assert response.status_code == 404


def test_only_owner_deletes_group(client: TestClient, group: dict):
    other = register(client, "teacher")

    response = client.delete(f"/api/groups/{group['id']}", headers=other["headers"])

    assert response.status_code == 403


def test_delete_group_cascades(
    client: TestClient, teacher: dict, student: dict, joined_group: dict
):
    group_id = joined_group["id"]
    task = client.post(
        f"/api/groups/{group_id}/tasks",
        data={"title": "Essay", "dueDate": "2030-01-01T00:00:00Z"},
        headers=teacher["headers"],
    ).json()
    client.post(
        f"/api/tasks/{task['id']}/submit",
        data={"textContent": "done"},
        headers=student["headers"],
    )
    client.post(
        "/api/announcements",
        json={"groupId": group_id, "message": "Hello"},
        headers=teacher["headers"],
    )

    response = client.delete(f"/api/groups/{group_id}", headers=teacher["headers"])

    assert response.status_code == 200
    assert client.get(f"/api/groups/{group_id}", headers=teacher["headers"]).status_code == 404
    assert client.get(f"/api/tasks/{task['id']}", headers=teacher["headers"]).status_code == 404
    assert client.get("/api/groups", headers=student["headers"]).json() == []


def test_leave_group_keeps_submissions(
    client: TestClient, teacher: dict, student: dict, joined_group: dict
):
    group_id = joined_group["id"]
    task = client.post(
        f"/api/groups/{group_id}/tasks",
        data={"title": "Essay", "dueDate": "2030-01-01T00:00:00Z"},
        headers=teacher["headers"],
    ).json()
    client.post(
        f"/api/tasks/{task['id']}/submit",
        data={"textContent": "done"},
        headers=student["headers"],
    )

    response = client.post(f"/api/groups/{group_id}/leave", headers=student["headers"])

    assert response.status_code == 200
    submissions = client.get(
        f"/api/tasks/{task['id']}/submissions", headers=teacher["headers"]
    ).json()
    assert len(submissions) == 1


def test_leave_without_membership_is_not_found(
    client: TestClient, student: dict, group: dict
):
    response = client.post(f"/api/groups/{group['id']}/leave", headers=student["headers"])

    assert response.status_code == 404


def test_owner_removes_member(
    client: TestClient, teacher: dict, student: dict, joined_group: dict
):
    group_id = joined_group["id"]

    response = client.delete(
        f"/api/groups/{group_id}/members/{student['user']['id']}",
        headers=teacher["headers"],
    )

    assert response.status_code == 200
    group = client.get(f"/api/groups/{group_id}", headers=teacher["headers"]).json()
    assert group["memberCount"] == 0


def test_non_owner_cannot_remove_member(
    client: TestClient, student: dict, joined_group: dict
):
    other = register(client, "teacher")

    response = client.delete(
        f"/api/groups/{joined_group['id']}/members/{student['user']['id']}",
        headers=other["headers"],
    )

    assert response.status_code == 403
