"""Announcements, read receipts and unread counters."""

from __future__ import annotations

from fastapi.testclient import TestClient

from conftest import register


def _post(client: TestClient, teacher: dict, group_id: int, message: str):
    return client.post(
        "/api/announcements",
        json={"groupId": group_id, "message": message},
        headers=teacher["headers"],
    )


def test_owner_posts_announcement(client: TestClient, teacher: dict, group: dict):
    response = _post(client, teacher, group["id"], "Quiz on Friday")

    assert response.status_code == 201
    body = response.json()
    assert body["groupId"] == group["id"]
    assert body["teacherId"] == teacher["user"]["id"]
    assert body["teacherName"] == "Ms Frizzle"
    assert body["message"] == "Quiz on Friday"


def test_only_owner_posts(client: TestClient, student: dict, joined_group: dict):
    other = register(client, "teacher")

    assert _post(client, other, joined_group["id"], "Hi").status_code == 403
    assert _post(client, student, joined_group["id"], "Hi").status_code == 403


def test_post_to_missing_group_is_not_found(client: TestClient, teacher: dict):
    assert _post(client, teacher, 777, "Hi").status_code == 404


def test_listing_is_newest_first_with_read_state(
    client: TestClient, teacher: dict, student: dict, joined_group: dict
):
    group_id = joined_group["id"]
    first = _post(client, teacher, group_id, "First").json()
    second = _post(client, teacher, group_id, "Second").json()

    assert client.get("/api/unread-counts", headers=student["headers"]).json() == {
        "unreadCount": 2
    }

    for _ in range(2):
        response = client.post(
            f"/api/announcements/{first['id']}/read", headers=student["headers"]
        )
        assert response.status_code == 200

    listed = client.get(
        f"/api/announcements/{group_id}", headers=student["headers"]
    ).json()
    assert [item["id"] for item in listed] == [second["id"], first["id"]]
    assert [item["isRead"] for item in listed] == [False, True]
    assert client.get("/api/unread-counts", headers=student["headers"]).json() == {
        "unreadCount": 1
    }

    teacher_view = client.get(
        f"/api/announcements/{group_id}", headers=teacher["headers"]
    ).json()
    assert all(item["isRead"] is None for item in teacher_view)


def test_outsider_cannot_read_announcements(
    client: TestClient, teacher: dict, group: dict
):
    announcement = _post(client, teacher, group["id"], "Members only").json()
    outsider = register(client, "student")

    listing = client.get(f"/api/announcements/{group['id']}", headers=outsider["headers"])
    receipt = client.post(
        f"/api/announcements/{announcement['id']}/read", headers=outsider["headers"]
    )

    assert listing.status_code == 403
    assert receipt.status_code == 403


def test_teacher_unread_count_is_zero(client: TestClient, teacher: dict, group: dict):
    _post(client, teacher, group["id"], "Hello")

    assert client.get("/api/unread-counts", headers=teacher["headers"]).json() == {
        "unreadCount": 0
    }
