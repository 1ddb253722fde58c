from fastapi.testclient import TestClient

from tests.conftest import auth_headers, demo_roster


def test_classes_auth_required(app_client: TestClient):
    response = app_client.get("/classes")
    assert response.status_code == 401


def test_seeded_roster_is_listed(app_client: TestClient):
    headers = auth_headers(app_client)
    class_id, students = demo_roster(app_client, headers)

    assert set(students) == {"Emma", "Liam", "Olivia", "Noah", "Ava", "Mason"}
    roster = app_client.get(f"/classes/{class_id}/students", headers=headers).json()
    emma = next(item for item in roster if item["first_name"] == "Emma")
    assert emma["full_name"] == "Emma Johnson"
    assert emma["initials"] == "EJ"
    assert emma["class_id"] == class_id


def test_create_class_and_add_student(app_client: TestClient):
    headers = auth_headers(app_client)

    created = app_client.post(
        "/classes",
        headers=headers,
        json={"name": "Science", "grade_level": "3rd Grade"},
    )
    assert created.status_code == 200, created.text
    classroom = created.json()
    assert len(classroom["class_code"]) == 8

    duplicate = app_client.post(
        "/classes",
        headers=headers,
        json={"name": "Science B", "grade_level": "3rd Grade", "class_code": classroom["class_code"]},
    )
    assert duplicate.status_code == 409

    student = app_client.post(
        f"/classes/{classroom['id']}/students",
        headers=headers,
        json={"first_name": "Maya", "last_name": "Chen"},
    )
    assert student.status_code == 200, student.text

    summaries = app_client.get(f"/classes/{classroom['id']}/points/summaries", headers=headers).json()
    assert summaries == [
        {
            "student_id": student.json()["id"],
            "class_id": classroom["id"],
            "total_points": 0,
            "positive_count": 0,
            "negative_count": 0,
            "last_awarded_at": None,
        }
    ]


def test_unknown_class_is_not_found(app_client: TestClient):
    headers = auth_headers(app_client)
    response = app_client.get("/classes/missing/students", headers=headers)
    assert response.status_code == 404
    assert response.json() == {
        "code": "NOT_FOUND",
        "message": "Class not found",
        "details": {"entity": "class", "id": "missing"},
    }
    assert app_client.get("/classes/missing/points/summaries", headers=headers).status_code == 404


def test_parent_profile_scoring_flow(app_client: TestClient):
    headers = auth_headers(app_client)
    class_id, _ = demo_roster(app_client, headers)

    created = app_client.post(
        f"/classes/{class_id}/parents",
        headers=headers,
        json={"parent_name": "Pat Johnson", "parent_email": "pat@mail.com"},
    )
    assert created.status_code == 200, created.text
    profile = created.json()
    assert profile["hostility_score"] == 100.0
    assert profile["hostility_level"] == "friendly"
    assert profile["should_cc_admin"] is False

    friendly = app_client.post(
        f"/parents/{profile['id']}/messages",
        headers=headers,
        json={"text": "Thanks, we really appreciate the update!"},
    ).json()
    assert friendly["sentiment"] == "positive"
    assert friendly["profile"]["positive_messages"] == 1

    for _ in range(3):
        hostile = app_client.post(
            f"/parents/{profile['id']}/messages",
            headers=headers,
            json={"text": "This is unacceptable, I am furious"},
        ).json()
    assert hostile["sentiment"] == "negative"
    assert hostile["profile"]["total_messages"] == 4
    assert hostile["profile"]["hostility_score"] == 25.0
    assert hostile["profile"]["hostility_level"] == "hostile"
    assert hostile["profile"]["admin_cc_enabled"] is True
    assert hostile["profile"]["should_cc_admin"] is True


def test_parent_flagging(app_client: TestClient):
    headers = auth_headers(app_client)
    class_id, _ = demo_roster(app_client, headers)
    profile = app_client.post(
        f"/classes/{class_id}/parents",
        headers=headers,
        json={"parent_name": "Sam Davis"},
    ).json()

    flagged = app_client.post(
        f"/parents/{profile['id']}/flag",
        headers=headers,
        json={"reason": "Repeated late-night calls"},
    )
    assert flagged.status_code == 200
    assert flagged.json()["is_flagged"] is True
    assert flagged.json()["should_cc_admin"] is True

    only_flagged = app_client.get(f"/classes/{class_id}/parents", headers=headers, params={"flagged": "true"}).json()
    assert [item["id"] for item in only_flagged] == [profile["id"]]

    unflagged = app_client.delete(f"/parents/{profile['id']}/flag", headers=headers)
    assert unflagged.status_code == 200
    assert unflagged.json()["is_flagged"] is False
    assert unflagged.json()["flag_reason"] is None

    assert app_client.get(f"/classes/{class_id}/parents", headers=headers, params={"flagged": "true"}).json() == []
    assert app_client.post("/parents/missing/flag", headers=headers, json={"reason": "x"}).status_code == 404
