import pytest


@pytest.fixture()
def subject(client, make_user, make_class):
    teacher = make_user("teacher")
    cls = make_class(teacher_id=teacher["id"])
    res = client.post("/v1/subjects", json={"name": "Mathematics", "classId": cls["id"], "teacherId": teacher["id"]})
    return {**res.json(), "teacher": teacher, "class": cls}


def _assignment_payload(subject, **overrides):
    payload = {
        "title": "Algebra Quiz 1",
        "description": "Linear equations",
        "subjectId": subject["id"],
        "teacherId": subject["teacher"]["id"],
        "dueDate": "2024-09-30T23:59:00Z",
        "totalPoints": 50,
    }
    payload.update(overrides)
    return payload


def test_create_and_get_assignment(client, subject):
    res = client.post("/v1/assignments", json=_assignment_payload(subject))
    assert res.status_code == 201
    assignment = res.json()
    assert assignment["totalPoints"] == 50
    assert assignment["dueDate"].startswith("2024-09-30T23:59")

    res = client.get(f"/v1/assignments/{assignment['id']}")
    assert res.json()["title"] == "Algebra Quiz 1"


def test_assignment_validation(client, subject, make_user):
    student = make_user("student")
    cases = [
        ({"title": " "}, "MISSING_TITLE"),
        ({"dueDate": None}, "MISSING_DUE_DATE"),
        ({"totalPoints": None}, "MISSING_TOTAL_POINTS"),
        ({"dueDate": "next friday"}, "INVALID_DUE_DATE"),
        ({"totalPoints": 0}, "INVALID_TOTAL_POINTS"),
        ({"totalPoints": "10"}, "INVALID_TOTAL_POINTS"),
        ({"subjectId": 999}, "SUBJECT_NOT_FOUND"),
        ({"teacherId": 999}, "TEACHER_NOT_FOUND"),
        ({"teacherId": student["id"]}, "INVALID_TEACHER_ROLE"),
    ]
    for overrides, code in cases:
        res = client.post("/v1/assignments", json=_assignment_payload(subject, **overrides))
        assert res.status_code == 400, overrides
        assert res.json()["code"] == code


def test_list_assignments_newest_first(client, subject):
    first = client.post("/v1/assignments", json=_assignment_payload(subject, title="Quiz 1")).json()
    second = client.post("/v1/assignments", json=_assignment_payload(subject, title="Quiz 2")).json()

    res = client.get("/v1/assignments", params={"subjectId": subject["id"]})
    assert [a["id"] for a in res.json()] == [second["id"], first["id"]]

    res = client.get("/v1/assignments", params={"search": "quiz 1"})
    assert [a["id"] for a in res.json()] == [first["id"]]


def test_update_assignment(client, subject):
    assignment = client.post("/v1/assignments", json=_assignment_payload(subject)).json()

    res = client.put(f"/v1/assignments/{assignment['id']}", json={"totalPoints": 80, "subjectId": None})
    assert res.status_code == 200
    assert res.json()["totalPoints"] == 80
    assert res.json()["subjectId"] is None

    assert client.put(f"/v1/assignments/{assignment['id']}", json={}).json()["code"] == "NO_UPDATES"
    assert client.put(f"/v1/assignments/{assignment['id']}", json={"title": ""}).json()["code"] == "INVALID_TITLE"

    res = client.put("/v1/assignments/999", json={"title": "x"})
    assert res.status_code == 404
    assert res.json()["code"] == "NOT_FOUND"


def test_delete_assignment(client, subject):
    assignment = client.post("/v1/assignments", json=_assignment_payload(subject)).json()
    res = client.delete(f"/v1/assignments/{assignment['id']}")
    assert res.json()["assignment"]["id"] == assignment["id"]


# ==========================================================
# 과제 제출 / 채점
# ==========================================================

def test_submission_and_grading(client, subject, make_user):
    student = make_user("student")
    assignment = client.post("/v1/assignments", json=_assignment_payload(subject)).json()

    res = client.post(
        "/v1/submissions",
        json={"assignmentId": assignment["id"], "studentId": student["id"], "content": "x = 4"},
    )
    assert res.status_code == 201
    submission = res.json()
    assert submission["gradedAt"] is None
    assert submission["submittedAt"]

    # 점수만 보내면 채점 시각 자동 기록
    res = client.put(f"/v1/submissions/{submission['id']}", json={"grade": 45, "feedback": "Good"})
    assert res.status_code == 200
    assert res.json()["grade"] == 45
    assert res.json()["gradedAt"] is not None

    res = client.put(f"/v1/submissions/{submission['id']}", json={"grade": -1})
    assert res.json()["code"] == "INVALID_GRADE"

    res = client.get("/v1/submissions", params={"studentId": student["id"]})
    assert [s["id"] for s in res.json()] == [submission["id"]]

    res = client.delete(f"/v1/submissions/{submission['id']}")
    assert res.json()["submission"]["id"] == submission["id"]


def test_submission_validation(client, subject, make_user):
    student = make_user("student")
    teacher = subject["teacher"]
    assignment = client.post("/v1/assignments", json=_assignment_payload(subject)).json()

    cases = [
        ({"studentId": student["id"], "content": "a"}, "MISSING_ASSIGNMENT_ID"),
        ({"assignmentId": assignment["id"], "content": "a"}, "MISSING_STUDENT_ID"),
        ({"assignmentId": assignment["id"], "studentId": student["id"]}, "MISSING_SUBMISSION_DATA"),
        ({"assignmentId": 999, "studentId": student["id"], "content": "a"}, "ASSIGNMENT_NOT_FOUND"),
        ({"assignmentId": assignment["id"], "studentId": 999, "fileUrl": "f"}, "STUDENT_NOT_FOUND"),
        ({"assignmentId": assignment["id"], "studentId": teacher["id"], "content": "a"}, "INVALID_STUDENT_ROLE"),
    ]
    for payload, code in cases:
        res = client.post("/v1/submissions", json=payload)
        assert res.status_code == 400, payload
        assert res.json()["code"] == code

    assert client.get("/v1/submissions/999").json()["code"] == "NOT_FOUND"
