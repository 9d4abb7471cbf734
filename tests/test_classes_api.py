def test_create_class_embeds_teacher(client, make_user, make_class):
    teacher = make_user("teacher", fullName="Michael Brown")
    cls = make_class(teacher_id=teacher["id"])

    res = client.get(f"/v1/classes/{cls['id']}")
    assert res.status_code == 200
    body = res.json()
    assert body["gradeLevel"] == 9
    assert body["teacher"]["fullName"] == "Michael Brown"
    assert body["teacher"]["role"] == "teacher"


def test_create_class_validation(client, make_user):
    student = make_user("student")
    cases = [
        ({"gradeLevel": 9}, "MISSING_NAME"),
        ({"name": "Grade 9-A"}, "MISSING_GRADE_LEVEL"),
        ({"name": "Grade 13", "gradeLevel": 13}, "INVALID_GRADE_LEVEL"),
        ({"name": "Grade 9-A", "gradeLevel": 9, "teacherId": student["id"]}, "INVALID_TEACHER"),
        ({"name": "Grade 9-A", "gradeLevel": 9, "teacherId": 999}, "INVALID_TEACHER"),
        ({"name": "Grade 9-A", "gradeLevel": "nine"}, "INVALID_GRADE_LEVEL"),
    ]
    for payload, code in cases:
        res = client.post("/v1/classes", json=payload)
        assert res.status_code == 400, payload
        assert res.json()["code"] == code


def test_list_classes_newest_first_with_filters(client, make_user, make_class):
    teacher = make_user("teacher")
    first = make_class(name="Grade 9-A", grade_level=9, teacher_id=teacher["id"])
    second = make_class(name="Grade 10-A", grade_level=10)

    res = client.get("/v1/classes")
    assert [c["id"] for c in res.json()] == [second["id"], first["id"]]

    res = client.get("/v1/classes", params={"gradeLevel": 9})
    assert [c["id"] for c in res.json()] == [first["id"]]

    res = client.get("/v1/classes", params={"teacherId": teacher["id"]})
    assert [c["name"] for c in res.json()] == ["Grade 9-A"]

    res = client.get("/v1/classes", params={"search": "10-"})
    assert [c["name"] for c in res.json()] == ["Grade 10-A"]


def test_update_class(client, make_user, make_class):
    teacher = make_user("teacher")
    cls = make_class(teacher_id=teacher["id"])

    res = client.put(f"/v1/classes/{cls['id']}", json={"name": "Grade 9-C", "teacherId": None})
    assert res.status_code == 200
    assert res.json()["name"] == "Grade 9-C"
    assert res.json()["teacher"] is None

    res = client.put(f"/v1/classes/{cls['id']}", json={})
    assert res.json()["code"] == "NO_UPDATES"

    res = client.put(f"/v1/classes/{cls['id']}", json={"gradeLevel": 0})
    assert res.json()["code"] == "INVALID_GRADE_LEVEL"

    res = client.put("/v1/classes/999", json={"name": "x"})
    assert res.status_code == 404
    assert res.json()["code"] == "CLASS_NOT_FOUND"


def test_delete_class(client, make_class):
    cls = make_class()
    res = client.delete(f"/v1/classes/{cls['id']}")
    assert res.status_code == 200
    assert res.json()["deletedClass"]["id"] == cls["id"]
    assert client.get(f"/v1/classes/{cls['id']}").status_code == 404


# ==========================================================
# 과목
# ==========================================================

def test_subject_crud(client, make_user, make_class):
    teacher = make_user("teacher")
    cls = make_class(teacher_id=teacher["id"])

    res = client.post(
        "/v1/subjects",
        json={"name": " Mathematics ", "description": "Algebra", "classId": cls["id"], "teacherId": teacher["id"]},
    )
    assert res.status_code == 201
    subject = res.json()
    assert subject["name"] == "Mathematics"

    res = client.get("/v1/subjects", params={"search": "algebra"})
    assert [s["id"] for s in res.json()] == [subject["id"]]

    res = client.put(f"/v1/subjects/{subject['id']}", json={"description": None, "classId": None})
    assert res.status_code == 200
    assert res.json()["description"] is None
    assert res.json()["classId"] is None

    res = client.delete(f"/v1/subjects/{subject['id']}")
    assert res.json()["subject"]["id"] == subject["id"]
    assert client.get(f"/v1/subjects/{subject['id']}").json()["code"] == "SUBJECT_NOT_FOUND"


def test_subject_validation(client, make_user):
    student = make_user("student")
    assert client.post("/v1/subjects", json={"name": ""}).json()["code"] == "MISSING_NAME"
    assert client.post("/v1/subjects", json={"name": "Art", "classId": 999}).json()["code"] == "CLASS_NOT_FOUND"
    res = client.post("/v1/subjects", json={"name": "Art", "teacherId": student["id"]})
    assert res.json()["code"] == "INVALID_TEACHER"
