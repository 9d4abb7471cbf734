from utils.clock import today


def test_principal_dashboard(client, make_user, make_class):
    make_user("principal")
    teacher = make_user("teacher")
    students = [make_user("student") for _ in range(3)]
    cls = make_class(teacher_id=teacher["id"])

    for student, status in zip(students, ["present", "present", "absent"]):
        client.post(
            "/v1/attendance",
            json={"studentId": student["id"], "classId": cls["id"], "date": today().isoformat(), "status": status},
        )
    # 다른 날짜 기록은 오늘 출석률에 포함되지 않음
    client.post(
        "/v1/attendance",
        json={"studentId": students[2]["id"], "classId": cls["id"], "date": "2020-01-01", "status": "absent"},
    )

    res = client.get("/v1/dashboard/principal")
    assert res.status_code == 200
    assert res.json() == {"totalStudents": 3, "totalTeachers": 1, "totalClasses": 1, "attendanceRate": 67}


def test_principal_dashboard_empty(client):
    assert client.get("/v1/dashboard/principal").json()["attendanceRate"] == 0


def test_teacher_dashboard(client, make_user, make_class):
    teacher = make_user("teacher")
    student_a, student_b = make_user("student"), make_user("student")
    class_a = make_class(name="A", teacher_id=teacher["id"])
    class_b = make_class(name="B", teacher_id=teacher["id"])
    for student_id, class_id in [(student_a["id"], class_a["id"]), (student_a["id"], class_b["id"]), (student_b["id"], class_b["id"])]:
        client.post("/v1/student-classes", json={"studentId": student_id, "classId": class_id})

    assignment = client.post(
        "/v1/assignments",
        json={"title": "Quiz", "teacherId": teacher["id"], "dueDate": "2024-09-30", "totalPoints": 10},
    ).json()
    graded = client.post(
        "/v1/submissions", json={"assignmentId": assignment["id"], "studentId": student_a["id"], "content": "a"}
    ).json()
    client.post("/v1/submissions", json={"assignmentId": assignment["id"], "studentId": student_b["id"], "content": "b"})
    client.put(f"/v1/submissions/{graded['id']}", json={"grade": 9})

    res = client.get(f"/v1/dashboard/teacher/{teacher['id']}")
    assert res.json() == {"myClasses": 2, "myAssignments": 1, "myStudents": 2, "pendingGrading": 1}


def test_student_dashboard(client, make_user, make_class):
    teacher = make_user("teacher")
    student = make_user("student")
    cls = make_class(teacher_id=teacher["id"])
    client.post("/v1/student-classes", json={"studentId": student["id"], "classId": cls["id"]})
    subject = client.post("/v1/subjects", json={"name": "Math", "classId": cls["id"]}).json()
    for title in ["Quiz 1", "Quiz 2", "Quiz 3"]:
        client.post(
            "/v1/assignments",
            json={"title": title, "subjectId": subject["id"], "dueDate": "2024-09-30", "totalPoints": 10},
        )
    client.post("/v1/submissions", json={"assignmentId": 1, "studentId": student["id"], "content": "done"})
    for day, status in [("2024-09-02", "present"), ("2024-09-03", "present"), ("2024-09-04", "late"), ("2024-09-05", "present")]:
        client.post(
            "/v1/attendance",
            json={"studentId": student["id"], "classId": cls["id"], "date": day, "status": status},
        )

    res = client.get(f"/v1/dashboard/student/{student['id']}")
    assert res.json() == {"myClasses": 1, "assignments": 3, "attendanceRate": 75, "submissionsPending": 2}


def test_dashboard_role_checks(client, make_user):
    student = make_user("student")
    res = client.get(f"/v1/dashboard/teacher/{student['id']}")
    assert res.status_code == 400
    assert res.json()["code"] == "INVALID_TEACHER_ROLE"

    res = client.get("/v1/dashboard/student/999")
    assert res.status_code == 404
    assert res.json()["code"] == "USER_NOT_FOUND"
