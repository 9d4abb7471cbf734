from datetime import date

import pytest

from models.attendance import Attendance as AttendanceModel
from models.classes import Class as ClassModel
from models.users import User as UserModel
from services import attendance_recorder
from services.attendance_recorder import mark_attendance, resolve_student
from services.exceptions import (
    DuplicateError,
    InvalidRequestError,
    ReferenceNotFoundError,
    RoleMismatchError,
)

DAY = date(2024, 9, 2)


@pytest.fixture()
def school(db_session):
    teacher = UserModel(email="t@school.com", full_name="Teacher", role="teacher")
    principal = UserModel(email="p@school.com", full_name="Principal", role="principal")
    student = UserModel(email="s@school.com", full_name="Student", role="student", qr_code="QR-1-STUDNT")
    db_session.add_all([teacher, principal, student])
    db_session.flush()
    cls = ClassModel(name="Grade 9-A", grade_level=9, teacher_id=teacher.id)
    db_session.add(cls)
    db_session.commit()
    return {"teacher": teacher, "principal": principal, "student": student, "class": cls}


def test_marks_by_scan_code(db_session, school):
    record = mark_attendance(db_session, "QR-1-STUDNT", school["class"].id, DAY, marked_by=school["teacher"].id)

    assert record.id is not None
    assert record.student_id == school["student"].id
    assert record.status == "present"
    assert record.created_at is not None


def test_marks_by_numeric_id(db_session, school):
    record = mark_attendance(db_session, school["student"].id, school["class"].id, DAY, status="late")
    assert record.status == "late"

    by_string = resolve_student(db_session, str(school["student"].id))
    assert by_string.id == school["student"].id


def test_duplicate_leaves_original_unchanged(db_session, school):
    original = mark_attendance(db_session, "QR-1-STUDNT", school["class"].id, DAY)

    with pytest.raises(DuplicateError) as exc:
        mark_attendance(db_session, "QR-1-STUDNT", school["class"].id, DAY, status="absent")
    assert exc.value.code == "DUPLICATE_ATTENDANCE"

    rows = db_session.query(AttendanceModel).all()
    assert len(rows) == 1
    assert rows[0].id == original.id
    assert rows[0].status == "present"


def test_unique_constraint_catches_duplicate_missed_by_precheck(db_session, school, monkeypatch):
    original = mark_attendance(db_session, "QR-1-STUDNT", school["class"].id, DAY)

    # 다른 요청이 중복 검사 직후에 먼저 기록한 상황
    monkeypatch.setattr(attendance_recorder, "find_existing", lambda *args: None)

    with pytest.raises(DuplicateError) as exc:
        mark_attendance(db_session, "QR-1-STUDNT", school["class"].id, DAY, status="absent")
    assert exc.value.code == "DUPLICATE_ATTENDANCE"

    rows = db_session.query(AttendanceModel).all()
    assert len(rows) == 1
    assert rows[0].id == original.id
    assert rows[0].status == "present"


def test_same_student_other_day_is_allowed(db_session, school):
    mark_attendance(db_session, "QR-1-STUDNT", school["class"].id, DAY)
    mark_attendance(db_session, "QR-1-STUDNT", school["class"].id, date(2024, 9, 3))
    assert db_session.query(AttendanceModel).count() == 2


def test_non_student_is_role_mismatch_not_not_found(db_session, school):
    with pytest.raises(RoleMismatchError) as exc:
        mark_attendance(db_session, school["principal"].id, school["class"].id, DAY)
    assert exc.value.code == "INVALID_STUDENT_ROLE"


def test_unknown_code_is_not_found(db_session, school):
    with pytest.raises(ReferenceNotFoundError) as exc:
        mark_attendance(db_session, "QR-0-NOBODY", school["class"].id, DAY)
    assert exc.value.code == "STUDENT_NOT_FOUND"


def test_unknown_class(db_session, school):
    with pytest.raises(ReferenceNotFoundError) as exc:
        mark_attendance(db_session, "QR-1-STUDNT", 999, DAY)
    assert exc.value.code == "CLASS_NOT_FOUND"


def test_marker_must_be_teacher(db_session, school):
    with pytest.raises(ReferenceNotFoundError) as exc:
        mark_attendance(db_session, "QR-1-STUDNT", school["class"].id, DAY, marked_by=999)
    assert exc.value.code == "TEACHER_NOT_FOUND"

    with pytest.raises(RoleMismatchError) as exc:
        mark_attendance(db_session, "QR-1-STUDNT", school["class"].id, DAY, marked_by=school["principal"].id)
    assert exc.value.code == "INVALID_TEACHER_ROLE"
    assert db_session.query(AttendanceModel).count() == 0


def test_invalid_status(db_session, school):
    with pytest.raises(InvalidRequestError) as exc:
        mark_attendance(db_session, "QR-1-STUDNT", school["class"].id, DAY, status="excused")
    assert exc.value.code == "INVALID_STATUS"
