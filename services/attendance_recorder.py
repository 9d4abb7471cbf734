"""
services/attendance_recorder.py

- 출결 기록 생성의 유일한 경로 (REST POST / QR 스캔 공용)
- 검증 순서: 학생(존재 → 역할) → 학급 → 기록자(존재 → 교사 역할) → 중복
- (학생, 학급, 날짜) 유니크 제약이 동시 요청 경합을 막고, 위반은 DUPLICATE_ATTENDANCE 로 보고
"""

import logging
from datetime import date

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.attendance import ATTENDANCE_STATUSES, Attendance as AttendanceModel
from models.users import User as UserModel
from services.exceptions import DuplicateError, InvalidRequestError, ReferenceNotFoundError
from services.lookups import require_class, require_student, require_teacher

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "Attendance record already exists for this student, class, and date"


def resolve_student(db: Session, decoded_id: str | int) -> UserModel:
    """
    스캔 코드 또는 숫자 사용자 ID 로 학생을 찾는다.
    - 없으면 STUDENT_NOT_FOUND, 학생이 아니면 INVALID_STUDENT_ROLE
    """
    if isinstance(decoded_id, int):
        return require_student(db, decoded_id)

    identifier = str(decoded_id).strip()
    user = db.query(UserModel).filter(UserModel.qr_code == identifier).first()
    if user is None and identifier.isdigit():
        return require_student(db, int(identifier))
    if user is None:
        raise ReferenceNotFoundError("Student not found", "STUDENT_NOT_FOUND")
    return require_student(db, user.id)


def find_existing(db: Session, student_id: int, class_id: int, on_date: date):
    return (
        db.query(AttendanceModel.id)
        .filter(
            AttendanceModel.student_id == student_id,
            AttendanceModel.class_id == class_id,
            AttendanceModel.date == on_date,
        )
        .first()
    )


def mark_attendance(
    db: Session,
    decoded_id: str | int,
    class_id: int,
    on_date: date,
    marked_by: int | None = None,
    status: str = "present",
) -> AttendanceModel:
    if status not in ATTENDANCE_STATUSES:
        raise InvalidRequestError("status must be one of: present, absent, late", "INVALID_STATUS")

    student = resolve_student(db, decoded_id)
    require_class(db, class_id)
    if marked_by is not None:
        require_teacher(db, marked_by)

    if find_existing(db, student.id, class_id, on_date) is not None:
        raise DuplicateError(DUPLICATE_MESSAGE, "DUPLICATE_ATTENDANCE")

    record = AttendanceModel(
        student_id=student.id,
        class_id=class_id,
        date=on_date,
        status=status,
        marked_by=marked_by,
    )
    db.add(record)
    try:
        db.commit()
    except IntegrityError:
        # 중복 검사와 insert 사이에 다른 요청이 먼저 기록한 경우
        db.rollback()
        raise DuplicateError(DUPLICATE_MESSAGE, "DUPLICATE_ATTENDANCE")
    db.refresh(record)

    logger.info(
        f"출결 기록: student_id={student.id}, class_id={class_id}, date={on_date}, status={status}"
    )
    return record
