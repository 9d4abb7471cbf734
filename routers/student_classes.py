import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from config.settings import settings
from database.db import get_db
from models.classes import Class as ClassModel
from models.student_classes import StudentClass as StudentClassModel
from models.users import User as UserModel
from schemas.student_classes import Enrollment, EnrollmentCreate, EnrollmentDetail, EnrollmentUpdate
from services.exceptions import DuplicateError, InvalidRequestError, NotFoundError
from services.lookups import require_class, require_student
from utils.validators import clamp_limit

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/student-classes", tags=["수강 등록"])


# ==========================================================
# [공통] 조회 쿼리 / 변환
# ==========================================================
def _detail_query(db: Session):
    """수강 행 + 학생 이름/이메일 + 학급 이름/학년 (LEFT JOIN)"""
    return (
        db.query(
            StudentClassModel,
            UserModel.full_name,
            UserModel.email,
            ClassModel.name,
            ClassModel.grade_level,
        )
        .outerjoin(UserModel, StudentClassModel.student_id == UserModel.id)
        .outerjoin(ClassModel, StudentClassModel.class_id == ClassModel.id)
    )


def _to_detail(row) -> EnrollmentDetail:
    enrollment, student_name, student_email, class_name, grade_level = row
    return EnrollmentDetail(
        id=enrollment.id,
        student_id=enrollment.student_id,
        class_id=enrollment.class_id,
        enrolled_at=enrollment.enrolled_at,
        student_name=student_name,
        student_email=student_email,
        class_name=class_name,
        grade_level=grade_level,
    )


def _get_enrollment_or_404(db: Session, enrollment_id: int) -> StudentClassModel:
    enrollment = db.get(StudentClassModel, enrollment_id)
    if enrollment is None:
        raise NotFoundError("Enrollment not found", "NOT_FOUND")
    return enrollment


def _check_not_enrolled(db: Session, student_id: int, class_id: int, exclude_id: int | None = None):
    query = db.query(StudentClassModel.id).filter(
        StudentClassModel.student_id == student_id,
        StudentClassModel.class_id == class_id,
    )
    if exclude_id is not None:
        query = query.filter(StudentClassModel.id != exclude_id)
    if query.first() is not None:
        raise DuplicateError("Student is already enrolled in this class", "DUPLICATE_ENROLLMENT")


# ==========================================================
# [1단계] 조회
# ==========================================================

# ✅ [READ] 수강 목록 (학생/학급 필터)
@router.get("", response_model=List[EnrollmentDetail])
def list_enrollments(
    limit: Optional[int] = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    student_id: Optional[int] = Query(None, alias="studentId"),
    class_id: Optional[int] = Query(None, alias="classId"),
    db: Session = Depends(get_db),
):
    query = _detail_query(db)
    if student_id is not None:
        query = query.filter(StudentClassModel.student_id == student_id)
    if class_id is not None:
        query = query.filter(StudentClassModel.class_id == class_id)

    limit = clamp_limit(limit, settings.ATTENDANCE_DEFAULT_LIMIT, settings.ATTENDANCE_MAX_LIMIT)
    rows = query.order_by(StudentClassModel.id).offset(offset).limit(limit).all()
    return [_to_detail(row) for row in rows]


# ✅ [READ] 단일 수강 정보
@router.get("/{enrollment_id}", response_model=EnrollmentDetail)
def get_enrollment(enrollment_id: int, db: Session = Depends(get_db)):
    row = _detail_query(db).filter(StudentClassModel.id == enrollment_id).first()
    if row is None:
        raise NotFoundError("Enrollment not found", "NOT_FOUND")
    return _to_detail(row)


# ==========================================================
# [2단계] 등록 / 변경 / 취소
# ==========================================================

# ✅ [CREATE] 학생을 학급에 등록
@router.post("", response_model=Enrollment, status_code=201)
def create_enrollment(payload: EnrollmentCreate, db: Session = Depends(get_db)):
    if not payload.student_id:
        raise InvalidRequestError("studentId is required", "MISSING_STUDENT_ID")
    if not payload.class_id:
        raise InvalidRequestError("classId is required", "MISSING_CLASS_ID")

    require_student(db, payload.student_id)
    require_class(db, payload.class_id)
    _check_not_enrolled(db, payload.student_id, payload.class_id)

    enrollment = StudentClassModel(student_id=payload.student_id, class_id=payload.class_id)
    db.add(enrollment)
    db.commit()
    db.refresh(enrollment)
    logger.info(f"수강 등록: student_id={enrollment.student_id}, class_id={enrollment.class_id}")
    return enrollment


# ✅ [UPDATE] 수강 정보 변경 (학생 또는 학급 교체)
@router.put("/{enrollment_id}", response_model=Enrollment)
def update_enrollment(enrollment_id: int, payload: EnrollmentUpdate, db: Session = Depends(get_db)):
    enrollment = _get_enrollment_or_404(db, enrollment_id)
    data = payload.model_dump(exclude_unset=True)

    if "student_id" in data:
        if data["student_id"] is None:
            raise InvalidRequestError("studentId must be a valid number", "INVALID_STUDENT_ID")
        require_student(db, data["student_id"])
    if "class_id" in data:
        if data["class_id"] is None:
            raise InvalidRequestError("classId must be a valid number", "INVALID_CLASS_ID")
        require_class(db, data["class_id"])

    if not data:
        raise InvalidRequestError("No fields to update", "NO_UPDATES")

    student_id = data.get("student_id", enrollment.student_id)
    class_id = data.get("class_id", enrollment.class_id)
    _check_not_enrolled(db, student_id, class_id, exclude_id=enrollment_id)

    enrollment.student_id = student_id
    enrollment.class_id = class_id
    db.commit()
    db.refresh(enrollment)
    return enrollment


# ✅ [DELETE] 수강 취소
@router.delete("/{enrollment_id}")
def delete_enrollment(enrollment_id: int, db: Session = Depends(get_db)):
    enrollment = _get_enrollment_or_404(db, enrollment_id)
    deleted = Enrollment.model_validate(enrollment)
    db.delete(enrollment)
    db.commit()
    return {"message": "Enrollment deleted successfully", "enrollment": deleted}
