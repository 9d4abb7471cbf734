from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from database.db import get_db
from models.assignments import Assignment as AssignmentModel
from models.attendance import Attendance as AttendanceModel
from models.classes import Class as ClassModel
from models.student_classes import StudentClass as StudentClassModel
from models.subjects import Subject as SubjectModel
from models.submissions import Submission as SubmissionModel
from models.users import User as UserModel
from schemas.dashboard import PrincipalStats, StudentStats, TeacherStats
from services.exceptions import NotFoundError, RoleMismatchError
from utils.clock import today

router = APIRouter(prefix="/dashboard", tags=["대시보드"])


def _get_user_with_role(db: Session, user_id: int, role: str) -> UserModel:
    user = db.get(UserModel, user_id)
    if user is None:
        raise NotFoundError("User not found", "USER_NOT_FOUND")
    if user.role != role:
        raise RoleMismatchError(f"User must have role {role}", f"INVALID_{role.upper()}_ROLE")
    return user


def _present_rate(query) -> int:
    """출결 쿼리 → present 비율 (%), 기록이 없으면 0"""
    total = query.with_entities(func.count(AttendanceModel.id)).scalar() or 0
    if total == 0:
        return 0
    present = (
        query.filter(AttendanceModel.status == "present")
        .with_entities(func.count(AttendanceModel.id))
        .scalar()
        or 0
    )
    return int(present * 100 / total + 0.5)


# ==========================================================
# [DASHBOARD] 역할별 요약 카드
# ==========================================================

# ✅ 교장: 전체 학생/교사/학급 수 + 오늘 출석률
@router.get("/principal", response_model=PrincipalStats)
def principal_dashboard(db: Session = Depends(get_db)):
    counts = dict(
        db.query(UserModel.role, func.count(UserModel.id)).group_by(UserModel.role).all()
    )
    total_classes = db.query(func.count(ClassModel.id)).scalar() or 0
    todays = db.query(AttendanceModel).filter(AttendanceModel.date == today())

    return PrincipalStats(
        total_students=counts.get("student", 0),
        total_teachers=counts.get("teacher", 0),
        total_classes=total_classes,
        attendance_rate=_present_rate(todays),
    )


# ✅ 교사: 담당 학급/출제 과제/수강생 수 + 채점 대기 제출물
@router.get("/teacher/{teacher_id}", response_model=TeacherStats)
def teacher_dashboard(teacher_id: int, db: Session = Depends(get_db)):
    _get_user_with_role(db, teacher_id, "teacher")

    class_ids = [cid for (cid,) in db.query(ClassModel.id).filter(ClassModel.teacher_id == teacher_id).all()]
    my_assignments = (
        db.query(func.count(AssignmentModel.id)).filter(AssignmentModel.teacher_id == teacher_id).scalar() or 0
    )

    my_students = 0
    if class_ids:
        my_students = (
            db.query(func.count(func.distinct(StudentClassModel.student_id)))
            .filter(StudentClassModel.class_id.in_(class_ids))
            .scalar()
            or 0
        )

    pending_grading = (
        db.query(func.count(SubmissionModel.id))
        .join(AssignmentModel, SubmissionModel.assignment_id == AssignmentModel.id)
        .filter(
            AssignmentModel.teacher_id == teacher_id,
            SubmissionModel.grade.is_(None),
            SubmissionModel.graded_at.is_(None),
        )
        .scalar()
        or 0
    )

    return TeacherStats(
        my_classes=len(class_ids),
        my_assignments=my_assignments,
        my_students=my_students,
        pending_grading=pending_grading,
    )


# ✅ 학생: 수강 학급 수 / 수강 과목의 과제 수 / 출석률 / 미제출 과제 수
@router.get("/student/{student_id}", response_model=StudentStats)
def student_dashboard(student_id: int, db: Session = Depends(get_db)):
    _get_user_with_role(db, student_id, "student")

    class_ids = [
        cid for (cid,) in db.query(StudentClassModel.class_id).filter(StudentClassModel.student_id == student_id).all()
    ]

    assignments = 0
    if class_ids:
        assignments = (
            db.query(func.count(AssignmentModel.id))
            .join(SubjectModel, AssignmentModel.subject_id == SubjectModel.id)
            .filter(SubjectModel.class_id.in_(class_ids))
            .scalar()
            or 0
        )

    submitted = (
        db.query(func.count(SubmissionModel.id)).filter(SubmissionModel.student_id == student_id).scalar() or 0
    )
    records = db.query(AttendanceModel).filter(AttendanceModel.student_id == student_id)

    return StudentStats(
        my_classes=len(class_ids),
        assignments=assignments,
        attendance_rate=_present_rate(records),
        submissions_pending=max(0, assignments - submitted),
    )
