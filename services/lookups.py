"""
services/lookups.py

- 여러 라우터가 공통으로 쓰는 참조 엔티티 검증 함수 모음
- 없으면 ReferenceNotFoundError, 역할이 다르면 RoleMismatchError
"""

from sqlalchemy.orm import Session

from models.assignments import Assignment as AssignmentModel
from models.classes import Class as ClassModel
from models.subjects import Subject as SubjectModel
from models.users import User as UserModel
from services.exceptions import ReferenceNotFoundError, RoleMismatchError


def require_student(db: Session, student_id: int) -> UserModel:
    student = db.get(UserModel, student_id)
    if student is None:
        raise ReferenceNotFoundError("Student not found", "STUDENT_NOT_FOUND")
    if student.role != "student":
        raise RoleMismatchError("User must have role student", "INVALID_STUDENT_ROLE")
    return student


def require_teacher(db: Session, teacher_id: int) -> UserModel:
    teacher = db.get(UserModel, teacher_id)
    if teacher is None:
        raise ReferenceNotFoundError("Teacher not found", "TEACHER_NOT_FOUND")
    if teacher.role != "teacher":
        raise RoleMismatchError("User must have role teacher", "INVALID_TEACHER_ROLE")
    return teacher


def require_teacher_strict(db: Session, teacher_id: int) -> UserModel:
    """학급/과목 담당 교사 검증: 없음과 역할 불일치를 INVALID_TEACHER 하나로 보고"""
    teacher = db.get(UserModel, teacher_id)
    if teacher is None or teacher.role != "teacher":
        raise ReferenceNotFoundError("Teacher not found or user is not a teacher", "INVALID_TEACHER")
    return teacher


def require_class(db: Session, class_id: int) -> ClassModel:
    cls = db.get(ClassModel, class_id)
    if cls is None:
        raise ReferenceNotFoundError("Class not found", "CLASS_NOT_FOUND")
    return cls


def require_subject(db: Session, subject_id: int) -> SubjectModel:
    subject = db.get(SubjectModel, subject_id)
    if subject is None:
        raise ReferenceNotFoundError("Subject not found", "SUBJECT_NOT_FOUND")
    return subject


def require_assignment(db: Session, assignment_id: int) -> AssignmentModel:
    assignment = db.get(AssignmentModel, assignment_id)
    if assignment is None:
        raise ReferenceNotFoundError("Assignment not found", "ASSIGNMENT_NOT_FOUND")
    return assignment
