import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

from config.settings import settings
from database.db import get_db
from models.assignments import Assignment as AssignmentModel
from schemas.assignments import Assignment as AssignmentSchema, AssignmentCreate, AssignmentUpdate
from services.exceptions import InvalidRequestError, NotFoundError
from services.lookups import require_subject, require_teacher
from utils.validators import clamp_limit, parse_iso_datetime, require_text, strip_or_none

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assignments", tags=["과제"])

DUE_DATE_MESSAGE = "Due date must be a valid ISO timestamp"


def _get_assignment_or_404(db: Session, assignment_id: int) -> AssignmentModel:
    assignment = db.get(AssignmentModel, assignment_id)
    if assignment is None:
        raise NotFoundError("Assignment not found", "NOT_FOUND")
    return assignment


def _check_total_points(total_points: int | None) -> int:
    if total_points is None or total_points <= 0:
        raise InvalidRequestError("Total points must be a positive integer", "INVALID_TOTAL_POINTS")
    return total_points


# ==========================================================
# [1단계] 조회 (최신순)
# ==========================================================

# ✅ [READ] 과제 목록
@router.get("", response_model=List[AssignmentSchema])
def list_assignments(
    limit: Optional[int] = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    search: Optional[str] = None,
    subject_id: Optional[int] = Query(None, alias="subjectId"),
    teacher_id: Optional[int] = Query(None, alias="teacherId"),
    db: Session = Depends(get_db),
):
    query = db.query(AssignmentModel)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(AssignmentModel.title.ilike(pattern), AssignmentModel.description.ilike(pattern)))
    if subject_id is not None:
        query = query.filter(AssignmentModel.subject_id == subject_id)
    if teacher_id is not None:
        query = query.filter(AssignmentModel.teacher_id == teacher_id)

    limit = clamp_limit(limit, settings.DEFAULT_PAGE_LIMIT, settings.MAX_PAGE_LIMIT)
    return (
        query.order_by(AssignmentModel.created_at.desc(), AssignmentModel.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )


# ✅ [READ] 단일 과제
@router.get("/{assignment_id}", response_model=AssignmentSchema)
def get_assignment(assignment_id: int, db: Session = Depends(get_db)):
    return _get_assignment_or_404(db, assignment_id)


# ==========================================================
# [2단계] 생성 / 수정 / 삭제
# ==========================================================

# ✅ [CREATE] 과제 출제
@router.post("", response_model=AssignmentSchema, status_code=201)
def create_assignment(payload: AssignmentCreate, db: Session = Depends(get_db)):
    title = require_text(payload.title, "Title is required and cannot be empty", "MISSING_TITLE")
    if not payload.due_date:
        raise InvalidRequestError("Due date is required", "MISSING_DUE_DATE")
    if payload.total_points is None:
        raise InvalidRequestError("Total points is required", "MISSING_TOTAL_POINTS")

    due_date = parse_iso_datetime(payload.due_date, DUE_DATE_MESSAGE, "INVALID_DUE_DATE")
    total_points = _check_total_points(payload.total_points)
    if payload.subject_id is not None:
        require_subject(db, payload.subject_id)
    if payload.teacher_id is not None:
        require_teacher(db, payload.teacher_id)

    assignment = AssignmentModel(
        title=title,
        description=strip_or_none(payload.description),
        subject_id=payload.subject_id,
        teacher_id=payload.teacher_id,
        due_date=due_date,
        total_points=total_points,
    )
    db.add(assignment)
    db.commit()
    db.refresh(assignment)
    logger.info(f"과제 생성: id={assignment.id}, subject_id={assignment.subject_id}")
    return assignment


# ✅ [UPDATE] 과제 수정
@router.put("/{assignment_id}", response_model=AssignmentSchema)
def update_assignment(assignment_id: int, payload: AssignmentUpdate, db: Session = Depends(get_db)):
    assignment = _get_assignment_or_404(db, assignment_id)
    data = payload.model_dump(exclude_unset=True)

    if "title" in data:
        assignment.title = require_text(data["title"], "Title cannot be empty", "INVALID_TITLE")
    if "description" in data:
        assignment.description = strip_or_none(data["description"])
    if "due_date" in data:
        assignment.due_date = parse_iso_datetime(data["due_date"], DUE_DATE_MESSAGE, "INVALID_DUE_DATE")
    if "total_points" in data:
        assignment.total_points = _check_total_points(data["total_points"])
    if "subject_id" in data:
        if data["subject_id"] is not None:
            require_subject(db, data["subject_id"])
        assignment.subject_id = data["subject_id"]
    if "teacher_id" in data:
        if data["teacher_id"] is not None:
            require_teacher(db, data["teacher_id"])
        assignment.teacher_id = data["teacher_id"]

    if not data:
        raise InvalidRequestError("No fields to update", "NO_UPDATES")

    db.commit()
    db.refresh(assignment)
    return assignment


# ✅ [DELETE] 과제 삭제
@router.delete("/{assignment_id}")
def delete_assignment(assignment_id: int, db: Session = Depends(get_db)):
    assignment = _get_assignment_or_404(db, assignment_id)
    deleted = AssignmentSchema.model_validate(assignment)
    db.delete(assignment)
    db.commit()
    return {"message": "Assignment deleted successfully", "assignment": deleted}
