import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from config.settings import settings
from database.db import get_db
from models.submissions import Submission as SubmissionModel
from schemas.submissions import Submission as SubmissionSchema, SubmissionCreate, SubmissionUpdate
from services.exceptions import InvalidRequestError, NotFoundError
from services.lookups import require_assignment, require_student
from utils.clock import utc_now
from utils.validators import clamp_limit, parse_iso_datetime, strip_or_none

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/submissions", tags=["과제 제출"])


def _get_submission_or_404(db: Session, submission_id: int) -> SubmissionModel:
    submission = db.get(SubmissionModel, submission_id)
    if submission is None:
        raise NotFoundError("Submission not found", "NOT_FOUND")
    return submission


# ==========================================================
# [1단계] CRUD 기본 라우터
# ==========================================================

# ✅ [READ] 제출물 목록 (과제/학생 필터)
@router.get("", response_model=List[SubmissionSchema])
def list_submissions(
    limit: Optional[int] = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    assignment_id: Optional[int] = Query(None, alias="assignmentId"),
    student_id: Optional[int] = Query(None, alias="studentId"),
    db: Session = Depends(get_db),
):
    query = db.query(SubmissionModel)
    if assignment_id is not None:
        query = query.filter(SubmissionModel.assignment_id == assignment_id)
    if student_id is not None:
        query = query.filter(SubmissionModel.student_id == student_id)

    limit = clamp_limit(limit, settings.DEFAULT_PAGE_LIMIT, settings.MAX_PAGE_LIMIT)
    return query.order_by(SubmissionModel.id).offset(offset).limit(limit).all()


# ✅ [READ] 단일 제출물
@router.get("/{submission_id}", response_model=SubmissionSchema)
def get_submission(submission_id: int, db: Session = Depends(get_db)):
    return _get_submission_or_404(db, submission_id)


# ✅ [CREATE] 과제 제출 (내용 또는 파일 URL 중 하나는 필수)
@router.post("", response_model=SubmissionSchema, status_code=201)
def create_submission(payload: SubmissionCreate, db: Session = Depends(get_db)):
    if not payload.assignment_id:
        raise InvalidRequestError("assignmentId is required", "MISSING_ASSIGNMENT_ID")
    if not payload.student_id:
        raise InvalidRequestError("studentId is required", "MISSING_STUDENT_ID")

    content = strip_or_none(payload.content)
    file_url = strip_or_none(payload.file_url)
    if not content and not file_url:
        raise InvalidRequestError("At least one of content or fileUrl must be provided", "MISSING_SUBMISSION_DATA")

    require_assignment(db, payload.assignment_id)
    require_student(db, payload.student_id)

    submission = SubmissionModel(
        assignment_id=payload.assignment_id,
        student_id=payload.student_id,
        content=content,
        file_url=file_url,
    )
    db.add(submission)
    db.commit()
    db.refresh(submission)
    logger.info(f"과제 제출: assignment_id={submission.assignment_id}, student_id={submission.student_id}")
    return submission


# ✅ [UPDATE] 제출물 수정 / 채점
#    - grade 를 매기면서 gradedAt 을 보내지 않으면 현재 시각으로 자동 기록
@router.put("/{submission_id}", response_model=SubmissionSchema)
def update_submission(submission_id: int, payload: SubmissionUpdate, db: Session = Depends(get_db)):
    submission = _get_submission_or_404(db, submission_id)
    data = payload.model_dump(exclude_unset=True)

    grade = data.get("grade")
    if grade is not None and grade < 0:
        raise InvalidRequestError("Grade must be a non-negative integer", "INVALID_GRADE")

    if "content" in data:
        submission.content = strip_or_none(data["content"])
    if "file_url" in data:
        submission.file_url = strip_or_none(data["file_url"])
    if "grade" in data:
        submission.grade = grade
    if "feedback" in data:
        submission.feedback = strip_or_none(data["feedback"])
    if "graded_at" in data:
        graded_at = strip_or_none(data["graded_at"])
        submission.graded_at = (
            parse_iso_datetime(graded_at, "gradedAt must be a valid ISO timestamp", "INVALID_GRADED_AT")
            if graded_at
            else None
        )
    elif grade is not None:
        submission.graded_at = utc_now()

    db.commit()
    db.refresh(submission)
    return submission


# ✅ [DELETE] 제출물 삭제
@router.delete("/{submission_id}")
def delete_submission(submission_id: int, db: Session = Depends(get_db)):
    submission = _get_submission_or_404(db, submission_id)
    deleted = SubmissionSchema.model_validate(submission)
    db.delete(submission)
    db.commit()
    return {"message": "Submission deleted successfully", "submission": deleted}
