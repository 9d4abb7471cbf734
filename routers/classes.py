import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from config.settings import settings
from database.db import get_db
from models.classes import Class as ClassModel
from schemas.classes import Class as ClassSchema, ClassCreate, ClassUpdate
from services.exceptions import InvalidRequestError, NotFoundError
from services.lookups import require_teacher_strict
from utils.validators import clamp_limit, require_text

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/classes", tags=["학급"])


def _get_class_or_404(db: Session, class_id: int) -> ClassModel:
    cls = db.get(ClassModel, class_id)
    if cls is None:
        raise NotFoundError("Class not found", "CLASS_NOT_FOUND")
    return cls


def _check_grade_level(grade_level: int) -> int:
    if grade_level < 1 or grade_level > 12:
        raise InvalidRequestError("Grade level must be a positive integer between 1 and 12", "INVALID_GRADE_LEVEL")
    return grade_level


# ==========================================================
# [1단계] 조회 (담임 교사 요약 포함, 최신순)
# ==========================================================

# ✅ [READ] 학급 목록
@router.get("", response_model=List[ClassSchema])
def list_classes(
    limit: Optional[int] = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    search: Optional[str] = None,
    grade_level: Optional[int] = Query(None, alias="gradeLevel"),
    teacher_id: Optional[int] = Query(None, alias="teacherId"),
    db: Session = Depends(get_db),
):
    query = db.query(ClassModel)
    if search:
        query = query.filter(ClassModel.name.ilike(f"%{search}%"))
    if grade_level is not None:
        query = query.filter(ClassModel.grade_level == grade_level)
    if teacher_id is not None:
        query = query.filter(ClassModel.teacher_id == teacher_id)

    limit = clamp_limit(limit, settings.DEFAULT_PAGE_LIMIT, settings.MAX_PAGE_LIMIT)
    return (
        query.order_by(ClassModel.created_at.desc(), ClassModel.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )


# ✅ [READ] 단일 학급
@router.get("/{class_id}", response_model=ClassSchema)
def get_class(class_id: int, db: Session = Depends(get_db)):
    return _get_class_or_404(db, class_id)


# ==========================================================
# [2단계] 생성 / 수정 / 삭제
# ==========================================================

# ✅ [CREATE] 학급 생성
@router.post("", response_model=ClassSchema, status_code=201)
def create_class(payload: ClassCreate, db: Session = Depends(get_db)):
    name = require_text(payload.name, "Name is required and cannot be empty", "MISSING_NAME")
    if payload.grade_level is None:
        raise InvalidRequestError("Grade level is required", "MISSING_GRADE_LEVEL")
    grade_level = _check_grade_level(payload.grade_level)
    if payload.teacher_id is not None:
        require_teacher_strict(db, payload.teacher_id)

    cls = ClassModel(name=name, grade_level=grade_level, teacher_id=payload.teacher_id)
    db.add(cls)
    db.commit()
    db.refresh(cls)
    logger.info(f"학급 생성: id={cls.id}, name={cls.name}")
    return cls


# ✅ [UPDATE] 학급 수정 (teacherId 를 null 로 보내면 담임 해제)
@router.put("/{class_id}", response_model=ClassSchema)
def update_class(class_id: int, payload: ClassUpdate, db: Session = Depends(get_db)):
    cls = _get_class_or_404(db, class_id)
    data = payload.model_dump(exclude_unset=True)

    if "name" in data:
        cls.name = require_text(data["name"], "Name cannot be empty", "INVALID_NAME")
    if "grade_level" in data:
        if data["grade_level"] is None:
            raise InvalidRequestError("Grade level must be a positive integer between 1 and 12", "INVALID_GRADE_LEVEL")
        cls.grade_level = _check_grade_level(data["grade_level"])
    if "teacher_id" in data:
        if data["teacher_id"] is not None:
            require_teacher_strict(db, data["teacher_id"])
        cls.teacher_id = data["teacher_id"]

    if not data:
        raise InvalidRequestError("No valid fields to update", "NO_UPDATES")

    db.commit()
    db.refresh(cls)
    return cls


# ✅ [DELETE] 학급 삭제
@router.delete("/{class_id}")
def delete_class(class_id: int, db: Session = Depends(get_db)):
    cls = _get_class_or_404(db, class_id)
    deleted = ClassSchema.model_validate(cls)
    db.delete(cls)
    db.commit()
    logger.info(f"학급 삭제: id={class_id}")
    return {"message": "Class deleted successfully", "deletedClass": deleted}
