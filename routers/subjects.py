from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

from config.settings import settings
from database.db import get_db
from models.subjects import Subject as SubjectModel
from schemas.subjects import Subject as SubjectSchema, SubjectCreate, SubjectUpdate
from services.exceptions import NotFoundError
from services.lookups import require_class, require_teacher_strict
from utils.validators import clamp_limit, require_text, strip_or_none

router = APIRouter(prefix="/subjects", tags=["과목"])


def _get_subject_or_404(db: Session, subject_id: int) -> SubjectModel:
    subject = db.get(SubjectModel, subject_id)
    if subject is None:
        raise NotFoundError("Subject not found", "SUBJECT_NOT_FOUND")
    return subject


# ==========================================================
# [1단계] CRUD 기본 라우터
# ==========================================================

# ✅ [READ] 과목 목록 (이름/설명 검색, 학급/교사 필터)
@router.get("", response_model=List[SubjectSchema])
def list_subjects(
    limit: Optional[int] = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    search: Optional[str] = None,
    class_id: Optional[int] = Query(None, alias="classId"),
    teacher_id: Optional[int] = Query(None, alias="teacherId"),
    db: Session = Depends(get_db),
):
    query = db.query(SubjectModel)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(SubjectModel.name.ilike(pattern), SubjectModel.description.ilike(pattern)))
    if class_id is not None:
        query = query.filter(SubjectModel.class_id == class_id)
    if teacher_id is not None:
        query = query.filter(SubjectModel.teacher_id == teacher_id)

    limit = clamp_limit(limit, settings.DEFAULT_PAGE_LIMIT, settings.MAX_PAGE_LIMIT)
    return query.order_by(SubjectModel.id).offset(offset).limit(limit).all()


# ✅ [READ] 단일 과목
@router.get("/{subject_id}", response_model=SubjectSchema)
def get_subject(subject_id: int, db: Session = Depends(get_db)):
    return _get_subject_or_404(db, subject_id)


# ✅ [CREATE] 과목 추가
@router.post("", response_model=SubjectSchema, status_code=201)
def create_subject(payload: SubjectCreate, db: Session = Depends(get_db)):
    name = require_text(payload.name, "Name is required and cannot be empty", "MISSING_NAME")
    if payload.class_id is not None:
        require_class(db, payload.class_id)
    if payload.teacher_id is not None:
        require_teacher_strict(db, payload.teacher_id)

    subject = SubjectModel(
        name=name,
        description=strip_or_none(payload.description),
        class_id=payload.class_id,
        teacher_id=payload.teacher_id,
    )
    db.add(subject)
    db.commit()
    db.refresh(subject)
    return subject


# ✅ [UPDATE] 과목 수정 (classId/teacherId/description 은 null 로 해제 가능)
@router.put("/{subject_id}", response_model=SubjectSchema)
def update_subject(subject_id: int, payload: SubjectUpdate, db: Session = Depends(get_db)):
    subject = _get_subject_or_404(db, subject_id)
    data = payload.model_dump(exclude_unset=True)

    if "name" in data:
        subject.name = require_text(data["name"], "Name cannot be empty", "INVALID_NAME")
    if "description" in data:
        subject.description = strip_or_none(data["description"])
    if "class_id" in data:
        if data["class_id"] is not None:
            require_class(db, data["class_id"])
        subject.class_id = data["class_id"]
    if "teacher_id" in data:
        if data["teacher_id"] is not None:
            require_teacher_strict(db, data["teacher_id"])
        subject.teacher_id = data["teacher_id"]

    db.commit()
    db.refresh(subject)
    return subject


# ✅ [DELETE] 과목 삭제
@router.delete("/{subject_id}")
def delete_subject(subject_id: int, db: Session = Depends(get_db)):
    subject = _get_subject_or_404(db, subject_id)
    deleted = SubjectSchema.model_validate(subject)
    db.delete(subject)
    db.commit()
    return {"message": "Subject deleted successfully", "subject": deleted}
