from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

from config.settings import settings
from database.db import get_db
from models.announcements import AUDIENCES, Announcement as AnnouncementModel
from models.classes import Class as ClassModel
from models.users import User as UserModel
from schemas.announcements import Announcement as AnnouncementSchema, AnnouncementCreate, AnnouncementUpdate
from services.exceptions import InvalidRequestError, NotFoundError, ReferenceNotFoundError
from utils.validators import clamp_limit, require_text

router = APIRouter(prefix="/announcements", tags=["공지사항"])


def _get_announcement_or_404(db: Session, announcement_id: int) -> AnnouncementModel:
    announcement = db.get(AnnouncementModel, announcement_id)
    if announcement is None:
        raise NotFoundError("Announcement not found", "NOT_FOUND")
    return announcement


def _parse_audience(value: Union[int, str]) -> tuple[str, Optional[int]]:
    """
    targetAudience 정규화 → (저장할 문자열, 대상 학급 ID)
    - "all" / "teachers" / "students" 는 그대로
    - 숫자(또는 숫자 문자열)는 학급 ID 로 간주
    """
    audience = str(value).strip()
    if audience in AUDIENCES:
        return audience, None
    if audience.isdigit():
        return audience, int(audience)
    raise InvalidRequestError(
        'Target audience must be "all", "teachers", "students", or a valid class ID',
        "INVALID_TARGET_AUDIENCE",
    )


def _check_class(db: Session, class_id: int):
    if db.get(ClassModel, class_id) is None:
        raise ReferenceNotFoundError("Class ID does not exist", "CLASS_NOT_FOUND")


# ==========================================================
# [1단계] 조회 (최신순)
# ==========================================================

# ✅ [READ] 공지 목록
@router.get("", response_model=List[AnnouncementSchema])
def list_announcements(
    limit: Optional[int] = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    search: Optional[str] = None,
    target_audience: Optional[str] = Query(None, alias="targetAudience"),
    author_id: Optional[int] = Query(None, alias="authorId"),
    class_id: Optional[int] = Query(None, alias="classId"),
    db: Session = Depends(get_db),
):
    query = db.query(AnnouncementModel)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(AnnouncementModel.title.ilike(pattern), AnnouncementModel.content.ilike(pattern)))
    if target_audience:
        query = query.filter(AnnouncementModel.target_audience == target_audience)
    if author_id is not None:
        query = query.filter(AnnouncementModel.author_id == author_id)
    if class_id is not None:
        query = query.filter(AnnouncementModel.class_id == class_id)

    limit = clamp_limit(limit, settings.DEFAULT_PAGE_LIMIT, settings.MAX_PAGE_LIMIT)
    return (
        query.order_by(AnnouncementModel.created_at.desc(), AnnouncementModel.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )


# ✅ [READ] 단일 공지
@router.get("/{announcement_id}", response_model=AnnouncementSchema)
def get_announcement(announcement_id: int, db: Session = Depends(get_db)):
    return _get_announcement_or_404(db, announcement_id)


# ==========================================================
# [2단계] 생성 / 수정 / 삭제
# ==========================================================

# ✅ [CREATE] 공지 작성 (숫자 대상이면 해당 학급 공지)
@router.post("", response_model=AnnouncementSchema, status_code=201)
def create_announcement(payload: AnnouncementCreate, db: Session = Depends(get_db)):
    title = require_text(payload.title, "Title is required", "MISSING_TITLE")
    content = require_text(payload.content, "Content is required", "MISSING_CONTENT")
    if payload.target_audience is None or str(payload.target_audience).strip() == "":
        raise InvalidRequestError("Target audience is required", "MISSING_TARGET_AUDIENCE")
    audience, audience_class_id = _parse_audience(payload.target_audience)

    if payload.author_id is not None and db.get(UserModel, payload.author_id) is None:
        raise ReferenceNotFoundError("Author ID does not exist", "AUTHOR_NOT_FOUND")

    class_id = audience_class_id or payload.class_id
    if class_id:
        _check_class(db, class_id)

    announcement = AnnouncementModel(
        title=title,
        content=content,
        author_id=payload.author_id,
        target_audience=audience,
        class_id=class_id or None,
    )
    db.add(announcement)
    db.commit()
    db.refresh(announcement)
    return announcement


# ✅ [UPDATE] 공지 수정 (작성자는 변경 불가)
@router.put("/{announcement_id}", response_model=AnnouncementSchema)
def update_announcement(announcement_id: int, payload: AnnouncementUpdate, db: Session = Depends(get_db)):
    announcement = _get_announcement_or_404(db, announcement_id)
    data = payload.model_dump(exclude_unset=True)

    if "title" in data:
        announcement.title = require_text(data["title"], "Title cannot be empty", "INVALID_TITLE")
    if "content" in data:
        announcement.content = require_text(data["content"], "Content cannot be empty", "INVALID_CONTENT")

    audience_class_id = None
    if "target_audience" in data:
        if data["target_audience"] is None:
            raise InvalidRequestError(
                'Target audience must be "all", "teachers", "students", or a valid class ID',
                "INVALID_TARGET_AUDIENCE",
            )
        announcement.target_audience, audience_class_id = _parse_audience(data["target_audience"])

    if "class_id" in data:
        announcement.class_id = data["class_id"] or None
    if audience_class_id:
        announcement.class_id = audience_class_id
    if announcement.class_id and ("class_id" in data or audience_class_id):
        _check_class(db, announcement.class_id)

    db.commit()
    db.refresh(announcement)
    return announcement


# ✅ [DELETE] 공지 삭제
@router.delete("/{announcement_id}")
def delete_announcement(announcement_id: int, db: Session = Depends(get_db)):
    announcement = _get_announcement_or_404(db, announcement_id)
    deleted = AnnouncementSchema.model_validate(announcement)
    db.delete(announcement)
    db.commit()
    return {"message": "Announcement deleted successfully", "announcement": deleted}
