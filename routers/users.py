import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from config.settings import settings
from database.db import get_db
from models.users import ROLES, User as UserModel
from schemas.common import make_page_info
from schemas.users import ScanCode, User as UserSchema, UserCreate, UserPage, UserUpdate
from services.exceptions import DuplicateError, InvalidRequestError, NotFoundError
from services.scan_codes import assign_unique_scan_code, ensure_scan_code, render_qr_png
from utils.validators import clamp_limit, is_valid_email, require_text

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["사용자"])

INVALID_ROLE_MESSAGE = "Invalid role. Must be 'principal', 'teacher', or 'student'"


def _get_user_or_404(db: Session, user_id: int) -> UserModel:
    user = db.get(UserModel, user_id)
    if user is None:
        raise NotFoundError("User not found", "USER_NOT_FOUND")
    return user


def _check_role(role: str):
    if role not in ROLES:
        raise InvalidRequestError(INVALID_ROLE_MESSAGE, "INVALID_ROLE")


def _taken(db: Session, column, value, exclude_id: int | None = None) -> bool:
    """다른 사용자가 이미 같은 값을 쓰고 있는지 (수정 시 자기 자신은 제외)"""
    query = db.query(UserModel.id).filter(column == value)
    if exclude_id is not None:
        query = query.filter(UserModel.id != exclude_id)
    return query.first() is not None


# ==========================================================
# [1단계] 조회
# ==========================================================

# ✅ [READ] 사용자 목록 (검색/역할 필터/페이지네이션), clerkId 지정 시 단건
@router.get("")
def list_users(
    limit: Optional[int] = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    search: Optional[str] = None,
    role: Optional[str] = None,
    clerk_id: Optional[str] = Query(None, alias="clerkId"),
    db: Session = Depends(get_db),
):
    if clerk_id:
        user = db.query(UserModel).filter(UserModel.clerk_id == clerk_id).first()
        if user is None:
            raise NotFoundError("User not found", "USER_NOT_FOUND")
        return UserSchema.model_validate(user)

    limit = clamp_limit(limit, settings.DEFAULT_PAGE_LIMIT, settings.MAX_PAGE_LIMIT)

    query = db.query(UserModel)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(UserModel.email.ilike(pattern), UserModel.full_name.ilike(pattern)))
    if role:
        _check_role(role)
        query = query.filter(UserModel.role == role)

    total = query.with_entities(func.count(UserModel.id)).scalar() or 0
    users = query.order_by(UserModel.id).offset(offset).limit(limit).all()

    return UserPage(
        data=[UserSchema.model_validate(u) for u in users],
        pagination=make_page_info(limit, offset, total),
    )


# ✅ [READ] 단일 사용자
@router.get("/{user_id}", response_model=UserSchema)
def get_user(user_id: int, db: Session = Depends(get_db)):
    return _get_user_or_404(db, user_id)


# ==========================================================
# [2단계] 생성 / 수정 / 삭제
# ==========================================================

# ✅ [CREATE] 사용자 등록 (학생은 스캔 코드 자동 발급)
@router.post("", response_model=UserSchema, status_code=201)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    if not payload.email:
        raise InvalidRequestError("Email is required", "MISSING_EMAIL")
    full_name = require_text(payload.full_name, "Full name is required and cannot be empty", "MISSING_FULL_NAME")
    if not payload.role:
        raise InvalidRequestError("Role is required", "MISSING_ROLE")
    if not is_valid_email(payload.email):
        raise InvalidRequestError("Invalid email format", "INVALID_EMAIL_FORMAT")
    _check_role(payload.role)

    email = payload.email.strip().lower()
    if _taken(db, UserModel.email, email):
        raise DuplicateError("Email already exists", "EMAIL_EXISTS")
    if payload.clerk_id and _taken(db, UserModel.clerk_id, payload.clerk_id):
        raise DuplicateError("Clerk ID already exists", "CLERK_ID_EXISTS")

    qr_code = payload.qr_code or None
    if qr_code and _taken(db, UserModel.qr_code, qr_code):
        raise DuplicateError("QR code already exists", "QR_CODE_EXISTS")
    if payload.role == "student" and not qr_code:
        qr_code = assign_unique_scan_code(db)

    user = UserModel(
        email=email,
        full_name=full_name,
        role=payload.role,
        clerk_id=payload.clerk_id or None,
        qr_code=qr_code,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"사용자 등록: id={user.id}, role={user.role}")
    return user


# ✅ [UPDATE] 사용자 정보 수정 (보낸 필드만 반영, clerkId/qrCode 는 null 로 해제 가능)
@router.put("/{user_id}", response_model=UserSchema)
def update_user(user_id: int, payload: UserUpdate, db: Session = Depends(get_db)):
    user = _get_user_or_404(db, user_id)
    data = payload.model_dump(exclude_unset=True)

    if "email" in data:
        if not is_valid_email(data["email"]):
            raise InvalidRequestError("Invalid email format", "INVALID_EMAIL_FORMAT")
        email = data["email"].strip().lower()
        if _taken(db, UserModel.email, email, exclude_id=user_id):
            raise DuplicateError("Email already exists", "EMAIL_EXISTS")
        user.email = email

    if "full_name" in data:
        user.full_name = require_text(data["full_name"], "Full name cannot be empty", "INVALID_FULL_NAME")

    if "role" in data:
        _check_role(data["role"])
        user.role = data["role"]

    if "clerk_id" in data:
        clerk_id = data["clerk_id"]
        if clerk_id is not None and _taken(db, UserModel.clerk_id, clerk_id, exclude_id=user_id):
            raise DuplicateError("Clerk ID already exists", "CLERK_ID_EXISTS")
        user.clerk_id = clerk_id

    if "qr_code" in data:
        qr_code = data["qr_code"]
        if qr_code is not None and _taken(db, UserModel.qr_code, qr_code, exclude_id=user_id):
            raise DuplicateError("QR code already exists", "QR_CODE_EXISTS")
        user.qr_code = qr_code

    db.commit()
    db.refresh(user)
    return user


# ✅ [DELETE] 사용자 삭제
@router.delete("/{user_id}")
def delete_user(user_id: int, db: Session = Depends(get_db)):
    user = _get_user_or_404(db, user_id)
    deleted = UserSchema.model_validate(user)
    db.delete(user)
    db.commit()
    logger.info(f"사용자 삭제: id={user_id}")
    return {"message": "User deleted successfully", "user": deleted}


# ==========================================================
# [3단계] 출석용 스캔 코드 / QR 이미지
# ==========================================================

# ✅ [READ] 학생 스캔 코드 (없으면 이 시점에 발급)
@router.get("/{user_id}/scan-code", response_model=ScanCode)
def get_scan_code(user_id: int, db: Session = Depends(get_db)):
    user = _get_user_or_404(db, user_id)
    code = ensure_scan_code(db, user)
    return ScanCode(user_id=user.id, qr_code=code)


# ✅ [READ] 학생 스캔 코드를 담은 QR 이미지 (PNG)
@router.get("/{user_id}/qr-code")
def get_qr_code(user_id: int, db: Session = Depends(get_db)):
    user = _get_user_or_404(db, user_id)
    code = ensure_scan_code(db, user)
    return Response(content=render_qr_png(code), media_type="image/png")
