"""
services/scan_codes.py

- 학생 출석용 스캔 코드 생성/유일성 검사/지연 할당
- 코드 형식: <PREFIX>-<epoch 밀리초>-<대문자 base36 6자리>  (예: QR-1718000000000-4K9ZQA)
- QR 이미지(PNG) 렌더링 (qrcode 라이브러리)
"""

import io
import logging
import secrets
import time

import qrcode
from sqlalchemy.orm import Session

from config.settings import settings
from models.users import User as UserModel
from services.exceptions import RoleMismatchError

logger = logging.getLogger(__name__)

_BASE36 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
SUFFIX_LENGTH = 6


def generate_scan_code(prefix: str | None = None) -> str:
    """시간 성분 + 랜덤 접미사로 후보 코드를 하나 만든다 (DB 확인 없음)"""
    timestamp = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(SUFFIX_LENGTH))
    return f"{prefix or settings.SCAN_CODE_PREFIX}-{timestamp}-{suffix}"


def is_unique(db: Session, code: str) -> bool:
    return db.query(UserModel.id).filter(UserModel.qr_code == code).first() is None


def assign_unique_scan_code(db: Session) -> str:
    """충돌이 없을 때까지 새 후보를 만들어 검사 (키 공간이 커서 재시도 제한 없음)"""
    code = generate_scan_code()
    while not is_unique(db, code):
        logger.warning(f"스캔 코드 충돌, 재생성: {code}")
        code = generate_scan_code()
    return code


def ensure_scan_code(db: Session, user: UserModel) -> str:
    """학생에게 코드가 없으면 새로 할당해 저장하고, 있으면 그대로 반환"""
    if user.role != "student":
        raise RoleMismatchError("Scan codes are only issued to students", "INVALID_STUDENT_ROLE")
    if user.qr_code:
        return user.qr_code

    user.qr_code = assign_unique_scan_code(db)
    db.commit()
    db.refresh(user)
    logger.info(f"스캔 코드 할당: user_id={user.id}")
    return user.qr_code


def render_qr_png(code: str) -> bytes:
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=settings.QR_BOX_SIZE,
        border=settings.QR_BORDER,
    )
    qr.add_data(code)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
