import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from config.settings import settings
from database.db import get_db
from dependencies.security import require_scanner_token
from models.attendance import ATTENDANCE_STATUSES, Attendance as AttendanceModel
from schemas.attendance import (
    Attendance as AttendanceSchema,
    AttendanceCreate,
    AttendanceScan,
    AttendanceUpdate,
)
from services.attendance_recorder import mark_attendance
from services.exceptions import InvalidRequestError, NotFoundError
from services.lookups import require_teacher
from utils.clock import today
from utils.validators import clamp_limit, parse_iso_date

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/attendance", tags=["출결"])

STATUS_MESSAGE = "status must be one of: present, absent, late"


def _get_record_or_404(db: Session, record_id: int) -> AttendanceModel:
    record = db.get(AttendanceModel, record_id)
    if record is None:
        raise NotFoundError("Attendance record not found", "NOT_FOUND")
    return record


def _check_status(status: str | None):
    if status not in ATTENDANCE_STATUSES:
        raise InvalidRequestError(STATUS_MESSAGE, "INVALID_STATUS")


# ==========================================================
# [1단계] 조회
# ==========================================================

# ✅ [READ] 출결 기록 목록 (학생/학급/날짜/상태/기간 필터)
@router.get("", response_model=List[AttendanceSchema])
def list_attendance(
    limit: Optional[int] = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    student_id: Optional[int] = Query(None, alias="studentId"),
    class_id: Optional[int] = Query(None, alias="classId"),
    date: Optional[str] = Query(None, description="조회할 날짜 (예: 2025-09-17)"),
    status: Optional[str] = None,
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
):
    query = db.query(AttendanceModel)
    if student_id is not None:
        query = query.filter(AttendanceModel.student_id == student_id)
    if class_id is not None:
        query = query.filter(AttendanceModel.class_id == class_id)
    if date:
        query = query.filter(AttendanceModel.date == parse_iso_date(date, "Date"))
    if status:
        _check_status(status)
        query = query.filter(AttendanceModel.status == status)
    if start_date:
        query = query.filter(
            AttendanceModel.date >= parse_iso_date(start_date, "startDate", "INVALID_START_DATE_FORMAT")
        )
    if end_date:
        query = query.filter(
            AttendanceModel.date <= parse_iso_date(end_date, "endDate", "INVALID_END_DATE_FORMAT")
        )

    limit = clamp_limit(limit, settings.ATTENDANCE_DEFAULT_LIMIT, settings.ATTENDANCE_MAX_LIMIT)
    return query.order_by(AttendanceModel.id).offset(offset).limit(limit).all()


# ✅ [READ] 단일 출결 기록
@router.get("/{record_id}", response_model=AttendanceSchema)
def get_attendance(record_id: int, db: Session = Depends(get_db)):
    return _get_record_or_404(db, record_id)


# ==========================================================
# [2단계] 기록 생성 (수동 입력 / QR 스캔)
# ==========================================================

# ✅ [CREATE] 출결 수동 기록
@router.post("", response_model=AttendanceSchema, status_code=201)
def create_attendance(payload: AttendanceCreate, db: Session = Depends(get_db)):
    if not payload.student_id:
        raise InvalidRequestError("studentId is required", "MISSING_STUDENT_ID")
    if not payload.class_id:
        raise InvalidRequestError("classId is required", "MISSING_CLASS_ID")
    if not payload.date:
        raise InvalidRequestError("date is required", "MISSING_DATE")
    if not payload.status:
        raise InvalidRequestError("status is required", "MISSING_STATUS")

    on_date = parse_iso_date(payload.date)
    _check_status(payload.status)

    return mark_attendance(
        db,
        payload.student_id,
        payload.class_id,
        on_date,
        marked_by=payload.marked_by,
        status=payload.status,
    )


# ✅ [SCAN] 스캐너 스테이션에서 읽은 QR 코드로 출결 기록
#    - date 생략 시 오늘(UTC), status 생략 시 present
#    - 같은 학생/학급/날짜 재스캔은 DUPLICATE_ATTENDANCE
@router.post("/scan", response_model=AttendanceSchema, status_code=201)
def scan_attendance(
    payload: AttendanceScan,
    db: Session = Depends(get_db),
    _client: dict = Depends(require_scanner_token),
):
    code = (payload.code or "").strip()
    if not code:
        raise InvalidRequestError("code is required", "MISSING_CODE")
    if not payload.class_id:
        raise InvalidRequestError("classId is required", "MISSING_CLASS_ID")

    on_date = parse_iso_date(payload.date) if payload.date else today()
    status = payload.status or "present"
    _check_status(status)

    logger.info(f"QR 스캔 수신: class_id={payload.class_id}, date={on_date}")
    return mark_attendance(
        db,
        code,
        payload.class_id,
        on_date,
        marked_by=payload.marked_by,
        status=status,
    )


# ==========================================================
# [3단계] 수정 / 삭제
# ==========================================================

# ✅ [UPDATE] 출결 상태/기록자만 변경 (학생/학급/날짜는 고정)
@router.put("/{record_id}", response_model=AttendanceSchema)
def update_attendance(record_id: int, payload: AttendanceUpdate, db: Session = Depends(get_db)):
    record = _get_record_or_404(db, record_id)
    data = payload.model_dump(exclude_unset=True)

    if "status" in data:
        _check_status(data["status"])
        record.status = data["status"]
    if "marked_by" in data:
        if data["marked_by"] is not None:
            require_teacher(db, data["marked_by"])
        record.marked_by = data["marked_by"]

    db.commit()
    db.refresh(record)
    return record


# ✅ [DELETE] 출결 기록 삭제
@router.delete("/{record_id}")
def delete_attendance(record_id: int, db: Session = Depends(get_db)):
    record = _get_record_or_404(db, record_id)
    deleted = AttendanceSchema.model_validate(record)
    db.delete(record)
    db.commit()
    logger.info(f"출결 기록 삭제: id={record_id}")
    return {"message": "Attendance record deleted successfully", "deleted": deleted}
