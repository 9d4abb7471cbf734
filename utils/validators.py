"""
utils/validators.py

- 요청 본문/쿼리 값 검증 헬퍼
- 실패 시 InvalidRequestError(400) 에 구체적인 에러 코드를 담아 발생
"""

import re
from datetime import date, datetime, timezone

from services.exceptions import InvalidRequestError

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email or ""))


def require_text(value: str | None, message: str, code: str) -> str:
    """None 이거나 공백뿐이면 에러, 아니면 앞뒤 공백 제거 후 반환"""
    if value is None or not value.strip():
        raise InvalidRequestError(message, code)
    return value.strip()


def strip_or_none(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


def parse_iso_date(value: str, field_name: str = "date", code: str = "INVALID_DATE_FORMAT") -> date:
    """YYYY-MM-DD 형식만 허용"""
    if not _DATE_RE.match(value or ""):
        raise InvalidRequestError(f"{field_name} must be in ISO format (YYYY-MM-DD)", code)
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidRequestError(f"{field_name} must be in ISO format (YYYY-MM-DD)", code)


def parse_iso_datetime(value: str, message: str, code: str) -> datetime:
    """ISO 8601 타임스탬프 (날짜만 있어도 허용, 'Z' 접미사 허용). 시간대가 없으면 UTC 로 간주"""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        raise InvalidRequestError(message, code)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def clamp_limit(limit: int | None, default: int, maximum: int) -> int:
    if limit is None:
        return default
    return min(limit, maximum)
