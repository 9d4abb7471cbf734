"""
dependencies/security.py

- 스캐너 스테이션 전용 엔드포인트(POST /attendance/scan) 보호
- Authorization: Bearer <SCANNER_INTERNAL_TOKEN>
- 실패 시 다른 API 에러와 같은 {"error", "code"} 본문 (401 UNAUTHORIZED)
"""

import hmac
import logging
from typing import Optional, Annotated

from fastapi import Header

from config.settings import settings
from services.exceptions import ApiError, UnauthorizedError

logger = logging.getLogger(__name__)

AuthHeader = Annotated[Optional[str], Header(alias="Authorization")]


def _bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise UnauthorizedError("Missing Authorization header", "UNAUTHORIZED")

    scheme, _, token = authorization.partition(" ")
    if not token.strip():
        raise UnauthorizedError("Invalid Authorization header format", "UNAUTHORIZED")
    if scheme.lower() != "bearer":
        raise UnauthorizedError("Invalid auth scheme", "UNAUTHORIZED")
    return token.strip()


def require_scanner_token(authorization: AuthHeader = None):
    expected = settings.SCANNER_INTERNAL_TOKEN
    # 토큰 미설정 서버는 스캔을 받지 않음
    if not expected:
        logger.error("SCANNER_INTERNAL_TOKEN 이 설정되지 않아 스캔 요청을 처리할 수 없음")
        raise ApiError("Scanner token not configured", "SCANNER_TOKEN_NOT_CONFIGURED", status_code=500)

    token = _bearer_token(authorization)
    if not hmac.compare_digest(token.encode(), expected.encode()):
        logger.warning("잘못된 스캐너 토큰으로 스캔 요청")
        raise UnauthorizedError("Invalid token", "UNAUTHORIZED")

    return {"client": "scanner"}
