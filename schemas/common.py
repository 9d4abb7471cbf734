"""
schemas/common.py

- 프로젝트 전반에서 재사용할 공용 스키마 모음
- Pydantic v2 기준
- 포함 내용:
  1) camelCase JSON ↔ snake_case 속성 기본 모델: ApiModel
  2) 에러 응답 표준: ErrorResponse
  3) 페이지네이션 메타: PageInfo, make_page_info()
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# =========================================================
# 1) 공용 기본 모델
# =========================================================

class ApiModel(BaseModel):
    """
    요청/응답 스키마 공용 베이스
    - JSON 키는 camelCase (studentId, markedBy ...)
    - 파이썬 속성은 snake_case, ORM 객체에서 바로 변환 가능
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =========================================================
# 2) 에러 응답 표준
# =========================================================

class ErrorResponse(BaseModel):
    """
    전역 에러 핸들러에서 내려주는 표준 에러 응답
    - middlewares/error_handler.py 에서 이 형태로 반환
    """
    error: str = Field(..., description="사람이 읽을 수 있는 에러 메시지")
    code: str = Field(..., description="에러 식별 코드 (예: INVALID_ID, NOT_FOUND, DUPLICATE_ATTENDANCE)")


# =========================================================
# 3) 페이지네이션 메타
# =========================================================

class PageInfo(ApiModel):
    """목록 응답에 포함시키는 메타 정보 (limit/offset 방식)"""
    limit: int = Field(..., ge=1)
    offset: int = Field(..., ge=0)
    total: int = Field(..., ge=0)


def make_page_info(limit: int, offset: int, total: int) -> PageInfo:
    return PageInfo(limit=limit, offset=offset, total=total)
