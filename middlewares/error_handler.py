import logging
import re

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from services.exceptions import ApiError

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _error(status_code: int, message: str, code: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, "code": code}, headers=headers)


def _validation_code(loc: tuple) -> tuple[str, str]:
    """
    FastAPI 검증 에러 위치 → (메시지, 코드)
    - path 파라미터: INVALID_ID
    - query/body 필드: INVALID_<FIELD> (studentId → INVALID_STUDENT_ID)
    - 본문 자체가 JSON 이 아님: INVALID_BODY
    """
    source = loc[0] if loc else "body"
    if source == "path":
        return "Valid ID is required", "INVALID_ID"

    fields = [part for part in loc[1:] if isinstance(part, str)]
    if not fields:
        return "Request body must be a valid JSON object", "INVALID_BODY"

    name = fields[0]
    return f"Valid {name} is required", "INVALID_" + _CAMEL_BOUNDARY.sub("_", name).upper()


def add_error_handlers(app: FastAPI):
    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        return _error(exc.status_code, exc.message, exc.code, getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        loc = tuple(errors[0].get("loc", ())) if errors else ()
        message, code = _validation_code(loc)
        return _error(400, message, code)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"처리되지 않은 예외: {request.method} {request.url.path}")
        return _error(500, f"Internal server error: {exc}", "INTERNAL_ERROR")
