"""
services/exceptions.py

- 라우터/서비스에서 발생시키는 API 에러 계층
- middlewares/error_handler.py 에서 {"error": ..., "code": ...} JSON 으로 변환됩니다.
- 분류별로 클래스를 나눠 호출자가 not-found / 역할 불일치 / 중복을 구분할 수 있게 합니다.
"""


class ApiError(Exception):
    """모든 API 에러의 기본 클래스 (기본 400)"""
    status_code = 400

    def __init__(self, message: str, code: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.code = code
        if status_code is not None:
            self.status_code = status_code


class InvalidRequestError(ApiError):
    """필수 값 누락 / 형식 오류"""


class NotFoundError(ApiError):
    """요청 대상 리소스 자체가 없음 (404)"""
    status_code = 404


class ReferenceNotFoundError(ApiError):
    """본문에서 참조한 다른 엔티티가 없음 (400)"""


class RoleMismatchError(ApiError):
    """참조한 사용자가 기대한 역할이 아님 (400)"""


class DuplicateError(ApiError):
    """유일성 제약 위반 (400)"""


class UnauthorizedError(ApiError):
    """스캐너 토큰 누락 / 불일치 (401, WWW-Authenticate: Bearer)"""
    status_code = 401
    headers = {"WWW-Authenticate": "Bearer"}
