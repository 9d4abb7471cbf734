"""
services/station_client.py

- 스캐너 스테이션 → API 서버 HTTP 클라이언트 (httpx)
- 디코딩된 스캔 코드를 POST /attendance/scan 으로 전달하고 결과를 분류
  marked    : 출결 기록 생성 (201)
  duplicate : 이미 같은 날 같은 학급에 기록됨 (재시도 없음)
  rejected  : 그 밖의 4xx (없는 학생, 학생이 아닌 사용자, 잘못된 학급 ...)
- 5xx / 네트워크 오류는 httpx 예외로 호출자에게 전달
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

import httpx

from config.settings import settings

logger = logging.getLogger(__name__)

MARKED = "marked"
DUPLICATE = "duplicate"
REJECTED = "rejected"


@dataclass
class ScanResult:
    outcome: str
    code: str
    record: Optional[dict] = None
    error_code: Optional[str] = None
    message: Optional[str] = None


class StationClient:
    def __init__(
        self,
        class_id: int,
        marked_by: Optional[int] = None,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.class_id = class_id
        self.marked_by = marked_by
        self.base = (base_url or settings.SCANNER_API_BASE_URL).rstrip("/")
        self.headers = {"Authorization": f"Bearer {token or settings.SCANNER_INTERNAL_TOKEN}"}
        self.timeout = timeout or settings.SCANNER_TIMEOUT
        self.transport = transport

    def post(self, path: str, json: dict) -> httpx.Response:
        url = f"{self.base}{path}"
        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            return client.post(url, json=json, headers=self.headers)

    def submit_scan(self, code: str, on_date: Optional[date] = None, status: Optional[str] = None) -> ScanResult:
        payload = {"code": code, "classId": self.class_id}
        if self.marked_by is not None:
            payload["markedBy"] = self.marked_by
        if on_date is not None:
            payload["date"] = on_date.isoformat()
        if status is not None:
            payload["status"] = status

        r = self.post("/attendance/scan", payload)
        if r.status_code >= 500:
            r.raise_for_status()

        try:
            body = r.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            # 프록시 등이 돌려준 API 형식이 아닌 응답 (예: HTML 413)
            logger.warning(f"스캔 거부 (API 응답 아님): code={code}, status={r.status_code}")
            return ScanResult(REJECTED, code, message=r.text)

        if r.status_code == 201:
            logger.info(f"출결 기록 완료: code={code}, student_id={body.get('studentId')}")
            return ScanResult(MARKED, code, record=body)

        error_code = body.get("code")
        message = body.get("error")
        if error_code == "DUPLICATE_ATTENDANCE":
            logger.info(f"이미 기록된 출결: code={code}")
            return ScanResult(DUPLICATE, code, error_code=error_code, message=message)

        logger.warning(f"스캔 거부: code={code}, status={r.status_code}, error={error_code or message}")
        return ScanResult(REJECTED, code, error_code=error_code, message=message)
