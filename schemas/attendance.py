from datetime import date, datetime
from typing import Optional

from schemas.common import ApiModel


# ✅ 출결 기록 생성 요청
#    { studentId, classId, date: "YYYY-MM-DD", status, markedBy? }
class AttendanceCreate(ApiModel):
    student_id: Optional[int] = None         # 학생 ID
    class_id: Optional[int] = None           # 학급 ID
    date: Optional[str] = None               # 날짜 (YYYY-MM-DD)
    status: Optional[str] = None             # present / absent / late
    marked_by: Optional[int] = None          # 기록 교사 ID


# ✅ 출결 수정 요청: 상태/기록자만 변경 가능
class AttendanceUpdate(ApiModel):
    status: Optional[str] = None
    marked_by: Optional[int] = None


# ✅ QR 스캔 출결 요청 (스캐너 스테이션)
#    date 생략 시 오늘, status 생략 시 present
class AttendanceScan(ApiModel):
    code: Optional[str] = None               # 디코딩된 스캔 코드
    class_id: Optional[int] = None
    date: Optional[str] = None
    status: Optional[str] = None
    marked_by: Optional[int] = None


# ✅ 출력용
class Attendance(ApiModel):
    id: int
    student_id: int
    class_id: int
    date: date
    status: str
    marked_by: Optional[int] = None
    created_at: datetime
