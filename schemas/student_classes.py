from datetime import datetime
from typing import Optional

from schemas.common import ApiModel


# ✅ 수강 등록/변경 요청
class EnrollmentCreate(ApiModel):
    student_id: Optional[int] = None
    class_id: Optional[int] = None


class EnrollmentUpdate(EnrollmentCreate):
    pass


# ✅ 등록/수정 응답 (연결 테이블 행 그대로)
class Enrollment(ApiModel):
    id: int
    student_id: Optional[int] = None
    class_id: Optional[int] = None
    enrolled_at: datetime


# ✅ 조회 응답 (학생/학급 정보 포함)
class EnrollmentDetail(Enrollment):
    student_name: Optional[str] = None
    student_email: Optional[str] = None
    class_name: Optional[str] = None
    grade_level: Optional[int] = None
