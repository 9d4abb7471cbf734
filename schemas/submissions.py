from datetime import datetime
from typing import Optional

from schemas.common import ApiModel


# ✅ 제출(POST) 요청 바디
class SubmissionCreate(ApiModel):
    assignment_id: Optional[int] = None
    student_id: Optional[int] = None
    content: Optional[str] = None
    file_url: Optional[str] = None


# ✅ 수정/채점(PUT) 요청 바디
class SubmissionUpdate(ApiModel):
    content: Optional[str] = None
    file_url: Optional[str] = None
    grade: Optional[int] = None
    feedback: Optional[str] = None
    graded_at: Optional[str] = None


# ✅ 출력용
class Submission(ApiModel):
    id: int
    assignment_id: Optional[int] = None
    student_id: Optional[int] = None
    content: Optional[str] = None
    file_url: Optional[str] = None
    grade: Optional[int] = None
    feedback: Optional[str] = None
    submitted_at: datetime
    graded_at: Optional[datetime] = None
