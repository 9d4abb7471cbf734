from datetime import datetime
from typing import Optional

from pydantic import StrictInt

from schemas.common import ApiModel


# ✅ 입력용 (POST/PUT)
#    - totalPoints/subjectId/teacherId 는 정수만 허용 (문자열 "10" 거부)
class AssignmentCreate(ApiModel):
    title: Optional[str] = None
    description: Optional[str] = None
    subject_id: Optional[StrictInt] = None
    teacher_id: Optional[StrictInt] = None
    due_date: Optional[str] = None           # ISO 타임스탬프
    total_points: Optional[StrictInt] = None


class AssignmentUpdate(AssignmentCreate):
    pass


# ✅ 출력용
class Assignment(ApiModel):
    id: int
    title: str
    description: Optional[str] = None
    subject_id: Optional[int] = None
    teacher_id: Optional[int] = None
    due_date: datetime
    total_points: int
    created_at: datetime
