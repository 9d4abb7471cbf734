from datetime import datetime
from typing import Optional

from schemas.common import ApiModel


# ✅ 응답에 포함되는 담임 교사 요약
class TeacherSummary(ApiModel):
    id: int
    full_name: str
    email: str
    role: str


# ✅ 생성(Create) 요청용 스키마
#    → id/createdAt 은 서버에서 생성되므로 제외
class ClassCreate(ApiModel):
    name: Optional[str] = None               # 학급 이름
    grade_level: Optional[int] = None        # 학년 (1~12)
    teacher_id: Optional[int] = None         # 담임 교사 ID


class ClassUpdate(ClassCreate):
    pass


# ✅ 응답(Response) / 조회(Read) 용 스키마
class Class(ApiModel):
    id: int
    name: str
    grade_level: int
    teacher_id: Optional[int] = None
    created_at: datetime
    teacher: Optional[TeacherSummary] = None
