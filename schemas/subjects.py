from datetime import datetime
from typing import Optional

from schemas.common import ApiModel


# ✅ 입력용 (POST/PUT)
class SubjectCreate(ApiModel):
    name: Optional[str] = None               # 과목명
    description: Optional[str] = None        # 설명
    class_id: Optional[int] = None           # 학급 ID
    teacher_id: Optional[int] = None         # 담당 교사 ID


class SubjectUpdate(SubjectCreate):
    pass


# ✅ 출력용
class Subject(ApiModel):
    id: int
    name: str
    description: Optional[str] = None
    class_id: Optional[int] = None
    teacher_id: Optional[int] = None
    created_at: datetime
