from datetime import datetime
from typing import Optional, Union

from schemas.common import ApiModel


# ✅ 입력용 (POST/PUT)
#    - targetAudience: "all" / "teachers" / "students" / 학급 ID
class AnnouncementCreate(ApiModel):
    title: Optional[str] = None
    content: Optional[str] = None
    author_id: Optional[int] = None
    target_audience: Optional[Union[int, str]] = None
    class_id: Optional[int] = None


class AnnouncementUpdate(ApiModel):
    title: Optional[str] = None
    content: Optional[str] = None
    target_audience: Optional[Union[int, str]] = None
    class_id: Optional[int] = None


# ✅ 출력용
class Announcement(ApiModel):
    id: int
    title: str
    content: str
    author_id: Optional[int] = None
    target_audience: str
    class_id: Optional[int] = None
    created_at: datetime
