from datetime import datetime
from typing import List, Optional

from schemas.common import ApiModel, PageInfo


# ✅ 생성(POST) 요청 바디
#    - 필수 값 누락은 라우터에서 MISSING_* 코드로 검증하므로 모두 Optional
class UserCreate(ApiModel):
    email: Optional[str] = None              # 이메일
    full_name: Optional[str] = None          # 이름
    role: Optional[str] = None               # principal / teacher / student
    clerk_id: Optional[str] = None           # 외부 인증 서비스 ID
    qr_code: Optional[str] = None            # 스캔 코드 (학생, 생략 시 자동 발급)


# ✅ 수정(PUT) 요청 바디: 보낸 필드만 반영
class UserUpdate(UserCreate):
    pass


# ✅ 응답용
class User(ApiModel):
    id: int
    clerk_id: Optional[str] = None
    email: str
    full_name: str
    role: str
    qr_code: Optional[str] = None
    created_at: datetime


class UserPage(ApiModel):
    data: List[User]
    pagination: PageInfo


class ScanCode(ApiModel):
    user_id: int
    qr_code: str
