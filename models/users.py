from sqlalchemy import Column, DateTime, Integer, String

from database.db import Base
from utils.clock import utc_now

# ✅ 허용되는 사용자 역할
ROLES = ("principal", "teacher", "student")


class User(Base):
    __tablename__ = "users"  # 교장/교사/학생 공용 사용자 테이블

    id = Column(Integer, primary_key=True, index=True)              # 사용자 고유 ID (PK)
    clerk_id = Column(String(100), unique=True)                     # 외부 인증 서비스 사용자 ID
    email = Column(String(255), nullable=False, unique=True)        # 이메일 (소문자로 저장)
    full_name = Column(String(100), nullable=False)                 # 이름
    role = Column(String(20), nullable=False, index=True)           # 역할 (principal, teacher, student)
    qr_code = Column(String(64), unique=True)                       # 출석용 QR 스캔 코드 (학생만)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
