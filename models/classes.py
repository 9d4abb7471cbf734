from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from database.db import Base
from utils.clock import utc_now


class Class(Base):
    __tablename__ = "classes"

    id = Column(Integer, primary_key=True, index=True)      # 학급 고유 ID (PK)
    name = Column(String(100), nullable=False)              # 학급 이름 (예: Grade 10 - Section A)
    grade_level = Column(Integer, nullable=False)           # 학년 (1~12)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    # ==========================================================
    # [관계 설정]
    # ==========================================================

    # ✅ 담임 교사 ID (FK)
    #    - users.id를 참조 (role = teacher)
    teacher_id = Column(Integer, ForeignKey("users.id"))

    # ✅ 담임 교사와의 관계 (N:1)
    #    - 목록/상세 응답에 교사 요약 정보를 함께 내려줄 때 사용
    teacher = relationship("User", foreign_keys=[teacher_id], lazy="joined")
