from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from database.db import Base
from utils.clock import utc_now


class Subject(Base):
    __tablename__ = "subjects"  # 과목 정보 테이블

    id = Column(Integer, primary_key=True, index=True)              # 과목 고유 ID (PK)
    name = Column(String(100), nullable=False)                      # 과목명
    description = Column(Text)                                      # 과목 설명
    class_id = Column(Integer, ForeignKey("classes.id"))            # 개설 학급 ID
    teacher_id = Column(Integer, ForeignKey("users.id"))            # 담당 교사 ID
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
