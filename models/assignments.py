from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from database.db import Base
from utils.clock import utc_now


class Assignment(Base):
    __tablename__ = "assignments"  # 과제 테이블

    id = Column(Integer, primary_key=True, index=True)              # 과제 고유 ID (PK)
    title = Column(String(200), nullable=False)                     # 과제 제목
    description = Column(Text)                                      # 과제 설명
    subject_id = Column(Integer, ForeignKey("subjects.id"))         # 과목 ID
    teacher_id = Column(Integer, ForeignKey("users.id"))            # 출제 교사 ID
    due_date = Column(DateTime(timezone=True), nullable=False)      # 마감 일시
    total_points = Column(Integer, nullable=False)                  # 만점
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
