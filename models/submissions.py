from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from database.db import Base
from utils.clock import utc_now


class Submission(Base):
    __tablename__ = "submissions"  # 과제 제출 테이블

    id = Column(Integer, primary_key=True, index=True)                  # 제출 고유 ID (PK)
    assignment_id = Column(Integer, ForeignKey("assignments.id"))       # 과제 ID
    student_id = Column(Integer, ForeignKey("users.id"))                # 제출 학생 ID
    content = Column(Text)                                              # 제출 내용
    file_url = Column(String(500))                                      # 첨부 파일 URL
    grade = Column(Integer)                                             # 점수
    feedback = Column(Text)                                             # 교사 피드백
    submitted_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    graded_at = Column(DateTime(timezone=True))                         # 채점 일시
