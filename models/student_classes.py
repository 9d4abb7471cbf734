from sqlalchemy import Column, DateTime, ForeignKey, Integer

from database.db import Base
from utils.clock import utc_now


class StudentClass(Base):
    __tablename__ = "student_classes"  # 학생-학급 수강 (N:M 연결 테이블)

    id = Column(Integer, primary_key=True, index=True)              # 수강 고유 ID (PK)
    student_id = Column(Integer, ForeignKey("users.id"))            # 학생 ID
    class_id = Column(Integer, ForeignKey("classes.id"))            # 학급 ID
    enrolled_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
