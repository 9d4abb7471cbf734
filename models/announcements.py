from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from database.db import Base
from utils.clock import utc_now

# ✅ 학급 ID(숫자 문자열) 외에 허용되는 공지 대상
AUDIENCES = ("all", "teachers", "students")


class Announcement(Base):
    __tablename__ = "announcements"  # 공지사항 테이블

    id = Column(Integer, primary_key=True, index=True)              # 공지 고유 ID (PK)
    title = Column(String(200), nullable=False)                     # 제목
    content = Column(Text, nullable=False)                          # 내용
    author_id = Column(Integer, ForeignKey("users.id"))             # 작성자 ID
    target_audience = Column(String(20), nullable=False)            # 대상 (all, teachers, students, 학급 ID)
    class_id = Column(Integer, ForeignKey("classes.id"))            # 대상 학급 ID
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
