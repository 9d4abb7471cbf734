from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, UniqueConstraint

from database.db import Base
from utils.clock import utc_now

# ✅ 허용되는 출결 상태
ATTENDANCE_STATUSES = ("present", "absent", "late")


class Attendance(Base):
    __tablename__ = "attendance"  # 출결 기록 테이블
    __table_args__ = (
        # 학생/학급/날짜당 출결 기록은 하나
        UniqueConstraint("student_id", "class_id", "date", name="uq_attendance_student_class_date"),
    )

    id = Column(Integer, primary_key=True, index=True)                      # 출결 고유 ID (PK)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False)    # 학생 ID
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False)    # 학급 ID
    date = Column(Date, nullable=False, index=True)                         # 날짜
    status = Column(String(20), nullable=False)                             # 출결 상태 (present, absent, late)
    marked_by = Column(Integer, ForeignKey("users.id"))                     # 기록한 교사 ID
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
