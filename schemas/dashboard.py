from schemas.common import ApiModel


# ✅ 교장 대시보드 카드
class PrincipalStats(ApiModel):
    total_students: int
    total_teachers: int
    total_classes: int
    attendance_rate: int                     # 오늘 출석률 (%)


# ✅ 교사 대시보드 카드
class TeacherStats(ApiModel):
    my_classes: int
    my_assignments: int
    my_students: int                         # 담당 학급 수강생 (중복 제거)
    pending_grading: int                     # 점수/채점일 없는 제출물


# ✅ 학생 대시보드 카드
class StudentStats(ApiModel):
    my_classes: int
    assignments: int
    attendance_rate: int                     # 전체 기간 출석률 (%)
    submissions_pending: int
