"""
scripts/seed_db.py

샘플 학교 데이터 적재 (교장 1, 교사 3, 학생 6, 학급 4, 과목/수강/과제/출결/공지)
실행: python -m scripts.seed_db
"""

from datetime import timedelta

from sqlalchemy.orm import Session

from database.db import SessionLocal, init_db
from models.announcements import Announcement as AnnouncementModel
from models.assignments import Assignment as AssignmentModel
from models.attendance import Attendance as AttendanceModel
from models.classes import Class as ClassModel
from models.student_classes import StudentClass as StudentClassModel
from models.subjects import Subject as SubjectModel
from models.users import User as UserModel
from services.scan_codes import assign_unique_scan_code
from utils.clock import today, utc_now

TEACHERS = [
    ("clerk_teacher_001", "teacher1@school.com", "Michael Brown"),
    ("clerk_teacher_002", "teacher2@school.com", "Emily Davis"),
    ("clerk_teacher_003", "teacher3@school.com", "James Wilson"),
]

STUDENTS = [
    ("clerk_student_001", "student1@school.com", "Alex Thompson"),
    ("clerk_student_002", "student2@school.com", "Emma Martinez"),
    ("clerk_student_003", "student3@school.com", "Ryan Anderson"),
    ("clerk_student_004", "student4@school.com", "Sophia Garcia"),
    ("clerk_student_005", "student5@school.com", "Noah Robinson"),
    ("clerk_student_006", "student6@school.com", "Olivia Clark"),
]

# (학급 이름, 학년, 담임 교사 index)
CLASSES = [
    ("Grade 9-A", 9, 0),
    ("Grade 9-B", 9, 1),
    ("Grade 10-A", 10, 2),
    ("Grade 10-B", 10, 0),
]

# (과목명, 설명, 학급 index)
SUBJECTS = [
    ("Mathematics", "Algebra, geometry and basic calculus concepts.", 0),
    ("Science", "General science covering physics, chemistry and biology.", 0),
    ("English", "Grammar, composition and literary analysis.", 1),
    ("History", "World and national history.", 2),
    ("Computer Science", "Programming fundamentals and problem solving.", 3),
]

# (제목, 설명, 과목 index, 마감까지 일수, 만점)
ASSIGNMENTS = [
    ("Algebra Quiz 1", "Linear equations and quadratic functions.", 0, 7, 50),
    ("Lab Report: Density", "Measure and report the density of three materials.", 1, 10, 100),
    ("Essay: A Memorable Day", "Five-paragraph narrative essay.", 2, 14, 100),
    ("Timeline Project", "Timeline of the industrial revolution.", 3, 21, 80),
]


def seed():
    init_db()
    db: Session = SessionLocal()

    if db.query(UserModel.id).first() is not None:
        db.close()
        print("⚠️ 이미 데이터가 있어 시드를 건너뜁니다")
        return

    principal = UserModel(
        clerk_id="clerk_principal_001",
        email="admin@school.com",
        full_name="Dr. Sarah Johnson",
        role="principal",
    )
    db.add(principal)

    teachers = [UserModel(clerk_id=c, email=e, full_name=n, role="teacher") for c, e, n in TEACHERS]
    db.add_all(teachers)
    db.flush()

    # ✅ 학생은 스캔 코드를 하나씩 발급 (flush 후 다음 코드 유일성 검사에 반영)
    students = []
    for clerk_id, email, name in STUDENTS:
        student = UserModel(
            clerk_id=clerk_id,
            email=email,
            full_name=name,
            role="student",
            qr_code=assign_unique_scan_code(db),
        )
        db.add(student)
        db.flush()
        students.append(student)

    classes = [
        ClassModel(name=name, grade_level=grade, teacher_id=teachers[t].id) for name, grade, t in CLASSES
    ]
    db.add_all(classes)
    db.flush()

    subjects = [
        SubjectModel(
            name=name,
            description=desc,
            class_id=classes[c].id,
            teacher_id=classes[c].teacher_id,
        )
        for name, desc, c in SUBJECTS
    ]
    db.add_all(subjects)
    db.flush()

    # ✅ 학생 두 명씩 학급 배정
    for i, student in enumerate(students):
        db.add(StudentClassModel(student_id=student.id, class_id=classes[i // 2].id))

    now = utc_now()
    for title, desc, s, days, points in ASSIGNMENTS:
        db.add(
            AssignmentModel(
                title=title,
                description=desc,
                subject_id=subjects[s].id,
                teacher_id=subjects[s].teacher_id,
                due_date=now + timedelta(days=days),
                total_points=points,
            )
        )

    # ✅ 최근 3일 출결 (학생 index 에 따라 상태 분산)
    statuses = ["present", "present", "late", "present", "absent", "present"]
    for day in range(1, 4):
        on_date = today() - timedelta(days=day)
        for i, student in enumerate(students):
            cls = classes[i // 2]
            db.add(
                AttendanceModel(
                    student_id=student.id,
                    class_id=cls.id,
                    date=on_date,
                    status=statuses[(i + day) % len(statuses)],
                    marked_by=cls.teacher_id,
                )
            )

    db.add_all([
        AnnouncementModel(
            title="Welcome to the New Academic Year",
            content="We are thrilled to welcome you all to the new academic year!",
            author_id=principal.id,
            target_audience="all",
        ),
        AnnouncementModel(
            title="Parent-Teacher Conference Schedule",
            content="Please review your assigned time slots and prepare progress reports.",
            author_id=principal.id,
            target_audience="teachers",
        ),
        AnnouncementModel(
            title="Math Quiz Reminder",
            content="Algebra Quiz 1 is due next week. Bring a calculator.",
            author_id=teachers[0].id,
            target_audience=str(classes[0].id),
            class_id=classes[0].id,
        ),
    ])

    db.commit()
    db.close()
    print("✅ 샘플 학교 데이터 적재 완료")


if __name__ == "__main__":
    seed()
