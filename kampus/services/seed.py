import logging
from datetime import date, timedelta

from sqlalchemy.orm import Session

from kampus.config import academic_year_for
from kampus.models.course import Course
from kampus.models.course_schedule import CourseSchedule
from kampus.models.department import Department
from kampus.models.exam import Exam
from kampus.models.student import Student
from kampus.models.student_course import StudentCourse
from kampus.database import commit_or_raise
from kampus.utils.timeslots import WORK_DAYS, add_hours

logger = logging.getLogger("kampus.seed")

FACULTY = "Mühendislik Fakültesi"

DEMO_STUDENT_NUMBER = "2021123456"

# code, name, class_year, semester, credits, ects, is_mandatory, instructor
BM_COURSES = [
    ("BM101", "Programlamaya Giriş", 1, 1, 4, 6, True, "Prof. Dr. Ali Yılmaz"),
    ("BM103", "Matematik I", 1, 1, 4, 6, True, "Doç. Dr. Ayşe Kara"),
    ("BM105", "Fizik I", 1, 1, 3, 5, True, "Prof. Dr. Mehmet Demir"),
    ("BM102", "Nesne Yönelimli Programlama", 1, 2, 4, 6, True, "Dr. Zeynep Ak"),
    ("BM104", "Matematik II", 1, 2, 4, 6, True, "Doç. Dr. Ayşe Kara"),
    ("BM106", "Fizik II", 1, 2, 3, 5, True, "Prof. Dr. Mehmet Demir"),
    ("BM201", "Veri Yapıları", 2, 1, 4, 6, True, "Prof. Dr. Ali Yılmaz"),
    ("BM203", "Algoritma Analizi", 2, 1, 3, 5, True, "Doç. Dr. Hakan Yıldız"),
    ("BM205", "Ayrık Matematik", 2, 1, 3, 5, True, "Dr. Can Özkan"),
    ("BM202", "Veritabanı Sistemleri", 2, 2, 4, 6, True, "Dr. Zeynep Ak"),
    ("BM204", "İşletim Sistemleri", 2, 2, 4, 6, True, "Prof. Dr. Okan Türk"),
    ("BM206", "Bilgisayar Ağları", 2, 2, 3, 5, True, "Doç. Dr. Hakan Yıldız"),
    ("BM301", "Yazılım Mühendisliği", 3, 1, 4, 6, True, "Prof. Dr. Okan Türk"),
    ("BM303", "Web Programlama", 3, 1, 3, 5, True, "Dr. Selin Ay"),
    ("BM305", "Yapay Zeka", 3, 1, 3, 5, False, "Doç. Dr. Elif Güneş"),
    ("BM302", "Mobil Programlama", 3, 2, 3, 5, True, "Dr. Can Özkan"),
    ("BM304", "Siber Güvenlik", 3, 2, 3, 5, False, "Doç. Dr. Hakan Yıldız"),
    ("BM306", "Makine Öğrenmesi", 3, 2, 3, 5, False, "Doç. Dr. Elif Güneş"),
    ("BM401", "Bitirme Projesi I", 4, 1, 4, 8, True, "Tüm Öğretim Üyeleri"),
    ("BM403", "Derin Öğrenme", 4, 1, 3, 5, False, "Doç. Dr. Elif Güneş"),
    ("BM402", "Bitirme Projesi II", 4, 2, 4, 8, True, "Tüm Öğretim Üyeleri"),
    ("BM404", "Bulut Bilişim", 4, 2, 3, 5, False, "Dr. Selin Ay"),
]

SLOT_STARTS = ["09:00", "10:00", "11:00", "13:00", "14:00", "15:00", "16:00"]

PASSED_FIRST_YEAR = ["BM101", "BM103", "BM105", "BM102", "BM104", "BM106"]
CURRENT_COURSES = ["BM201", "BM203", "BM205"]


def seed_sample_data(db: Session, today: date | None = None) -> bool:
    """
    Fill an empty store with the demo campus. Returns False (and writes
    nothing) when departments already exist.
    """
    if db.query(Department.id).first():
        logger.info("Sample data already exists")
        return False

    today = today or date.today()
    logger.info("Seeding sample data...")

    bm = Department(code="BM", name="Bilgisayar Mühendisliği", faculty=FACULTY)
    eem = Department(code="EEM", name="Elektrik-Elektronik Mühendisliği", faculty=FACULTY)
    db.add_all([bm, eem])
    db.flush()

    course_ids = {}
    for i, (code, name, class_year, semester, credits, ects, mandatory, instructor) in enumerate(BM_COURSES):
        c = Course(
            code=code,
            name=name,
            department_id=bm.id,
            class_year=class_year,
            semester=semester,
            credits=credits,
            ects=ects,
            is_mandatory=mandatory,
            instructor=instructor,
            quota=40,
        )
        db.add(c)
        db.flush()
        course_ids[code] = c.id

        start = SLOT_STARTS[(i // 5) % len(SLOT_STARTS)]
        db.add(
            CourseSchedule(
                course_id=c.id,
                day=WORK_DAYS[i % 5].value,
                start_time=start,
                end_time=add_hours(start, 2),
                classroom=f"A-{100 + i % 10}",
                faculty=FACULTY,
            )
        )

        midterm = today + timedelta(days=30 + i * 2)
        final = midterm + timedelta(days=45)
        for exam_type, exam_date in (("midterm", midterm), ("final", final)):
            db.add(
                Exam(
                    course_id=c.id,
                    exam_type=exam_type,
                    exam_date=exam_date.isoformat(),
                    start_time="10:00",
                    end_time="12:00",
                    classroom=f"S-{100 + i % 5}",
                    faculty=FACULTY,
                )
            )

    student = Student(
        student_number=DEMO_STUDENT_NUMBER,
        first_name="Ahmet",
        last_name="Yılmaz",
        email="ahmet.yilmaz@ogrenci.edu.tr",
        password="123456",
        department_id=bm.id,
        class_year=2,
        gno=2.85,
        yno=3.10,
    )
    db.add(student)
    db.flush()

    current_year = academic_year_for(today)
    start_year = int(current_year[:4])
    previous_year = f"{start_year - 1}-{start_year}"

    for code in PASSED_FIRST_YEAR:
        db.add(
            StudentCourse(
                student_id=student.id,
                course_id=course_ids[code],
                # odd course numbers run in the fall
                semester="fall" if int(code[-1]) % 2 else "spring",
                academic_year=previous_year,
                status="passed",
                midterm_grade=80.0,
                final_grade=75.0,
                letter_grade="BB",
                grade_point=3.0,
            )
        )

    for code in CURRENT_COURSES:
        db.add(
            StudentCourse(
                student_id=student.id,
                course_id=course_ids[code],
                semester="fall",
                academic_year=current_year,
                status="enrolled",
            )
        )

    commit_or_raise(db)
    logger.info("Sample data seeded: %d courses, student %s", len(course_ids), DEMO_STUDENT_NUMBER)
    return True
