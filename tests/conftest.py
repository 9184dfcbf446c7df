import os
import tempfile

# settings are read once at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_SAMPLE_DATA"] = "false"
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="kampus-logs-"))

import pytest
from sqlalchemy.orm import sessionmaker

from kampus.database import init_db, make_engine
from kampus.schemas.course import CourseCreate, CourseScheduleIn
from kampus.schemas.department import DepartmentCreate
from kampus.schemas.enrollment import EnrollmentCreate
from kampus.schemas.student import StudentCreate
from kampus.services.courses import create_course, create_course_schedule
from kampus.services.departments import create_department
from kampus.services.enrollment import enroll_course
from kampus.services.students import create_student

FACULTY = "Mühendislik Fakültesi"
YEAR = "2026-2027"


@pytest.fixture
def engine():
    eng = make_engine("sqlite://")
    init_db(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    s = session_factory()
    yield s
    s.close()


class Campus:
    """Small builders so tests only spell out what they care about."""

    def __init__(self, db):
        self.db = db
        self._numbers = iter(range(2024000001, 2024999999))

    def department(self, code="BM", name="Bilgisayar Mühendisliği"):
        return create_department(self.db, DepartmentCreate(code=code, name=name, faculty=FACULTY))

    def course(self, department, code, class_year=1, quota=40, slots=(), **extra):
        c = create_course(
            self.db,
            CourseCreate(
                code=code,
                name=extra.pop("name", f"{code} dersi"),
                department_id=department.id,
                class_year=class_year,
                semester=1,
                quota=quota,
                **extra,
            ),
        )
        for day, start, end in slots:
            create_course_schedule(
                self.db,
                CourseScheduleIn(
                    course_id=c.id,
                    day=day,
                    start_time=start,
                    end_time=end,
                    classroom="A-101",
                    faculty=FACULTY,
                ),
            )
        return c

    def student(self, department, class_year=1, password=None, number=None):
        return create_student(
            self.db,
            StudentCreate(
                student_number=number or str(next(self._numbers)),
                first_name="Ayşe",
                last_name="Demir",
                password=password,
                department_id=department.id,
                class_year=class_year,
            ),
        )

    def enroll(self, student, course, status="enrolled", academic_year=YEAR, semester="fall"):
        return enroll_course(
            self.db,
            EnrollmentCreate(
                student_id=student.id,
                course_id=course.id,
                semester=semester,
                academic_year=academic_year,
                status=status,
            ),
        )


@pytest.fixture
def campus(db):
    return Campus(db)
