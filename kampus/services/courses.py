import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from kampus.database import commit_or_raise
from kampus.errors import InvalidInputError, NotFoundError
from kampus.models.course import Course, CoursePrerequisite
from kampus.models.course_schedule import CourseSchedule
from kampus.models.department import Department
from kampus.models.student_course import StudentCourse
from kampus.schemas.course import (
    CourseCreate,
    CourseOut,
    CourseScheduleIn,
    CourseScheduleOut,
    CourseScheduleUpdate,
    CourseUpdate,
    PrerequisiteOut,
)
from kampus.utils.timeslots import Weekday, to_minutes

logger = logging.getLogger("kampus.courses")


# ==================== courses ====================

def _course_query(db: Session):
    enrolled_sq = (
        db.query(StudentCourse.course_id.label("cid"), func.count().label("enrolled_count"))
        .filter(StudentCourse.status == "enrolled")
        .group_by(StudentCourse.course_id)
        .subquery()
    )
    return (
        db.query(
            Course,
            Department.name.label("department_name"),
            Department.code.label("department_code"),
            func.coalesce(enrolled_sq.c.enrolled_count, 0).label("enrolled_count"),
        )
        .join(Department, Department.id == Course.department_id)
        .outerjoin(enrolled_sq, enrolled_sq.c.cid == Course.id)
    )


def _to_out(row) -> CourseOut:
    c, department_name, department_code, enrolled_count = row
    out = CourseOut.model_validate(c)
    out.department_name = department_name
    out.department_code = department_code
    out.enrolled_count = int(enrolled_count or 0)
    return out


def get_course_by_id(db: Session, course_id: int) -> CourseOut | None:
    row = _course_query(db).filter(Course.id == course_id).first()
    return _to_out(row) if row else None


def get_courses_by_department(db: Session, department_id: int) -> list[CourseOut]:
    rows = (
        _course_query(db)
        .filter(Course.department_id == department_id)
        .order_by(Course.class_year.asc(), Course.semester.asc(), Course.code.asc())
        .all()
    )
    return [_to_out(r) for r in rows]


def get_courses_by_department_and_year(db: Session, department_id: int, class_year: int) -> list[CourseOut]:
    """Courses a student of ``class_year`` may see: their own year and below."""
    rows = (
        _course_query(db)
        .filter(Course.department_id == department_id, Course.class_year <= class_year)
        .order_by(Course.class_year.asc(), Course.semester.asc(), Course.code.asc())
        .all()
    )
    return [_to_out(r) for r in rows]


def create_course(db: Session, body: CourseCreate) -> CourseOut:
    if not db.query(Department.id).filter(Department.id == body.department_id).first():
        raise NotFoundError(f"Department {body.department_id} not found")

    c = Course(**body.model_dump())
    db.add(c)
    commit_or_raise(db)
    logger.info("Course created: %s (%s)", c.code, c.id)
    return get_course_by_id(db, c.id)


def update_course(db: Session, course_id: int, body: CourseUpdate) -> CourseOut:
    c = db.query(Course).filter(Course.id == course_id).first()
    if not c:
        raise NotFoundError(f"Course {course_id} not found")

    for k, v in body.model_dump(exclude_unset=True).items():
        setattr(c, k, v)

    commit_or_raise(db)
    return get_course_by_id(db, course_id)


def delete_course(db: Session, course_id: int):
    """Schedules, exams, enrollments and prerequisite links are cascaded."""
    c = db.query(Course).filter(Course.id == course_id).first()
    if not c:
        raise NotFoundError(f"Course {course_id} not found")

    db.delete(c)
    commit_or_raise(db)
    logger.info("Course deleted: %s", c.code)


def add_course_prerequisite(db: Session, course_id: int, prerequisite_course_id: int) -> PrerequisiteOut:
    if course_id == prerequisite_course_id:
        raise InvalidInputError("a course cannot be its own prerequisite")
    found = db.query(Course.id).filter(Course.id.in_([course_id, prerequisite_course_id])).count()
    if found != 2:
        raise NotFoundError("Course not found")

    db.add(CoursePrerequisite(course_id=course_id, prerequisite_course_id=prerequisite_course_id))
    commit_or_raise(db)
    return next(p for p in get_course_prerequisites(db, course_id) if p.prerequisite_course_id == prerequisite_course_id)


def get_course_prerequisites(db: Session, course_id: int) -> list[PrerequisiteOut]:
    rows = (
        db.query(CoursePrerequisite, Course.code, Course.name)
        .join(Course, Course.id == CoursePrerequisite.prerequisite_course_id)
        .filter(CoursePrerequisite.course_id == course_id)
        .order_by(Course.code.asc())
        .all()
    )
    return [
        PrerequisiteOut(
            course_id=p.course_id,
            prerequisite_course_id=p.prerequisite_course_id,
            prerequisite_code=code,
            prerequisite_name=name,
        )
        for p, code, name in rows
    ]


# ==================== schedules ====================

def _schedule_query(db: Session):
    return (
        db.query(
            CourseSchedule,
            Course.code.label("course_code"),
            Course.name.label("course_name"),
            Course.instructor.label("instructor"),
            Department.name.label("department_name"),
        )
        .join(Course, Course.id == CourseSchedule.course_id)
        .join(Department, Department.id == Course.department_id)
    )


def _schedule_out(row) -> CourseScheduleOut:
    s, course_code, course_name, instructor, department_name = row
    out = CourseScheduleOut.model_validate(s)
    out.course_code = course_code
    out.course_name = course_name
    out.instructor = instructor
    out.department_name = department_name
    return out


def _week_order(s: CourseScheduleOut):
    # unknown day strings sort after Pazar
    try:
        day = Weekday(s.day).position
    except ValueError:
        day = 7
    return day, to_minutes(s.start_time)


def sort_schedules(rows: list[CourseScheduleOut]) -> list[CourseScheduleOut]:
    return sorted(rows, key=_week_order)


def create_course_schedule(db: Session, body: CourseScheduleIn) -> CourseScheduleOut:
    if not db.query(Course.id).filter(Course.id == body.course_id).first():
        raise NotFoundError(f"Course {body.course_id} not found")

    s = CourseSchedule(
        course_id=body.course_id,
        day=body.day.value,
        start_time=body.start_time,
        end_time=body.end_time,
        classroom=body.classroom,
        faculty=body.faculty,
    )
    db.add(s)
    commit_or_raise(db)
    return _schedule_out(_schedule_query(db).filter(CourseSchedule.id == s.id).first())


def update_course_schedule(db: Session, schedule_id: int, body: CourseScheduleUpdate) -> CourseScheduleOut:
    s = db.query(CourseSchedule).filter(CourseSchedule.id == schedule_id).first()
    if not s:
        raise NotFoundError(f"Schedule {schedule_id} not found")

    data = body.model_dump(exclude_unset=True)
    if "day" in data and data["day"] is not None:
        data["day"] = Weekday(data["day"]).value

    start = data.get("start_time") or s.start_time
    end = data.get("end_time") or s.end_time
    if to_minutes(end) <= to_minutes(start):
        raise InvalidInputError(f"end_time {end} must be after start_time {start}")

    for k, v in data.items():
        setattr(s, k, v)

    commit_or_raise(db)
    return _schedule_out(_schedule_query(db).filter(CourseSchedule.id == schedule_id).first())


def delete_course_schedule(db: Session, schedule_id: int):
    s = db.query(CourseSchedule).filter(CourseSchedule.id == schedule_id).first()
    if not s:
        raise NotFoundError(f"Schedule {schedule_id} not found")
    db.delete(s)
    commit_or_raise(db)


def get_course_schedules(db: Session, course_id: int) -> list[CourseScheduleOut]:
    rows = _schedule_query(db).filter(CourseSchedule.course_id == course_id).all()
    return sort_schedules([_schedule_out(r) for r in rows])


def get_schedules_by_day(db: Session, day: Weekday | str) -> list[CourseScheduleOut]:
    day = Weekday(day).value
    rows = _schedule_query(db).filter(CourseSchedule.day == day).all()
    return sort_schedules([_schedule_out(r) for r in rows])


def get_all_schedules(db: Session) -> list[CourseScheduleOut]:
    rows = _schedule_query(db).all()
    return sort_schedules([_schedule_out(r) for r in rows])


def get_enrolled_schedules(db: Session, student_id: int) -> list[CourseScheduleOut]:
    """Schedule rows of every course the student is currently enrolled in, each slot once."""
    enrolled = select(StudentCourse.course_id).where(
        StudentCourse.student_id == student_id, StudentCourse.status == "enrolled"
    )
    rows = _schedule_query(db).filter(Course.id.in_(enrolled)).all()
    return sort_schedules([_schedule_out(r) for r in rows])
