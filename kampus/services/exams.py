import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session

from kampus.database import commit_or_raise
from kampus.errors import InvalidInputError, NotFoundError
from kampus.models.course import Course
from kampus.models.department import Department
from kampus.models.exam import Exam
from kampus.models.student_course import StudentCourse
from kampus.schemas.exam import ExamCreate, ExamOut, ExamUpdate
from kampus.utils.timeslots import to_minutes

logger = logging.getLogger("kampus.exams")


def _exam_query(db: Session):
    return (
        db.query(
            Exam,
            Course.code.label("course_code"),
            Course.name.label("course_name"),
            Department.name.label("department_name"),
        )
        .join(Course, Course.id == Exam.course_id)
        .join(Department, Department.id == Course.department_id)
    )


def _to_out(row) -> ExamOut:
    e, course_code, course_name, department_name = row
    out = ExamOut.model_validate(e)
    out.course_code = course_code
    out.course_name = course_name
    out.department_name = department_name
    return out


def _ordered(q):
    return q.order_by(Exam.exam_date.asc(), Exam.start_time.asc())


def create_exam(db: Session, body: ExamCreate) -> ExamOut:
    if not db.query(Course.id).filter(Course.id == body.course_id).first():
        raise NotFoundError(f"Course {body.course_id} not found")

    e = Exam(
        course_id=body.course_id,
        exam_type=body.exam_type,
        exam_date=body.exam_date.isoformat(),
        start_time=body.start_time,
        end_time=body.end_time,
        classroom=body.classroom,
        faculty=body.faculty,
    )
    db.add(e)
    commit_or_raise(db)
    return _to_out(_exam_query(db).filter(Exam.id == e.id).first())


def update_exam(db: Session, exam_id: int, body: ExamUpdate) -> ExamOut:
    e = db.query(Exam).filter(Exam.id == exam_id).first()
    if not e:
        raise NotFoundError(f"Exam {exam_id} not found")

    data = body.model_dump(exclude_unset=True)
    if data.get("exam_date") is not None:
        data["exam_date"] = data["exam_date"].isoformat()

    start = data.get("start_time") or e.start_time
    end = data.get("end_time") or e.end_time
    if to_minutes(end) <= to_minutes(start):
        raise InvalidInputError(f"end_time {end} must be after start_time {start}")

    for k, v in data.items():
        setattr(e, k, v)

    commit_or_raise(db)
    return _to_out(_exam_query(db).filter(Exam.id == exam_id).first())


def delete_exam(db: Session, exam_id: int):
    e = db.query(Exam).filter(Exam.id == exam_id).first()
    if not e:
        raise NotFoundError(f"Exam {exam_id} not found")
    db.delete(e)
    commit_or_raise(db)


def get_exams_by_course(db: Session, course_id: int) -> list[ExamOut]:
    rows = _ordered(_exam_query(db).filter(Exam.course_id == course_id)).all()
    return [_to_out(r) for r in rows]


def _enrolled_course_ids(student_id: int):
    return select(StudentCourse.course_id).where(
        StudentCourse.student_id == student_id, StudentCourse.status == "enrolled"
    )


def get_exams_by_student(db: Session, student_id: int) -> list[ExamOut]:
    """Exams of every course the student is currently enrolled in."""
    rows = _ordered(_exam_query(db).filter(Course.id.in_(_enrolled_course_ids(student_id)))).all()
    return [_to_out(r) for r in rows]


def get_upcoming_exams(db: Session, student_id: int, today: date | None = None) -> list[ExamOut]:
    today = today or date.today()
    rows = _ordered(
        _exam_query(db).filter(
            Course.id.in_(_enrolled_course_ids(student_id)),
            Exam.exam_date >= today.isoformat(),
        )
    ).all()
    return [_to_out(r) for r in rows]


def get_all_exams(db: Session) -> list[ExamOut]:
    rows = _ordered(_exam_query(db)).all()
    return [_to_out(r) for r in rows]
