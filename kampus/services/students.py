import logging

from sqlalchemy.orm import Session

from kampus.database import commit_or_raise
from kampus.errors import NotFoundError
from kampus.models.department import Department
from kampus.models.student import Student
from kampus.schemas.student import StudentCreate, StudentOut, StudentUpdate

logger = logging.getLogger("kampus.admin")


def _student_query(db: Session):
    return db.query(
        Student,
        Department.name.label("department_name"),
        Department.code.label("department_code"),
        Department.faculty.label("faculty"),
    ).join(Department, Department.id == Student.department_id)


def _to_out(row) -> StudentOut:
    s, department_name, department_code, faculty = row
    out = StudentOut.model_validate(s)
    out.department_name = department_name
    out.department_code = department_code
    out.faculty = faculty
    return out


def get_all_students(db: Session) -> list[StudentOut]:
    rows = _student_query(db).order_by(Student.student_number.asc()).all()
    return [_to_out(r) for r in rows]


def get_student_by_id(db: Session, student_id: int) -> StudentOut | None:
    row = _student_query(db).filter(Student.id == student_id).first()
    return _to_out(row) if row else None


def get_student_by_number(db: Session, student_number: str) -> StudentOut | None:
    row = _student_query(db).filter(Student.student_number == student_number).first()
    return _to_out(row) if row else None


def create_student(db: Session, body: StudentCreate) -> StudentOut:
    if not db.query(Department.id).filter(Department.id == body.department_id).first():
        raise NotFoundError(f"Department {body.department_id} not found")

    s = Student(
        student_number=body.student_number,
        first_name=body.first_name,
        last_name=body.last_name,
        email=body.email or None,
        password=body.password or None,
        department_id=body.department_id,
        class_year=body.class_year,
        gno=body.gno,
        yno=body.yno,
    )
    db.add(s)
    commit_or_raise(db)
    logger.info("Student created: %s", s.student_number)
    return get_student_by_id(db, s.id)


def update_student(db: Session, student_id: int, body: StudentUpdate) -> StudentOut:
    s = db.query(Student).filter(Student.id == student_id).first()
    if not s:
        raise NotFoundError(f"Student {student_id} not found")

    data = body.model_dump(exclude_unset=True)
    if data.get("department_id") is not None:
        if not db.query(Department.id).filter(Department.id == data["department_id"]).first():
            raise NotFoundError(f"Department {data['department_id']} not found")

    for k, v in data.items():
        setattr(s, k, v)

    commit_or_raise(db)
    return get_student_by_id(db, student_id)


def delete_student(db: Session, student_id: int):
    """Enrollments, comments, likes, favorites and settings go with the row (ON DELETE CASCADE)."""
    s = db.query(Student).filter(Student.id == student_id).first()
    if not s:
        raise NotFoundError(f"Student {student_id} not found")

    db.delete(s)
    commit_or_raise(db)
    logger.info("Student deleted: %s", s.student_number)


def get_student_password(db: Session, student_number: str) -> tuple[int, str | None] | None:
    """(id, password) for the login check; None when the number is unknown."""
    row = (
        db.query(Student.id, Student.password)
        .filter(Student.student_number == student_number)
        .first()
    )
    return (row[0], row[1]) if row else None
