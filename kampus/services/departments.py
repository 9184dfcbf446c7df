import logging

from sqlalchemy.orm import Session

from kampus.database import commit_or_raise
from kampus.errors import DepartmentInUseError, NotFoundError
from kampus.models.course import Course
from kampus.models.department import Department
from kampus.schemas.department import DepartmentCreate, DepartmentOut, DepartmentUpdate

logger = logging.getLogger("kampus.admin")


def get_departments(db: Session) -> list[DepartmentOut]:
    rows = db.query(Department).order_by(Department.name.asc()).all()
    return [DepartmentOut.model_validate(r) for r in rows]


def get_department_by_id(db: Session, department_id: int) -> DepartmentOut | None:
    d = db.query(Department).filter(Department.id == department_id).first()
    return DepartmentOut.model_validate(d) if d else None


def get_department_by_code(db: Session, code: str) -> DepartmentOut | None:
    d = db.query(Department).filter(Department.code == code).first()
    return DepartmentOut.model_validate(d) if d else None


def create_department(db: Session, body: DepartmentCreate) -> DepartmentOut:
    d = Department(code=body.code, name=body.name, faculty=body.faculty)
    db.add(d)
    commit_or_raise(db)
    db.refresh(d)
    logger.info("Department created: %s (%s)", d.code, d.id)
    return DepartmentOut.model_validate(d)


def update_department(db: Session, department_id: int, body: DepartmentUpdate) -> DepartmentOut:
    d = db.query(Department).filter(Department.id == department_id).first()
    if not d:
        raise NotFoundError(f"Department {department_id} not found")

    for k, v in body.model_dump(exclude_unset=True).items():
        setattr(d, k, v)

    commit_or_raise(db)
    db.refresh(d)
    return DepartmentOut.model_validate(d)


def delete_department(db: Session, department_id: int):
    d = db.query(Department).filter(Department.id == department_id).first()
    if not d:
        raise NotFoundError(f"Department {department_id} not found")

    # courses are not cascaded away from under the admin
    course_count = db.query(Course.id).filter(Course.department_id == department_id).count()
    if course_count:
        raise DepartmentInUseError(
            f"Department {d.code} still has {course_count} course(s); delete them first"
        )

    db.delete(d)
    commit_or_raise(db)
    logger.info("Department deleted: %s", d.code)
