from sqlalchemy.orm import Session

from kampus.database import commit_or_raise
from kampus.errors import NotFoundError
from kampus.models.student import Student
from kampus.models.student_settings import StudentSettings
from kampus.schemas.student_settings import StudentSettingsOut, StudentSettingsUpdate


def get_settings(db: Session, student_id: int) -> StudentSettingsOut | None:
    row = db.query(StudentSettings).filter(StudentSettings.student_id == student_id).first()
    return StudentSettingsOut.model_validate(row) if row else None


def create_or_update_settings(db: Session, student_id: int, body: StudentSettingsUpdate) -> StudentSettingsOut:
    """Upsert; fields left out keep their stored (or default) value."""
    row = db.query(StudentSettings).filter(StudentSettings.student_id == student_id).first()
    if row is None:
        if not db.query(Student.id).filter(Student.id == student_id).first():
            raise NotFoundError(f"Student {student_id} not found")
        row = StudentSettings(student_id=student_id)
        db.add(row)

    for k, v in body.model_dump(exclude_unset=True).items():
        setattr(row, k, v)

    commit_or_raise(db)
    db.refresh(row)
    return StudentSettingsOut.model_validate(row)
