from sqlalchemy.orm import Session

from kampus.database import commit_or_raise
from kampus.errors import InvalidInputError, NotFoundError
from kampus.models.academic_calendar import AcademicCalendarEntry
from kampus.schemas.academic_calendar import (
    AcademicCalendarCreate,
    AcademicCalendarOut,
    AcademicCalendarUpdate,
)


def get_academic_calendar(db: Session) -> list[AcademicCalendarOut]:
    rows = db.query(AcademicCalendarEntry).order_by(AcademicCalendarEntry.event_date.asc()).all()
    return [AcademicCalendarOut.model_validate(r) for r in rows]


def create_academic_calendar_event(db: Session, body: AcademicCalendarCreate) -> AcademicCalendarOut:
    data = body.model_dump()
    data["event_date"] = body.event_date.isoformat()
    data["end_date"] = body.end_date.isoformat() if body.end_date else None

    entry = AcademicCalendarEntry(**data)
    db.add(entry)
    commit_or_raise(db)
    return AcademicCalendarOut.model_validate(entry)


def update_academic_calendar_event(db: Session, entry_id: int, body: AcademicCalendarUpdate) -> AcademicCalendarOut:
    entry = db.query(AcademicCalendarEntry).filter(AcademicCalendarEntry.id == entry_id).first()
    if not entry:
        raise NotFoundError(f"Calendar entry {entry_id} not found")

    data = body.model_dump(exclude_unset=True)
    for key in ("event_date", "end_date"):
        if data.get(key) is not None:
            data[key] = data[key].isoformat()

    start = data.get("event_date") or entry.event_date
    end = data["end_date"] if "end_date" in data else entry.end_date
    if end is not None and end < start:
        raise InvalidInputError("end_date cannot be before event_date")

    for k, v in data.items():
        setattr(entry, k, v)

    commit_or_raise(db)
    return AcademicCalendarOut.model_validate(entry)


def delete_academic_calendar_event(db: Session, entry_id: int):
    entry = db.query(AcademicCalendarEntry).filter(AcademicCalendarEntry.id == entry_id).first()
    if not entry:
        raise NotFoundError(f"Calendar entry {entry_id} not found")
    db.delete(entry)
    commit_or_raise(db)
