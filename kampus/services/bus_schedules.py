from sqlalchemy.orm import Session

from kampus.database import commit_or_raise
from kampus.errors import NotFoundError
from kampus.models.bus_schedule import BusSchedule
from kampus.schemas.bus import BusScheduleCreate, BusScheduleOut


def get_bus_schedules(db: Session, line: str | None = None) -> list[BusScheduleOut]:
    """Departures of one line by time, or of every line grouped by line."""
    q = db.query(BusSchedule)
    if line is not None:
        q = q.filter(BusSchedule.line == line).order_by(BusSchedule.time.asc())
    else:
        q = q.order_by(BusSchedule.line.asc(), BusSchedule.time.asc())
    return [BusScheduleOut.model_validate(r) for r in q.order_by(BusSchedule.id.asc()).all()]


def create_bus_schedule(db: Session, body: BusScheduleCreate) -> BusScheduleOut:
    bus = BusSchedule(**body.model_dump())
    db.add(bus)
    commit_or_raise(db)
    db.refresh(bus)
    return BusScheduleOut.model_validate(bus)


def delete_bus_schedule(db: Session, schedule_id: int):
    bus = db.query(BusSchedule).filter(BusSchedule.id == schedule_id).first()
    if not bus:
        raise NotFoundError(f"Bus schedule {schedule_id} not found")
    db.delete(bus)
    commit_or_raise(db)
