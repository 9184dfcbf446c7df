from datetime import date, datetime

from sqlalchemy.orm import Session

from kampus.database import commit_or_raise
from kampus.errors import NotFoundError
from kampus.models.event import Event
from kampus.schemas.event import EventCreate, EventOut, EventUpdate


def get_events(db: Session) -> list[EventOut]:
    rows = db.query(Event).order_by(Event.event_date.asc()).all()
    return [EventOut.model_validate(r) for r in rows]


def get_upcoming_events(
    db: Session,
    now: datetime | None = None,
    limit: int | None = 10,
    until: date | None = None,
) -> list[EventOut]:
    """
    Events from the start of today on, soonest first. `until` is an exclusive
    day bound; `limit=None` returns every match.
    """
    today = (now or datetime.now()).date().isoformat()
    q = db.query(Event).filter(Event.event_date >= today)
    if until is not None:
        q = q.filter(Event.event_date < until.isoformat())
    q = q.order_by(Event.event_date.asc(), Event.id.asc())
    if limit is not None:
        q = q.limit(limit)
    rows = q.all()
    return [EventOut.model_validate(r) for r in rows]


def create_event(db: Session, body: EventCreate) -> EventOut:
    data = body.model_dump()
    data["event_date"] = body.event_date.replace(microsecond=0).isoformat()
    ev = Event(**data)
    db.add(ev)
    commit_or_raise(db)
    return EventOut.model_validate(ev)


def update_event(db: Session, event_id: int, body: EventUpdate) -> EventOut:
    ev = db.query(Event).filter(Event.id == event_id).first()
    if not ev:
        raise NotFoundError(f"Event {event_id} not found")

    data = body.model_dump(exclude_unset=True)
    if data.get("event_date") is not None:
        data["event_date"] = data["event_date"].replace(microsecond=0).isoformat()
    for k, v in data.items():
        setattr(ev, k, v)

    commit_or_raise(db)
    return EventOut.model_validate(ev)


def delete_event(db: Session, event_id: int):
    ev = db.query(Event).filter(Event.id == event_id).first()
    if not ev:
        raise NotFoundError(f"Event {event_id} not found")
    db.delete(ev)
    commit_or_raise(db)
