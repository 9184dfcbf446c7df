import logging

from sqlalchemy.orm import Session

from kampus.database import commit_or_raise
from kampus.errors import NotFoundError
from kampus.models.favorite import Favorite
from kampus.models.location import Location
from kampus.models.student import Student
from kampus.schemas.location import LocationCreate, LocationOut

logger = logging.getLogger("kampus.locations")


# ==================== locations ====================

def get_locations(db: Session) -> list[LocationOut]:
    rows = db.query(Location).order_by(Location.name.asc(), Location.id.asc()).all()
    return [LocationOut.model_validate(r) for r in rows]


def get_locations_by_type(db: Session, location_type: str) -> list[LocationOut]:
    rows = (
        db.query(Location)
        .filter(Location.type == location_type)
        .order_by(Location.name.asc(), Location.id.asc())
        .all()
    )
    return [LocationOut.model_validate(r) for r in rows]


def create_location(db: Session, body: LocationCreate) -> LocationOut:
    loc = Location(**body.model_dump())
    db.add(loc)
    commit_or_raise(db)
    db.refresh(loc)
    logger.info("Location created: %s (%s)", loc.name, loc.type)
    return LocationOut.model_validate(loc)


def delete_location(db: Session, location_id: int):
    """Favorites pointing at the location go with it."""
    loc = db.query(Location).filter(Location.id == location_id).first()
    if not loc:
        raise NotFoundError(f"Location {location_id} not found")
    db.delete(loc)
    commit_or_raise(db)


# ==================== favorites ====================

def _favorite(db: Session, student_id: int, location_id: int):
    return (
        db.query(Favorite)
        .filter(Favorite.student_id == student_id, Favorite.location_id == location_id)
        .first()
    )


def add_favorite(db: Session, student_id: int, location_id: int) -> bool:
    """Returns False when the location was already a favorite."""
    if not db.query(Student.id).filter(Student.id == student_id).first():
        raise NotFoundError(f"Student {student_id} not found")
    if not db.query(Location.id).filter(Location.id == location_id).first():
        raise NotFoundError(f"Location {location_id} not found")

    if _favorite(db, student_id, location_id):
        return False
    db.add(Favorite(student_id=student_id, location_id=location_id))
    commit_or_raise(db)
    return True


def remove_favorite(db: Session, student_id: int, location_id: int) -> bool:
    fav = _favorite(db, student_id, location_id)
    if not fav:
        return False
    db.delete(fav)
    commit_or_raise(db)
    return True


def is_favorite(db: Session, student_id: int, location_id: int) -> bool:
    return _favorite(db, student_id, location_id) is not None


def get_favorites(db: Session, student_id: int) -> list[LocationOut]:
    """Favorite locations, most recently added first."""
    rows = (
        db.query(Location)
        .join(Favorite, Favorite.location_id == Location.id)
        .filter(Favorite.student_id == student_id)
        .order_by(Favorite.created_at.desc(), Favorite.id.desc())
        .all()
    )
    return [LocationOut.model_validate(r) for r in rows]
