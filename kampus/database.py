import logging
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from kampus.config import settings
from kampus.errors import DuplicateKeyError, PersistenceError, StorageUnavailableError

logger = logging.getLogger("kampus.db")


class Base(DeclarativeBase):
    pass


def make_engine(url: str, echo: bool = False) -> Engine:
    """SQLite engine with foreign keys enforced on every connection."""
    kwargs = {"echo": echo, "connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # one shared connection, otherwise every session sees an empty database
        kwargs["poolclass"] = StaticPool
    else:
        db_file = url.split("sqlite:///", 1)[-1]
        Path(db_file).parent.mkdir(parents=True, exist_ok=True)

    eng = create_engine(url, **kwargs)

    @event.listens_for(eng, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cur = dbapi_connection.cursor()
        cur.execute("PRAGMA foreign_keys = ON")
        cur.close()

    return eng


engine = make_engine(settings.database_url, echo=settings.SQLALCHEMY_ECHO)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@contextmanager
def get_db(factory: sessionmaker = SessionLocal):
    db = factory()
    try:
        yield db
    finally:
        db.close()


def import_models():
    # every table module has to be imported before create_all sees it
    from kampus.models import (  # noqa: F401
        academic_calendar,
        announcement,
        announcement_comment,
        announcement_like,
        bus_schedule,
        cafeteria,
        course,
        course_schedule,
        department,
        event as campus_event,
        exam,
        favorite,
        location,
        student,
        student_course,
        student_settings,
    )


def init_db(bind: Engine = engine):
    import_models()
    Base.metadata.create_all(bind=bind)
    logger.info("Database ready (%s)", bind.url)


def clear_all_data(db: Session):
    """Empty every table, children first."""
    import_models()
    for table in reversed(Base.metadata.sorted_tables):
        db.execute(table.delete())
    commit_or_raise(db)
    logger.warning("All campus data cleared")


def commit_or_raise(db: Session):
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("Constraint violation: %s", e.orig)
        if "UNIQUE" in str(e.orig).upper():
            raise DuplicateKeyError(str(e.orig)) from e
        raise PersistenceError(str(e.orig)) from e
    except OperationalError as e:
        db.rollback()
        logger.exception("Storage failure")
        raise StorageUnavailableError(str(e.orig)) from e
