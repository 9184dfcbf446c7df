import logging

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from kampus.config import settings
from kampus.database import SessionLocal, engine, get_db, init_db
from kampus.logging_config import setup_logging
from kampus.services.seed import seed_sample_data
from kampus.session import CampusSession

logger = logging.getLogger("kampus")


def bootstrap(bind: Engine = engine, session_factory: sessionmaker = SessionLocal, seed: bool | None = None) -> sessionmaker:
    """Logging, tables and (optionally) the demo data. Returns the session factory to hand out."""
    setup_logging()

    init_db(bind=bind)

    if seed is None:
        seed = settings.SEED_SAMPLE_DATA
    if seed:
        with get_db(session_factory) as db:
            seed_sample_data(db)

    logger.info("Kampüs Rehberi core ready")
    return session_factory


def new_session(session_factory: sessionmaker | None = None) -> CampusSession:
    return CampusSession(session_factory or bootstrap())


if __name__ == "__main__":
    bootstrap()
