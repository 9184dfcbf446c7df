import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from kampus.config import settings

FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: Optional[str] = None, log_dir: Optional[str] = None):
    """
    Root logger -> console + <LOG_DIR>/kampus.log (rotated, 5 x 5MB).
    Safe to call more than once; handlers are only attached the first time.
    """
    level = (level or settings.LOG_LEVEL).upper()
    root = logging.getLogger()
    root.setLevel(level)

    if any(getattr(h, "name", None) == "kampus.file" for h in root.handlers):
        return

    folder = Path(log_dir or settings.LOG_DIR)
    folder.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(fmt=FORMAT, datefmt=DATEFMT)

    console = logging.StreamHandler()
    console.set_name("kampus.console")
    console.setLevel(level)
    console.setFormatter(formatter)

    file_handler = RotatingFileHandler(
        folder / "kampus.log",
        maxBytes=5 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.set_name("kampus.file")
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)

    root.addHandler(console)
    root.addHandler(file_handler)

    # SQL echo goes through create_engine(echo=...), keep the pool quiet otherwise
    if not settings.SQLALCHEMY_ECHO:
        logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
