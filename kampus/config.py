from datetime import date
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # --- DB ---
    DB_PATH: str = "data/kampus_rehberi.db"
    DATABASE_URL: Optional[str] = None
    SQLALCHEMY_ECHO: bool = False

    # --- logging ---
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    # --- session ---
    ADMIN_PASSWORD: str = "admin123"
    ACTIVE_SEMESTER: str = "fall"
    ACTIVE_ACADEMIC_YEAR: Optional[str] = None
    SEED_SAMPLE_DATA: bool = True

    # --- notifications ---
    NOTIFICATION_INTERVAL_SECONDS: float = 300
    NOTIFICATION_SETTLE_SECONDS: float = 2
    NOTIFICATION_MAX_ENTRIES: int = 200
    CLASS_REMINDER_MINUTES: int = 30
    CLASS_STARTING_MINUTES: int = 5
    ANNOUNCEMENT_LOOKBACK_HOURS: int = 24
    ANNOUNCEMENT_SCAN_LIMIT: int = 5

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
    )

    @property
    def database_url(self) -> str:
        return self.DATABASE_URL or f"sqlite:///{self.DB_PATH}"

    def academic_year(self, today: Optional[date] = None) -> str:
        if self.ACTIVE_ACADEMIC_YEAR:
            return self.ACTIVE_ACADEMIC_YEAR
        return academic_year_for(today or date.today())


def academic_year_for(today: date) -> str:
    """September opens a new academic year: 2026-10-19 -> '2026-2027'."""
    if today.month >= 9:
        return f"{today.year}-{today.year + 1}"
    return f"{today.year - 1}-{today.year}"


settings = Settings()
