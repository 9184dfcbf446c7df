import re
from datetime import date, datetime
from enum import Enum
from typing import Optional

_CLOCK_RE = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")


class Weekday(str, Enum):
    """Day names exactly as they are stored in course_schedules.day."""

    PAZARTESI = "Pazartesi"
    SALI = "Salı"
    CARSAMBA = "Çarşamba"
    PERSEMBE = "Perşembe"
    CUMA = "Cuma"
    CUMARTESI = "Cumartesi"
    PAZAR = "Pazar"

    @classmethod
    def of(cls, d: date) -> "Weekday":
        return _ORDER[d.weekday()]

    @property
    def position(self) -> int:
        return _ORDER.index(self)


_ORDER = list(Weekday)

WORK_DAYS = _ORDER[:5]


def to_minutes(hhmm: str) -> int:
    """
    "09:30" -> 570
    Raises ValueError for anything that is not a 24h HH:MM string.
    """
    m = _CLOCK_RE.match((hhmm or "").strip())
    if not m:
        raise ValueError(f"invalid time {hhmm!r}, expected HH:MM")
    return int(m.group(1)) * 60 + int(m.group(2))


def format_minutes(minutes: int) -> str:
    minutes %= 24 * 60
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def add_hours(hhmm: str, hours: int) -> str:
    return format_minutes(to_minutes(hhmm) + hours * 60)


def minutes_of(dt: datetime) -> int:
    return dt.hour * 60 + dt.minute


def overlaps(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    # touching ranges (10:00-11:00 / 11:00-12:00) do not overlap
    return not (end_a <= start_b or end_b <= start_a)


def now_iso(now: Optional[datetime] = None) -> str:
    return (now or datetime.now()).replace(microsecond=0).isoformat()


def parse_iso_date(value: str) -> date:
    """Accepts 'YYYY-MM-DD' and full 'YYYY-MM-DDTHH:MM:SS' timestamps."""
    return date.fromisoformat(value[:10])
