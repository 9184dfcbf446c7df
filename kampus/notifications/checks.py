"""
One function per notification category. Each takes an open DB session and
the current local time and returns the notifications that apply right now;
deduplication is left to the engine.
"""
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from kampus.config import settings
from kampus.schemas.notification import NotificationIn
from kampus.services.academic_calendar import get_academic_calendar
from kampus.services.announcements import get_announcements
from kampus.services.cafeteria import get_cafeteria_menu_by_date
from kampus.services.courses import get_enrolled_schedules
from kampus.services.events import get_upcoming_events
from kampus.utils.timeslots import Weekday, minutes_of, to_minutes

CALENDAR_TITLES = {0: "Bugün", 1: "Yarın", 3: "3 Gün Kaldı"}
EVENT_TITLES = {0: "Bugün", 1: "Yarın"}


def class_reminders(db: Session, student_id: int, now: datetime) -> list[NotificationIn]:
    today = Weekday.of(now.date()).value
    current = minutes_of(now)

    out = []
    for s in get_enrolled_schedules(db, student_id):
        if s.day != today:
            continue
        left = to_minutes(s.start_time) - current
        if 0 < left <= settings.CLASS_REMINDER_MINUTES:
            out.append(
                NotificationIn(
                    type="reminder",
                    title="Ders Hatırlatması",
                    message=f"{s.course_name} dersiniz {left} dakika içinde başlıyor ({s.classroom}).",
                )
            )
        if 0 < left <= settings.CLASS_STARTING_MINUTES:
            out.append(
                NotificationIn(
                    type="reminder",
                    title="Ders Başlıyor",
                    message=f"{s.course_name} dersi {s.start_time}'de {s.classroom} sınıfında başlıyor.",
                )
            )
    return out


def events(db: Session, now: datetime) -> list[NotificationIn]:
    """Campus events today/tomorrow, calendar entries today/tomorrow/in 3 days."""
    today = now.date()
    out = []

    # every event today or tomorrow, however many there are
    for ev in get_upcoming_events(db, now, limit=None, until=today + timedelta(days=2)):
        label = EVENT_TITLES.get((ev.event_date.date() - today).days)
        if label is None:
            continue
        where = f", {ev.location}" if ev.location else ""
        out.append(
            NotificationIn(
                type="event",
                title=f"{label}: {ev.title}",
                message=f"{ev.title} saat {ev.event_date:%H:%M}{where}.",
            )
        )

    for entry in get_academic_calendar(db):
        label = CALENDAR_TITLES.get((entry.event_date - today).days)
        if label is None:
            continue
        out.append(
            NotificationIn(
                type="event",
                title=f"{label}: {entry.title}",
                message=entry.description or f"Akademik takvim: {entry.title} ({entry.event_date:%d.%m.%Y})",
            )
        )
    return out


def cafeteria(db: Session, now: datetime) -> list[NotificationIn]:
    mains = [m.name for m in get_cafeteria_menu_by_date(db, now.date()) if m.category == "main"]
    if not mains:
        return []
    return [
        NotificationIn(
            type="cafeteria",
            title="Günün Menüsü",
            message=f"Bugün yemekhanede {' ve '.join(mains[:2])} var!",
        )
    ]


def announcements(db: Session, now: datetime) -> list[NotificationIn]:
    since = now - timedelta(hours=settings.ANNOUNCEMENT_LOOKBACK_HOURS)
    out = []
    for a in get_announcements(db, limit=settings.ANNOUNCEMENT_SCAN_LIMIT):
        if a.created_at < since:
            continue
        out.append(
            NotificationIn(
                type="announcement",
                title=f"Yeni Duyuru: {a.title}",
                message=f"{a.owner}: {a.description[:120]}",
            )
        )
    return out
