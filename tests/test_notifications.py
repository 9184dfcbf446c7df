import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from kampus.notifications import checks
from kampus.notifications.engine import CHECKING, IDLE, NotificationEngine
from kampus.schemas.academic_calendar import AcademicCalendarCreate
from kampus.schemas.announcement import AnnouncementCreate
from kampus.schemas.cafeteria import MenuItemCreate
from kampus.schemas.event import EventCreate
from kampus.schemas.notification import NotificationIn
from kampus.services.academic_calendar import create_academic_calendar_event
from kampus.services.announcements import create_announcement
from kampus.services.cafeteria import create_menu_item
from kampus.services.events import create_event
from kampus.session import CampusSession

# a Monday
NOW = datetime(2026, 10, 19, 8, 40)


class Clock:
    def __init__(self, now=NOW):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def bm(campus):
    return campus.department()


@pytest.fixture
def student(campus, bm):
    return campus.student(bm, number="2021123456")


@pytest.fixture
def session(session_factory, student):
    s = CampusSession(session_factory)
    s.login(student.student_number, "")
    return s


@pytest.fixture
def notifier(session_factory, session, clock):
    return NotificationEngine(session_factory, session, clock=clock, interval=0.01, settle_delay=0)


def _check(notifier):
    return asyncio.run(notifier.check())


def _titles(notifier):
    return [n.title for n in notifier.notifications]


def test_event_today_is_announced_once(db, notifier):
    create_event(db, EventCreate(title="Kariyer Günleri", location="Kongre Merkezi",
                                 event_date=datetime(2026, 10, 19, 14, 0)))

    assert _check(notifier) == 1
    assert len(notifier.notifications) == 1
    assert "Bugün" in notifier.notifications[0].title
    assert notifier.notifications[0].type == "event"

    assert _check(notifier) == 0
    assert len(notifier.notifications) == 1


def test_event_tomorrow_and_later(db, notifier):
    create_event(db, EventCreate(title="Konser", event_date=datetime(2026, 10, 20, 20, 0)))
    create_event(db, EventCreate(title="Tiyatro", event_date=datetime(2026, 10, 22, 20, 0)))

    _check(notifier)
    assert _titles(notifier) == ["Yarın: Konser"]
    assert notifier.notifications[0].message == "Konser saat 20:00."


def test_busy_day_does_not_hide_tomorrows_events(db, notifier):
    for hour in range(9, 20):
        create_event(db, EventCreate(title=f"Oturum {hour}", event_date=datetime(2026, 10, 19, hour, 0)))
    create_event(db, EventCreate(title="Konser", event_date=datetime(2026, 10, 20, 20, 0)))

    assert _check(notifier) == 12
    assert "Yarın: Konser" in _titles(notifier)


def test_calendar_today_tomorrow_and_three_days(db, notifier):
    for title, offset in (("Kayıt", 0), ("Ekle-Bırak", 1), ("Vize", 2), ("Tatil", 3)):
        create_academic_calendar_event(
            db,
            AcademicCalendarCreate(title=title, event_date=NOW.date() + timedelta(days=offset), event_type="deadline"),
        )

    _check(notifier)
    # newest first
    assert _titles(notifier) == ["3 Gün Kaldı: Tatil", "Yarın: Ekle-Bırak", "Bugün: Kayıt"]


def test_class_reminder_windows(campus, bm, notifier, clock, student):
    bm_course = campus.course(
        bm,
        "BM201",
        name="Veri Yapıları",
        slots=[("Pazartesi", "09:00", "11:00"), ("Salı", "09:00", "11:00")],
    )
    campus.enroll(student, bm_course)

    clock.now = datetime(2026, 10, 19, 8, 20)
    assert _check(notifier) == 0

    clock.now = datetime(2026, 10, 19, 8, 40)
    assert _check(notifier) == 1
    assert notifier.notifications[0].message.startswith("Veri Yapıları dersiniz 20 dakika içinde")

    clock.now = datetime(2026, 10, 19, 8, 57)
    assert _check(notifier) == 2
    assert set(_titles(notifier)[:2]) == {"Ders Hatırlatması", "Ders Başlıyor"}

    # countdown wording differs, so each minute is a new entry
    assert sum(1 for t in _titles(notifier) if t == "Ders Hatırlatması") == 2

    clock.now = datetime(2026, 10, 19, 9, 0)
    assert _check(notifier) == 0


def test_class_reminders_ignore_unenrolled_courses(campus, bm, notifier):
    campus.course(bm, "BM203", slots=[("Pazartesi", "09:00", "11:00")])
    assert _check(notifier) == 0


def test_cafeteria_names_up_to_two_mains(db, notifier):
    for name, category in (("Kuru Fasulye", "main"), ("Tavuk Sote", "main"), ("Karnıyarık", "main"), ("Ayran", "drink")):
        create_menu_item(db, MenuItemCreate(name=name, price=40, category=category, menu_date=NOW.date()))

    _check(notifier)
    (n,) = notifier.notifications
    assert n.type == "cafeteria"
    assert n.message == "Bugün yemekhanede Karnıyarık ve Kuru Fasulye var!"


def test_no_cafeteria_notification_without_mains(db, notifier):
    create_menu_item(db, MenuItemCreate(name="Ayran", price=10, category="drink", menu_date=NOW.date()))
    assert _check(notifier) == 0


def test_recent_announcements_only(db, notifier):
    create_announcement(db, AnnouncementCreate(owner="Dekanlık", title="Yeni",
                                               description="Sınav programı açıklandı", created_at=NOW - timedelta(hours=2)))
    create_announcement(db, AnnouncementCreate(owner="Dekanlık", title="Eski",
                                               description="Geçen hafta", created_at=NOW - timedelta(days=3)))

    _check(notifier)
    assert _titles(notifier) == ["Yeni Duyuru: Yeni"]
    assert notifier.notifications[0].message == "Dekanlık: Sınav programı açıklandı"


def test_announcements_with_an_offset_count_as_recent(db, notifier):
    create_announcement(db, AnnouncementCreate(owner="Rektörlük", title="Yerel",
                                               description="Yerel saat", created_at=NOW - timedelta(hours=1)))
    create_announcement(db, AnnouncementCreate(owner="Rektörlük", title="UTC",
                                               description="UTC saat",
                                               created_at=(NOW - timedelta(hours=2)).astimezone(timezone.utc)))

    assert _check(notifier) == 2
    assert set(_titles(notifier)) == {"Yeni Duyuru: Yerel", "Yeni Duyuru: UTC"}


def test_disabled_categories_are_skipped(db, notifier, session):
    create_event(db, EventCreate(title="Kariyer Günleri", event_date=datetime(2026, 10, 19, 14, 0)))
    create_menu_item(db, MenuItemCreate(name="Kuru Fasulye", price=40, category="main", menu_date=NOW.date()))
    session.update_settings(events=False)

    _check(notifier)
    assert [n.type for n in notifier.notifications] == ["cafeteria"]


def test_master_switch_silences_every_category(db, notifier, session):
    create_menu_item(db, MenuItemCreate(name="Kuru Fasulye", price=40, category="main", menu_date=NOW.date()))
    session.update_settings(notifications_enabled=False)
    assert _check(notifier) == 0

    session.update_settings(notifications_enabled=True)
    assert _check(notifier) == 1


def test_failing_category_does_not_stop_the_others(db, notifier, monkeypatch):
    create_event(db, EventCreate(title="Kariyer Günleri", event_date=datetime(2026, 10, 19, 14, 0)))

    def broken(db, now):
        raise ValueError("invalid time '25:00'")

    monkeypatch.setattr(checks, "cafeteria", broken)
    assert _check(notifier) == 1
    assert notifier.state == IDLE


def test_trigger_while_checking_is_collapsed(db, notifier):
    create_event(db, EventCreate(title="Kariyer Günleri", event_date=datetime(2026, 10, 19, 14, 0)))
    notifier.state = CHECKING
    assert _check(notifier) == 0
    assert notifier.notifications == []


def test_no_student_no_scan(session_factory, clock):
    logged_out = CampusSession(session_factory)
    notifier = NotificationEngine(session_factory, logged_out, clock=clock)
    assert _check(notifier) == 0


def test_list_operations(notifier):
    first = notifier.add(NotificationIn(type="event", title="A", message="a"))
    second = notifier.add(NotificationIn(type="event", title="B", message="b"))
    assert notifier.add(NotificationIn(type="announcement", title="A", message="a")) is None

    assert [n.id for n in notifier.notifications] == [second.id, first.id]
    assert notifier.unread_count == 2

    assert notifier.mark_as_read(first.id)
    assert not notifier.mark_as_read("missing")
    assert notifier.unread_count == 1

    notifier.mark_all_as_read()
    assert notifier.unread_count == 0

    assert notifier.clear(first.id)
    assert [n.title for n in notifier.notifications] == ["B"]

    notifier.clear_all()
    assert notifier.notifications == []
    # dedup only looks at what is held
    assert notifier.add(NotificationIn(type="event", title="A", message="a")) is not None


def test_log_is_bounded(session_factory, session, clock):
    notifier = NotificationEngine(session_factory, session, clock=clock, max_entries=3)
    for i in range(5):
        notifier.add(NotificationIn(type="event", title=f"T{i}", message="m"))
    assert _titles(notifier) == ["T4", "T3", "T2"]


def test_polling_loop(db, notifier):
    create_event(db, EventCreate(title="Kariyer Günleri", event_date=datetime(2026, 10, 19, 14, 0)))

    async def run():
        notifier.start()
        notifier.start()
        for _ in range(100):
            if notifier.notifications:
                break
            await asyncio.sleep(0.01)
        # a few more ticks, still one entry
        await asyncio.sleep(0.05)
        notifier.stop()

    asyncio.run(run())
    assert len(notifier.notifications) == 1
    assert not notifier.running


def test_refresh_runs_a_scan(db, notifier):
    create_event(db, EventCreate(title="Kariyer Günleri", event_date=datetime(2026, 10, 19, 14, 0)))
    assert asyncio.run(notifier.refresh()) == 1
