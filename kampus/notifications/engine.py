import asyncio
import itertools
import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.orm import sessionmaker

from kampus.config import settings
from kampus.database import get_db
from kampus.notifications import checks
from kampus.schemas.notification import NotificationIn, NotificationOut

logger = logging.getLogger("kampus.notifications")

IDLE = "idle"
CHECKING = "checking"


class NotificationEngine:
    """
    Polls the store for things worth telling the logged in student.

    Runs on the asyncio loop; every scan opens its own DB session inside
    ``asyncio.to_thread``. A trigger that arrives while a scan is running is
    dropped. Entries live in memory only, newest first, and the list is
    capped at ``max_entries``.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        campus_session,
        clock: Callable[[], datetime] = datetime.now,
        interval: Optional[float] = None,
        settle_delay: Optional[float] = None,
        max_entries: Optional[int] = None,
    ):
        self.session_factory = session_factory
        self.campus_session = campus_session
        self.clock = clock
        self.interval = settings.NOTIFICATION_INTERVAL_SECONDS if interval is None else interval
        self.settle_delay = settings.NOTIFICATION_SETTLE_SECONDS if settle_delay is None else settle_delay
        self.max_entries = settings.NOTIFICATION_MAX_ENTRIES if max_entries is None else max_entries

        self.state = IDLE
        self._items: list[NotificationOut] = []
        self._ids = itertools.count(1)
        self._task: Optional[asyncio.Task] = None

    # ==================== list ====================

    @property
    def notifications(self) -> list[NotificationOut]:
        return list(self._items)

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self._items if not n.read)

    def add(self, item: NotificationIn) -> Optional[NotificationOut]:
        """Prepend ``item`` unless an entry with the same title and message is already held."""
        if any(n.title == item.title and n.message == item.message for n in self._items):
            return None

        entry = NotificationOut(
            **item.model_dump(),
            id=f"notif-{next(self._ids)}",
            timestamp=self.clock(),
        )
        self._items.insert(0, entry)
        if len(self._items) > self.max_entries:
            del self._items[self.max_entries:]
        return entry

    def mark_as_read(self, notification_id: str) -> bool:
        for n in self._items:
            if n.id == notification_id:
                n.read = True
                return True
        return False

    def mark_all_as_read(self):
        for n in self._items:
            n.read = True

    def clear(self, notification_id: str) -> bool:
        before = len(self._items)
        self._items = [n for n in self._items if n.id != notification_id]
        return len(self._items) != before

    def clear_all(self):
        self._items = []

    # ==================== checks ====================

    def _scan(self, student_id: int, prefs, now: datetime) -> list[NotificationIn]:
        plan = [
            ("class reminders", prefs.class_reminders, lambda db: checks.class_reminders(db, student_id, now)),
            ("events", prefs.events, lambda db: checks.events(db, now)),
            ("cafeteria", prefs.cafeteria_updates, lambda db: checks.cafeteria(db, now)),
            ("announcements", prefs.announcements, lambda db: checks.announcements(db, now)),
        ]

        found = []
        with get_db(self.session_factory) as db:
            for name, enabled, run in plan:
                if not enabled:
                    continue
                # one broken category must not starve the others
                try:
                    found.extend(run(db))
                except Exception:
                    db.rollback()
                    logger.exception("Notification check failed: %s", name)
        return found

    async def check(self) -> int:
        """Run one scan. Returns how many new entries were added."""
        if self.state == CHECKING:
            logger.debug("Scan already running, trigger ignored")
            return 0

        student = self.campus_session.student
        prefs = self.campus_session.settings
        if student is None or not prefs.notifications_enabled:
            return 0

        self.state = CHECKING
        try:
            found = await asyncio.to_thread(self._scan, student.id, prefs, self.clock())
        finally:
            self.state = IDLE

        added = sum(1 for item in found if self.add(item) is not None)
        if added:
            logger.info("%d new notification(s) for student %s", added, student.id)
        return added

    async def refresh(self) -> int:
        return await self.check()

    # ==================== polling ====================

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self):
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self):
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self):
        await asyncio.sleep(self.settle_delay)
        while True:
            try:
                await self.check()
            except Exception:
                logger.exception("Notification tick failed")
            await asyncio.sleep(self.interval)
