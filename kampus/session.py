import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.orm import sessionmaker

from kampus.config import settings
from kampus.database import get_db
from kampus.errors import AuthenticationError, DuplicateKeyError, InvalidInputError, NotFoundError
from kampus.notifications.engine import NotificationEngine
from kampus.schemas.notification import NotificationSettings
from kampus.schemas.student import StudentCreate, StudentOut, StudentUpdate
from kampus.schemas.student_settings import StudentSettingsUpdate
from kampus.services.students import (
    create_student,
    get_student_by_id,
    get_student_by_number,
    get_student_password,
    update_student,
)
from kampus.services.student_settings import create_or_update_settings, get_settings

logger = logging.getLogger("kampus.session")


class CampusSession:
    """
    Who is logged in, as what, and with which notification settings.

    One instance per app run; login/logout reset it instead of relying on
    module level state. The notification engine is owned here so that
    logging out always tears it down.
    """

    def __init__(self, session_factory: sessionmaker, admin_password: Optional[str] = None):
        self.session_factory = session_factory
        self.admin_password = admin_password if admin_password is not None else settings.ADMIN_PASSWORD

        self.student: Optional[StudentOut] = None
        self.is_admin = False
        self.settings = NotificationSettings()
        self.notifications: Optional[NotificationEngine] = None

    @property
    def is_logged_in(self) -> bool:
        return self.is_admin or self.student is not None

    # ==================== auth ====================

    def login(self, student_number: str, password: str) -> StudentOut:
        with get_db(self.session_factory) as db:
            found = get_student_password(db, student_number)
            if not found:
                logger.info("Login failed, unknown student number %s", student_number)
                raise AuthenticationError("Öğrenci bulunamadı. Lütfen kayıt olun.")

            student_id, stored = found
            # accounts created without a password accept any password
            if stored and stored != password:
                logger.info("Login failed, wrong password for %s", student_number)
                raise AuthenticationError("Şifre hatalı")

            student = get_student_by_id(db, student_id)
            stored_settings = get_settings(db, student_id)

        self._reset()
        self.student = student
        if stored_settings is not None:
            self.settings = NotificationSettings.model_validate(
                stored_settings.model_dump(include=set(NotificationSettings.model_fields))
            )
        logger.info("Student logged in: %s", student_number)
        return student

    def login_as_admin(self, password: str) -> bool:
        if password != self.admin_password:
            logger.warning("Admin login rejected")
            return False
        self._reset()
        self.is_admin = True
        logger.info("Admin logged in")
        return True

    def register(self, body: StudentCreate) -> StudentOut:
        with get_db(self.session_factory) as db:
            if get_student_by_number(db, body.student_number):
                raise DuplicateKeyError("Bu öğrenci numarası zaten kayıtlı")
            student = create_student(db, body.model_copy(update={"gno": 0.0, "yno": 0.0}))

        self._reset()
        self.student = student
        logger.info("Student registered: %s", student.student_number)
        return student

    def logout(self):
        who = self.student.student_number if self.student else ("admin" if self.is_admin else None)
        self._reset()
        if who:
            logger.info("Logged out: %s", who)

    def _reset(self):
        if self.notifications is not None:
            self.notifications.stop()
            self.notifications.clear_all()
            self.notifications = None
        self.student = None
        self.is_admin = False
        self.settings = NotificationSettings()

    # ==================== profile / settings ====================

    def update_settings(self, **changes) -> NotificationSettings:
        unknown = set(changes) - set(NotificationSettings.model_fields)
        if unknown:
            raise InvalidInputError(f"unknown notification settings: {', '.join(sorted(unknown))}")
        prefs = NotificationSettings.model_validate({**self.settings.model_dump(), **changes})
        if self.student is not None:
            with get_db(self.session_factory) as db:
                create_or_update_settings(db, self.student.id, StudentSettingsUpdate(**prefs.model_dump()))
        self.settings = prefs
        return self.settings

    def update_profile(self, body: StudentUpdate) -> StudentOut:
        if self.student is None:
            raise AuthenticationError("not logged in as a student")
        with get_db(self.session_factory) as db:
            self.student = update_student(db, self.student.id, body)
        return self.student

    def refresh_student(self) -> Optional[StudentOut]:
        if self.student is None:
            return None
        with get_db(self.session_factory) as db:
            student = get_student_by_id(db, self.student.id)
        if student is None:
            raise NotFoundError(f"Student {self.student.id} not found")
        self.student = student
        return student

    # ==================== notifications ====================

    def start_notifications(self, clock: Optional[Callable[[], datetime]] = None) -> NotificationEngine:
        """Create the polling engine for the logged in student and start it (needs a running loop)."""
        if self.student is None:
            raise AuthenticationError("notifications need a logged in student")
        if self.notifications is None:
            kwargs = {"clock": clock} if clock is not None else {}
            self.notifications = NotificationEngine(self.session_factory, self, **kwargs)
        self.notifications.start()
        return self.notifications
