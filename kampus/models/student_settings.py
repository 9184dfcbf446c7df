from sqlalchemy import Boolean, Column, ForeignKey, Integer, String

from kampus.database import Base
from kampus.utils.timeslots import now_iso


class StudentSettings(Base):
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, unique=True)

    notifications_enabled = Column(Boolean, nullable=False, default=True)
    events = Column(Boolean, nullable=False, default=True)
    class_reminders = Column(Boolean, nullable=False, default=True)
    cafeteria_updates = Column(Boolean, nullable=False, default=True)
    announcements = Column(Boolean, nullable=False, default=True)

    dark_mode = Column(Boolean, nullable=False, default=True)
    language = Column(String(2), nullable=False, default="tr")

    created_at = Column(String(19), default=now_iso)
    updated_at = Column(String(19), default=now_iso, onupdate=now_iso)
