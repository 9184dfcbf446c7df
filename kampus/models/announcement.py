from sqlalchemy import Column, Integer, String, Text

from kampus.database import Base
from kampus.utils.timeslots import now_iso


class Announcement(Base):
    __tablename__ = "announcements"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner = Column(String(100), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    created_at = Column(String(19), nullable=False, default=now_iso, index=True)
