from sqlalchemy import Column, Integer, String, Text

from kampus.database import Base
from kampus.utils.timeslots import now_iso


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    description = Column(Text)
    location = Column(String(200))
    event_date = Column(String(19), nullable=False, index=True)
    organizer = Column(String(100))
    created_at = Column(String(19), default=now_iso)
