from sqlalchemy import Column, Integer, String, Text

from kampus.database import Base
from kampus.utils.timeslots import now_iso


class BusSchedule(Base):
    __tablename__ = "bus_schedules"

    id = Column(Integer, primary_key=True, autoincrement=True)
    line = Column(String(50), nullable=False, index=True)
    route = Column(String(200), nullable=False)
    time = Column(String(5), nullable=False)  # HH:MM
    note = Column(Text)
    color = Column(String(7), nullable=False, default="#FF6B6B")
    created_at = Column(String(19), default=now_iso)
