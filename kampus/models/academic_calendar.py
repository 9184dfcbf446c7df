from sqlalchemy import Column, Integer, String, Text

from kampus.database import Base
from kampus.utils.timeslots import now_iso


class AcademicCalendarEntry(Base):
    __tablename__ = "academic_calendar"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    description = Column(Text)
    event_date = Column(String(10), nullable=False, index=True)
    end_date = Column(String(10), nullable=True)

    # semester / exam / course_exam / holiday / deadline / registration
    event_type = Column(String(20), nullable=False)
    icon = Column(String(50))
    course_code = Column(String(20), nullable=True)
    created_at = Column(String(19), default=now_iso)
