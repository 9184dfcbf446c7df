from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship

from kampus.database import Base
from kampus.utils.timeslots import now_iso


class CourseSchedule(Base):
    __tablename__ = "course_schedules"

    id = Column(Integer, primary_key=True, autoincrement=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)

    # Turkish day literal ("Pazartesi") and HH:MM strings
    day = Column(String(16), nullable=False)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    classroom = Column(String(50), nullable=False)
    faculty = Column(String(100), nullable=False)
    created_at = Column(String(19), default=now_iso)

    course = relationship("Course", back_populates="schedules")
