from sqlalchemy import Column, Integer, String, ForeignKey

from kampus.database import Base
from kampus.utils.timeslots import now_iso


class Exam(Base):
    __tablename__ = "exams"

    id = Column(Integer, primary_key=True, autoincrement=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)

    # midterm / final / makeup
    exam_type = Column(String(16), nullable=False)
    exam_date = Column(String(10), nullable=False)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    classroom = Column(String(50), nullable=False)
    faculty = Column(String(100), nullable=False)
    created_at = Column(String(19), default=now_iso)
