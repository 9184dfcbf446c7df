from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from kampus.database import Base
from kampus.utils.timeslots import now_iso


class Course(Base):
    __tablename__ = "courses"
    __table_args__ = (
        UniqueConstraint("code", "department_id", name="uq_courses_code_department"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(20), nullable=False)
    name = Column(String(255), nullable=False)

    department_id = Column(Integer, ForeignKey("departments.id", ondelete="CASCADE"), nullable=False)

    class_year = Column(Integer, nullable=False)
    semester = Column(Integer, nullable=False)
    credits = Column(Integer, nullable=False, default=3)
    ects = Column(Integer, nullable=False, default=5)
    is_mandatory = Column(Boolean, nullable=False, default=True)
    instructor = Column(String(100))
    description = Column(Text)
    quota = Column(Integer, default=50)

    created_at = Column(String(19), default=now_iso)

    # relationship
    schedules = relationship(
        "CourseSchedule", back_populates="course", cascade="all, delete-orphan", passive_deletes=True
    )


class CoursePrerequisite(Base):
    __tablename__ = "course_prerequisites"
    __table_args__ = (
        UniqueConstraint("course_id", "prerequisite_course_id", name="uq_course_prerequisites_pair"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    prerequisite_course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
