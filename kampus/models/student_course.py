from sqlalchemy import Column, Integer, String, Float, ForeignKey, UniqueConstraint

from kampus.database import Base
from kampus.utils.timeslots import now_iso


class StudentCourse(Base):
    __tablename__ = "student_courses"
    __table_args__ = (
        UniqueConstraint(
            "student_id",
            "course_id",
            "semester",
            "academic_year",
            name="uq_student_courses_student_course_term",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)

    semester = Column(String(10), nullable=False)  # fall / spring
    academic_year = Column(String(9), nullable=False)  # 2026-2027

    midterm_grade = Column(Float)
    final_grade = Column(Float)
    makeup_grade = Column(Float)
    letter_grade = Column(String(2))
    grade_point = Column(Float)

    # enrolled / passed / failed / dropped
    status = Column(String(20), nullable=False, default="enrolled")

    created_at = Column(String(19), default=now_iso)
    updated_at = Column(String(19), default=now_iso, onupdate=now_iso)
