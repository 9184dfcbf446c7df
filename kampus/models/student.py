from sqlalchemy import Column, Integer, String, Float, Boolean, ForeignKey

from kampus.database import Base
from kampus.utils.timeslots import now_iso


class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_number = Column(String(32), unique=True, nullable=False, index=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(100), unique=True, nullable=True)

    # plaintext, compared by equality at login
    password = Column(String(100), nullable=True)

    department_id = Column(Integer, ForeignKey("departments.id", ondelete="CASCADE"), nullable=False)
    class_year = Column(Integer, nullable=False, default=1)
    gno = Column(Float, default=0.0)
    yno = Column(Float, default=0.0)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(String(19), default=now_iso)
    updated_at = Column(String(19), default=now_iso, onupdate=now_iso)
