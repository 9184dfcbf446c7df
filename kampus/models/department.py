from sqlalchemy import Column, Integer, String

from kampus.database import Base
from kampus.utils.timeslots import now_iso


class Department(Base):
    __tablename__ = "departments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(20), unique=True, nullable=False)
    name = Column(String(100), nullable=False)
    faculty = Column(String(100), nullable=False)
    created_at = Column(String(19), default=now_iso)
