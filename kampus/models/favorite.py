from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint

from kampus.database import Base
from kampus.utils.timeslots import now_iso


class Favorite(Base):
    __tablename__ = "favorites"
    __table_args__ = (
        UniqueConstraint("student_id", "location_id", name="uq_favorites_student_location"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    location_id = Column(Integer, ForeignKey("locations.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(String(19), nullable=False, default=now_iso)
