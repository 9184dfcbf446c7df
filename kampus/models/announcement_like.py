from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint

from kampus.database import Base
from kampus.utils.timeslots import now_iso


class AnnouncementLike(Base):
    __tablename__ = "announcement_likes"
    __table_args__ = (
        UniqueConstraint("announcement_id", "student_id", name="uq_announcement_likes_pair"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    announcement_id = Column(Integer, ForeignKey("announcements.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(String(19), nullable=False, default=now_iso)
