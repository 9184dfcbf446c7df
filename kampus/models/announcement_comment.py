from sqlalchemy import Column, Integer, String, Text, ForeignKey

from kampus.database import Base
from kampus.utils.timeslots import now_iso


class AnnouncementComment(Base):
    __tablename__ = "announcement_comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    announcement_id = Column(Integer, ForeignKey("announcements.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    user_name = Column(String(100), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(String(19), nullable=False, default=now_iso)
