from sqlalchemy import Column, Float, Integer, String, Text

from kampus.database import Base
from kampus.utils.timeslots import now_iso


class Location(Base):
    __tablename__ = "locations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    # building / cafeteria / library / parking / sports / other
    type = Column(String(20), nullable=False, index=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    description = Column(Text)
    created_at = Column(String(19), default=now_iso)
