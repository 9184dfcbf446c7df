from sqlalchemy import Column, Integer, String, Text, Float, Boolean

from kampus.database import Base
from kampus.utils.timeslots import now_iso


class CafeteriaMenuItem(Base):
    __tablename__ = "cafeteria_menu"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(Text)
    price = Column(Float, nullable=False)

    # main / side / dessert / drink
    category = Column(String(10), nullable=False)
    available = Column(Boolean, nullable=False, default=True)
    menu_date = Column(String(10), nullable=False, index=True)
    created_at = Column(String(19), default=now_iso)


class CafeteriaSnack(Base):
    __tablename__ = "cafeteria_snacks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(Text)
    price = Column(Float, nullable=False)
    category = Column(String(30), nullable=True)
    available = Column(Boolean, nullable=False, default=True)
    created_at = Column(String(19), default=now_iso)
