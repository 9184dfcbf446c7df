from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from kampus.schemas.common import ClockStr, NonEmptyStr


class BusScheduleCreate(BaseModel):
    line: NonEmptyStr
    route: NonEmptyStr
    time: ClockStr
    note: Optional[str] = None
    color: str = Field("#FF6B6B", pattern=r"^#[0-9A-Fa-f]{6}$")


class BusScheduleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    line: str
    route: str
    time: str
    note: Optional[str] = None
    color: str
