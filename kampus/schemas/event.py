from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from kampus.schemas.common import LocalDateTime, NonEmptyStr, UpdateForm


class EventCreate(BaseModel):
    title: NonEmptyStr
    description: Optional[str] = None
    location: Optional[str] = None
    event_date: LocalDateTime
    organizer: Optional[str] = None


class EventUpdate(UpdateForm):
    nullable = frozenset({"description", "location", "organizer"})

    title: Optional[NonEmptyStr] = None
    description: Optional[str] = None
    location: Optional[str] = None
    event_date: Optional[LocalDateTime] = None
    organizer: Optional[str] = None


class EventOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    event_date: datetime
    organizer: Optional[str] = None
