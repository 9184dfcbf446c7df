from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, model_validator

from kampus.schemas.common import NonEmptyStr, UpdateForm

CalendarEventType = Literal[
    "semester",
    "exam",
    "course_exam",
    "holiday",
    "deadline",
    "registration",
]


class AcademicCalendarCreate(BaseModel):
    title: NonEmptyStr
    description: Optional[str] = None
    event_date: date
    end_date: Optional[date] = None
    event_type: CalendarEventType
    icon: Optional[str] = None
    course_code: Optional[str] = None

    @model_validator(mode="after")
    def _validate_dates(self):
        if self.end_date is not None and self.end_date < self.event_date:
            raise ValueError("end_date cannot be before event_date")
        return self


class AcademicCalendarUpdate(UpdateForm):
    nullable = frozenset({"description", "end_date", "icon", "course_code"})

    title: Optional[NonEmptyStr] = None
    description: Optional[str] = None
    event_date: Optional[date] = None
    end_date: Optional[date] = None
    event_type: Optional[CalendarEventType] = None
    icon: Optional[str] = None
    course_code: Optional[str] = None


class AcademicCalendarOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    event_date: date
    end_date: Optional[date] = None
    event_type: str
    icon: Optional[str] = None
    course_code: Optional[str] = None
