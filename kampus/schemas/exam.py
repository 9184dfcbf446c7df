from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, model_validator

from kampus.schemas.common import ClockStr, NonEmptyStr, UpdateForm, check_time_range

ExamType = Literal["midterm", "final", "makeup"]


class ExamCreate(BaseModel):
    course_id: int
    exam_type: ExamType
    exam_date: date
    start_time: ClockStr
    end_time: ClockStr
    classroom: NonEmptyStr
    faculty: NonEmptyStr

    @model_validator(mode="after")
    def _validate_range(self):
        check_time_range(self.start_time, self.end_time)
        return self


class ExamUpdate(UpdateForm):
    exam_type: Optional[ExamType] = None
    exam_date: Optional[date] = None
    start_time: Optional[ClockStr] = None
    end_time: Optional[ClockStr] = None
    classroom: Optional[NonEmptyStr] = None
    faculty: Optional[NonEmptyStr] = None


class ExamOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    course_id: int
    exam_type: str
    exam_date: date
    start_time: str
    end_time: str
    classroom: str
    faculty: str

    course_code: Optional[str] = None
    course_name: Optional[str] = None
    department_name: Optional[str] = None
