from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from kampus.schemas.common import ClockStr, NonEmptyStr, UpdateForm, check_time_range
from kampus.utils.timeslots import Weekday


class CourseBase(BaseModel):
    code: NonEmptyStr
    name: NonEmptyStr
    department_id: int
    class_year: int = Field(..., ge=1, le=4)
    semester: int = Field(..., ge=1, le=2)
    credits: int = Field(3, ge=0)
    ects: int = Field(5, ge=0)
    is_mandatory: bool = True
    instructor: Optional[str] = None
    description: Optional[str] = None
    quota: Optional[int] = Field(50, ge=0)


class CourseCreate(CourseBase):
    pass


class CourseUpdate(UpdateForm):
    nullable = frozenset({"instructor", "description", "quota"})

    code: Optional[NonEmptyStr] = None
    name: Optional[NonEmptyStr] = None
    class_year: Optional[int] = Field(None, ge=1, le=4)
    semester: Optional[int] = Field(None, ge=1, le=2)
    credits: Optional[int] = Field(None, ge=0)
    ects: Optional[int] = Field(None, ge=0)
    is_mandatory: Optional[bool] = None
    instructor: Optional[str] = None
    description: Optional[str] = None
    quota: Optional[int] = Field(None, ge=0)


class CourseOut(CourseBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    department_name: Optional[str] = None
    department_code: Optional[str] = None
    enrolled_count: int = 0


class CourseScheduleIn(BaseModel):
    course_id: int
    day: Weekday
    start_time: ClockStr
    end_time: ClockStr
    classroom: NonEmptyStr
    faculty: NonEmptyStr

    @model_validator(mode="after")
    def _validate_range(self):
        check_time_range(self.start_time, self.end_time)
        return self


class CourseScheduleUpdate(UpdateForm):
    day: Optional[Weekday] = None
    start_time: Optional[ClockStr] = None
    end_time: Optional[ClockStr] = None
    classroom: Optional[NonEmptyStr] = None
    faculty: Optional[NonEmptyStr] = None


class CourseScheduleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    course_id: int
    day: str
    start_time: str
    end_time: str
    classroom: str
    faculty: str

    course_code: Optional[str] = None
    course_name: Optional[str] = None
    instructor: Optional[str] = None
    department_name: Optional[str] = None


class PrerequisiteOut(BaseModel):
    course_id: int
    prerequisite_course_id: int
    prerequisite_code: str
    prerequisite_name: str


