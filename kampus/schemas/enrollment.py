from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from kampus.schemas.common import NonEmptyStr, UpdateForm
from kampus.schemas.course import CourseOut, CourseScheduleOut
from kampus.schemas.exam import ExamOut

EnrollmentStatus = Literal["enrolled", "passed", "failed", "dropped"]

ReasonCode = Literal[
    "student_not_found",
    "course_not_found",
    "department_mismatch",
    "class_year",
    "already_enrolled",
    "already_passed",
    "quota_full",
    "schedule_conflict",
    "prerequisite_missing",
]


class EnrollmentCreate(BaseModel):
    student_id: int
    course_id: int
    semester: NonEmptyStr
    academic_year: NonEmptyStr
    status: EnrollmentStatus = "enrolled"


class BulkEnrollIn(BaseModel):
    student_id: int
    course_ids: List[int]
    semester: NonEmptyStr
    academic_year: NonEmptyStr


class RejectedCourse(BaseModel):
    course_id: int
    reason_code: Optional[str] = None
    eligibility_reason: Optional[str] = None


class BulkEnrollOut(BaseModel):
    inserted: List[int] = []
    skipped_existing: List[int] = []
    rejected: List[RejectedCourse] = []


class StudentCourseUpdate(UpdateForm):
    nullable = frozenset(
        {"midterm_grade", "final_grade", "makeup_grade", "letter_grade", "grade_point"}
    )

    midterm_grade: Optional[float] = Field(None, ge=0, le=100)
    final_grade: Optional[float] = Field(None, ge=0, le=100)
    makeup_grade: Optional[float] = Field(None, ge=0, le=100)
    letter_grade: Optional[str] = None
    grade_point: Optional[float] = Field(None, ge=0, le=4)
    status: Optional[EnrollmentStatus] = None


class StudentCourseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    student_id: int
    course_id: int
    semester: str
    academic_year: str
    status: str

    midterm_grade: Optional[float] = None
    final_grade: Optional[float] = None
    makeup_grade: Optional[float] = None
    letter_grade: Optional[str] = None
    grade_point: Optional[float] = None

    # joined from courses
    code: str
    name: str
    credits: int
    ects: int
    instructor: Optional[str] = None
    class_year: int
    is_mandatory: bool


class EligibilityOut(BaseModel):
    is_eligible: bool
    eligibility_reason: Optional[str] = None
    reason_code: Optional[ReasonCode] = None


class CourseWithEligibility(CourseOut):
    is_eligible: bool
    eligibility_reason: Optional[str] = None
    reason_code: Optional[ReasonCode] = None
    is_enrolled: bool = False
    schedules: List[CourseScheduleOut] = []
    exams: List[ExamOut] = []


class GpaOut(BaseModel):
    gno: float
    yno: float
