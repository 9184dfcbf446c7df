from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from kampus.schemas.common import NonEmptyStr, UpdateForm


class StudentCreate(BaseModel):
    student_number: NonEmptyStr
    first_name: NonEmptyStr
    last_name: NonEmptyStr
    email: Optional[str] = None
    password: Optional[str] = None
    department_id: int
    class_year: int = Field(1, ge=1, le=4)
    gno: float = Field(0.0, ge=0, le=4)
    yno: float = Field(0.0, ge=0, le=4)


class StudentUpdate(UpdateForm):
    nullable = frozenset({"email", "password"})

    first_name: Optional[NonEmptyStr] = None
    last_name: Optional[NonEmptyStr] = None
    email: Optional[str] = None
    password: Optional[str] = None
    department_id: Optional[int] = None
    class_year: Optional[int] = Field(None, ge=1, le=4)
    gno: Optional[float] = Field(None, ge=0, le=4)
    yno: Optional[float] = Field(None, ge=0, le=4)
    is_active: Optional[bool] = None


class StudentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    student_number: str
    first_name: str
    last_name: str
    email: Optional[str] = None
    department_id: int
    class_year: int
    gno: float = 0.0
    yno: float = 0.0
    is_active: bool = True

    # joined from departments
    department_name: Optional[str] = None
    department_code: Optional[str] = None
    faculty: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
