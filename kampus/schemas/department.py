from typing import Optional

from pydantic import BaseModel, ConfigDict

from kampus.schemas.common import NonEmptyStr, UpdateForm


class DepartmentCreate(BaseModel):
    code: NonEmptyStr
    name: NonEmptyStr
    faculty: NonEmptyStr


class DepartmentUpdate(UpdateForm):
    code: Optional[NonEmptyStr] = None
    name: Optional[NonEmptyStr] = None
    faculty: Optional[NonEmptyStr] = None


class DepartmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    name: str
    faculty: str
