from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from kampus.schemas.common import NonEmptyStr

LocationType = Literal["building", "cafeteria", "library", "parking", "sports", "other"]


class LocationCreate(BaseModel):
    name: NonEmptyStr
    type: LocationType
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    description: Optional[str] = None


class LocationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    type: str
    latitude: float
    longitude: float
    description: Optional[str] = None
