from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from kampus.schemas.common import NonEmptyStr, UpdateForm

MenuCategory = Literal["main", "side", "dessert", "drink"]


class MenuItemCreate(BaseModel):
    name: NonEmptyStr
    description: Optional[str] = None
    price: float = Field(..., ge=0)
    category: MenuCategory
    available: bool = True
    menu_date: date


class MenuItemUpdate(UpdateForm):
    nullable = frozenset({"description"})

    name: Optional[NonEmptyStr] = None
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    category: Optional[MenuCategory] = None
    available: Optional[bool] = None
    menu_date: Optional[date] = None


class MenuItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    price: float
    category: str
    available: bool
    menu_date: date


class SnackCreate(BaseModel):
    name: NonEmptyStr
    description: Optional[str] = None
    price: float = Field(..., ge=0)
    category: Optional[str] = None
    available: bool = True


class SnackUpdate(UpdateForm):
    nullable = frozenset({"description", "category"})

    name: Optional[NonEmptyStr] = None
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    category: Optional[str] = None
    available: Optional[bool] = None


class SnackOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    price: float
    category: Optional[str] = None
    available: bool
