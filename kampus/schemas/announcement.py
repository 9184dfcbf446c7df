from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from kampus.schemas.common import LocalDateTime, NonEmptyStr, UpdateForm


class AnnouncementCreate(BaseModel):
    owner: NonEmptyStr
    title: NonEmptyStr
    description: NonEmptyStr
    created_at: Optional[LocalDateTime] = None


class AnnouncementUpdate(UpdateForm):
    owner: Optional[NonEmptyStr] = None
    title: Optional[NonEmptyStr] = None
    description: Optional[NonEmptyStr] = None


class AnnouncementOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner: str
    title: str
    description: str
    created_at: datetime

    likes_count: int = 0
    comments_count: int = 0
    is_liked: bool = False


class AnnouncementCommentCreate(BaseModel):
    announcement_id: int
    student_id: int
    user_name: NonEmptyStr
    content: NonEmptyStr


class AnnouncementCommentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    announcement_id: int
    student_id: int
    user_name: str
    content: str
    created_at: datetime


class LikeToggleOut(BaseModel):
    announcement_id: int
    liked: bool
    likes_count: int
