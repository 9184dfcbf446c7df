from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

from kampus.schemas.common import UpdateForm

Language = Literal["tr", "en"]


class StudentSettingsUpdate(UpdateForm):
    notifications_enabled: Optional[bool] = None
    events: Optional[bool] = None
    class_reminders: Optional[bool] = None
    cafeteria_updates: Optional[bool] = None
    announcements: Optional[bool] = None
    dark_mode: Optional[bool] = None
    language: Optional[Language] = None


class StudentSettingsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    student_id: int
    notifications_enabled: bool = True
    events: bool = True
    class_reminders: bool = True
    cafeteria_updates: bool = True
    announcements: bool = True
    dark_mode: bool = True
    language: Language = "tr"
