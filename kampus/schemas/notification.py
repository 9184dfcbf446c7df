from datetime import datetime
from typing import Literal

from pydantic import BaseModel

NotificationType = Literal["event", "reminder", "cafeteria", "announcement"]


class NotificationIn(BaseModel):
    type: NotificationType
    title: str
    message: str


class NotificationOut(NotificationIn):
    id: str
    timestamp: datetime
    read: bool = False


class NotificationSettings(BaseModel):
    notifications_enabled: bool = True
    events: bool = True
    class_reminders: bool = True
    cafeteria_updates: bool = True
    announcements: bool = True
