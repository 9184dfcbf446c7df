from datetime import datetime
from typing import Annotated, ClassVar, FrozenSet

from pydantic import AfterValidator, BaseModel, ConfigDict, StringConstraints, model_validator

from kampus.utils.timeslots import format_minutes, to_minutes


def _normalize_clock(v: str) -> str:
    # "9:00" -> "09:00"
    return format_minutes(to_minutes(v))


def _local_naive(v: datetime) -> datetime:
    # stored timestamps are local wall-clock time without an offset
    if v.tzinfo is not None:
        return v.astimezone().replace(tzinfo=None)
    return v


NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
ClockStr = Annotated[str, AfterValidator(_normalize_clock)]
LocalDateTime = Annotated[datetime, AfterValidator(_local_naive)]


def check_time_range(start_time: str, end_time: str):
    if to_minutes(end_time) <= to_minutes(start_time):
        raise ValueError(f"end_time {end_time} must be after start_time {start_time}")


class UpdateForm(BaseModel):
    """
    Partial update. Only fields listed in `nullable` may be cleared with an
    explicit None; everything else maps to a NOT NULL column.
    """

    model_config = ConfigDict(extra="forbid")

    nullable: ClassVar[FrozenSet[str]] = frozenset()

    @model_validator(mode="after")
    def _reject_null_required(self):
        cleared = sorted(
            name
            for name in self.model_fields_set
            if getattr(self, name) is None and name not in self.nullable
        )
        if cleared:
            raise ValueError(f"{', '.join(cleared)} cannot be empty")
        return self
