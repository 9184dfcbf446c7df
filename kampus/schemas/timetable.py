from typing import Dict, List

from kampus.schemas.course import CourseScheduleOut

# "Pazartesi" .. "Cuma" -> rows ordered by start time
WeeklySchedule = Dict[str, List[CourseScheduleOut]]
