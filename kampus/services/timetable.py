from collections import defaultdict

from sqlalchemy.orm import Session

from kampus.schemas.timetable import WeeklySchedule
from kampus.services.courses import get_enrolled_schedules
from kampus.utils.timeslots import WORK_DAYS


def get_student_weekly_schedule(db: Session, student_id: int) -> WeeklySchedule:
    """
    Enrolled course sessions grouped by day.

    Pazartesi..Cuma are always present (possibly empty); weekend keys only
    show up when a course actually meets then. Each day is ordered by start.
    """
    by_day = defaultdict(list)
    # already sorted by (day, start)
    for s in get_enrolled_schedules(db, student_id):
        by_day[s.day].append(s)

    week: WeeklySchedule = {d.value: by_day.pop(d.value, []) for d in WORK_DAYS}
    week.update(by_day)
    return week
