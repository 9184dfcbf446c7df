from typing import Iterable, Optional

from kampus.utils.timeslots import overlaps, to_minutes


def find_conflict(existing_times: Iterable, new_times: Iterable) -> Optional[tuple]:
    """
    existing_times: schedule rows of courses already taken
    new_times: schedule rows of the course being added

    Returns the first (existing, new) pair that collides:
    1. same day literal
    2. minute ranges overlap
    """
    new_times = list(new_times)
    for e in existing_times:
        for n in new_times:
            if e.day != n.day:
                continue
            if overlaps(
                to_minutes(e.start_time), to_minutes(e.end_time),
                to_minutes(n.start_time), to_minutes(n.end_time),
            ):
                return e, n
    return None


def is_conflict(existing_times, new_times) -> bool:
    return find_conflict(existing_times, new_times) is not None
