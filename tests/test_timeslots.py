from datetime import date, datetime
from types import SimpleNamespace

import pytest

from kampus.utils.conflict import find_conflict, is_conflict
from kampus.utils.timeslots import (
    WORK_DAYS,
    Weekday,
    add_hours,
    format_minutes,
    minutes_of,
    overlaps,
    parse_iso_date,
    to_minutes,
)


def _slot(day, start, end, code="X"):
    return SimpleNamespace(day=day, start_time=start, end_time=end, course_code=code)


def test_to_minutes_and_back():
    assert to_minutes("09:30") == 570
    assert to_minutes("9:05") == 545
    assert format_minutes(570) == "09:30"
    assert add_hours("16:00", 2) == "18:00"
    assert add_hours("23:00", 2) == "01:00"


@pytest.mark.parametrize("bad", ["", "24:00", "12:60", "noon", "12-30"])
def test_to_minutes_rejects_garbage(bad):
    with pytest.raises(ValueError):
        to_minutes(bad)


def test_touching_ranges_do_not_overlap():
    assert not overlaps(540, 660, 660, 780)
    assert overlaps(540, 660, 600, 720)
    assert overlaps(600, 720, 540, 660)
    assert overlaps(540, 780, 600, 620)


def test_weekday_of_date():
    # 2026-10-19 is a Monday
    assert Weekday.of(date(2026, 10, 19)) is Weekday.PAZARTESI
    assert Weekday.of(date(2026, 10, 25)) is Weekday.PAZAR
    assert Weekday("Çarşamba").position == 2
    assert [d.value for d in WORK_DAYS] == ["Pazartesi", "Salı", "Çarşamba", "Perşembe", "Cuma"]


def test_minutes_of_and_iso_dates():
    assert minutes_of(datetime(2026, 10, 19, 8, 45)) == 525
    assert parse_iso_date("2026-10-19T14:00:00") == date(2026, 10, 19)


def test_find_conflict_needs_same_day():
    a = [_slot("Pazartesi", "09:00", "11:00", "BM101")]
    assert find_conflict(a, [_slot("Salı", "09:00", "11:00")]) is None
    assert not is_conflict(a, [_slot("Pazartesi", "11:00", "13:00")])

    hit = find_conflict(a, [_slot("Pazartesi", "10:00", "12:00", "BM102")])
    assert hit is not None
    existing, new = hit
    assert existing.course_code == "BM101"
    assert new.course_code == "BM102"
