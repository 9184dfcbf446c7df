from datetime import date

import pytest

from kampus.errors import DuplicateKeyError, NotFoundError
from kampus.models.student_course import StudentCourse
from kampus.schemas.enrollment import BulkEnrollIn, EnrollmentCreate, StudentCourseUpdate
from kampus.services.courses import add_course_prerequisite
from kampus.services.enrollment import (
    calculate_gpa,
    check_course_eligibility,
    drop_course,
    enroll_course,
    enroll_courses,
    enroll_if_eligible,
    get_available_courses_for_student,
    get_enrolled_courses,
    get_student_courses,
    unenroll_course,
    update_student_course,
)
from kampus.services.students import get_student_by_id

YEAR = "2026-2027"


def _available(db, student):
    return {c.code: c for c in get_available_courses_for_student(db, student.id)}


def test_enroll_then_list_scenario(db, campus):
    bm = campus.department()
    campus.course(bm, "BM101", quota=2, slots=[("Pazartesi", "09:00", "11:00")])
    s1 = campus.student(bm, class_year=1)

    before = _available(db, s1)["BM101"]
    assert before.is_eligible
    assert not before.is_enrolled

    campus.enroll(s1, before)

    enrolled = get_enrolled_courses(db, s1.id)
    assert [e.code for e in enrolled] == ["BM101"]

    after = _available(db, s1)["BM101"]
    assert after.is_enrolled
    assert not after.is_eligible
    assert after.eligibility_reason == "already enrolled"
    assert after.enrolled_count == 1
    assert [s.day for s in after.schedules] == ["Pazartesi"]


def test_second_identical_enrollment_is_rejected(db, campus):
    bm = campus.department()
    c = campus.course(bm, "BM101")
    s = campus.student(bm)

    campus.enroll(s, c)
    with pytest.raises(DuplicateKeyError):
        campus.enroll(s, c)

    rows = db.query(StudentCourse).filter(StudentCourse.student_id == s.id).all()
    assert len(rows) == 1


def test_dropped_enrollment_can_be_reactivated(db, campus):
    bm = campus.department()
    c = campus.course(bm, "BM101")
    s = campus.student(bm)

    campus.enroll(s, c)
    drop_course(db, s.id, c.id)
    assert get_enrolled_courses(db, s.id) == []
    assert get_student_courses(db, s.id)[0].status == "dropped"

    again = campus.enroll(s, c)
    assert again.status == "enrolled"
    assert db.query(StudentCourse).filter(StudentCourse.student_id == s.id).count() == 1


def test_enroll_unknown_student_or_course(db, campus):
    bm = campus.department()
    c = campus.course(bm, "BM101")
    s = campus.student(bm)

    with pytest.raises(NotFoundError):
        enroll_course(db, EnrollmentCreate(student_id=s.id, course_id=9999, semester="fall", academic_year=YEAR))
    with pytest.raises(NotFoundError):
        enroll_course(db, EnrollmentCreate(student_id=9999, course_id=c.id, semester="fall", academic_year=YEAR))

    # eligibility never raises
    r = enroll_if_eligible(db, EnrollmentCreate(student_id=s.id, course_id=9999, semester="fall", academic_year=YEAR))
    assert r.reason_code == "course_not_found"


def test_quota_blocks_second_student(db, campus):
    bm = campus.department()
    c = campus.course(bm, "BM101", quota=1)
    first = campus.student(bm)
    second = campus.student(bm)

    assert _available(db, second)["BM101"].is_eligible
    campus.enroll(first, c)

    blocked = _available(db, second)["BM101"]
    assert not blocked.is_eligible
    assert blocked.eligibility_reason == "quota full"
    assert check_course_eligibility(db, second.id, c.id).reason_code == "quota_full"


def test_schedule_conflict_and_touching_boundary(db, campus):
    bm = campus.department()
    a = campus.course(bm, "BM101", slots=[("Pazartesi", "09:00", "11:00")])
    campus.course(bm, "BM103", slots=[("Pazartesi", "10:00", "12:00")])
    campus.course(bm, "BM105", slots=[("Pazartesi", "11:00", "13:00")])
    campus.course(bm, "BM107", slots=[("Salı", "09:00", "11:00")])
    s = campus.student(bm)

    campus.enroll(s, a)
    avail = _available(db, s)

    assert not avail["BM103"].is_eligible
    assert avail["BM103"].eligibility_reason.startswith("schedule conflict")
    assert "BM101" in avail["BM103"].eligibility_reason
    assert avail["BM105"].is_eligible
    assert avail["BM107"].is_eligible


def test_unenroll_makes_course_available_again(db, campus):
    bm = campus.department()
    a = campus.course(bm, "BM101", slots=[("Pazartesi", "09:00", "11:00")])
    s = campus.student(bm)

    campus.enroll(s, a)
    unenroll_course(db, s.id, a.id)

    assert "BM101" not in [e.code for e in get_enrolled_courses(db, s.id)]
    assert _available(db, s)["BM101"].is_eligible

    with pytest.raises(NotFoundError):
        unenroll_course(db, s.id, a.id)


def test_available_courses_respect_department_and_year(db, campus):
    bm = campus.department()
    eem = campus.department(code="EEM", name="Elektrik-Elektronik Mühendisliği")
    campus.course(bm, "BM101", class_year=1)
    campus.course(bm, "BM201", class_year=2)
    campus.course(eem, "EEM101", class_year=1)
    s = campus.student(bm, class_year=1)

    assert list(_available(db, s)) == ["BM101"]
    assert get_available_courses_for_student(db, 9999) == []

    eem_course = campus.course(eem, "EEM103", class_year=1)
    assert check_course_eligibility(db, s.id, eem_course.id).reason_code == "department_mismatch"


def test_prerequisite_must_be_passed(db, campus):
    bm = campus.department()
    intro = campus.course(bm, "BM101", class_year=1)
    oop = campus.course(bm, "BM102", class_year=1)
    add_course_prerequisite(db, oop.id, intro.id)
    s = campus.student(bm)

    r = check_course_eligibility(db, s.id, oop.id)
    assert r.reason_code == "prerequisite_missing"
    assert "BM101" in r.eligibility_reason

    campus.enroll(s, intro, status="passed", academic_year="2025-2026")
    assert check_course_eligibility(db, s.id, oop.id).is_eligible
    assert check_course_eligibility(db, s.id, intro.id).eligibility_reason == "already passed"


def test_enroll_if_eligible_does_not_write_on_rejection(db, campus):
    bm = campus.department()
    c = campus.course(bm, "BM101", quota=0)
    s = campus.student(bm)

    result = enroll_if_eligible(
        db, EnrollmentCreate(student_id=s.id, course_id=c.id, semester="fall", academic_year=YEAR)
    )
    assert not result.is_eligible
    assert get_enrolled_courses(db, s.id) == []


def test_bulk_enrollment_is_all_or_nothing(db, campus):
    bm = campus.department()
    a = campus.course(bm, "BM101", slots=[("Pazartesi", "09:00", "11:00")])
    b = campus.course(bm, "BM103", slots=[("Salı", "09:00", "11:00")])
    full = campus.course(bm, "BM105", quota=0, slots=[("Çarşamba", "09:00", "11:00")])
    s = campus.student(bm)

    result = enroll_courses(
        db, BulkEnrollIn(student_id=s.id, course_ids=[a.id, b.id, full.id], semester="fall", academic_year=YEAR)
    )
    assert result.inserted == []
    assert [r.course_id for r in result.rejected] == [full.id]
    assert result.rejected[0].reason_code == "quota_full"
    assert get_enrolled_courses(db, s.id) == []

    result = enroll_courses(
        db, BulkEnrollIn(student_id=s.id, course_ids=[a.id, b.id], semester="fall", academic_year=YEAR)
    )
    assert sorted(result.inserted) == sorted([a.id, b.id])
    assert result.rejected == []
    assert [e.code for e in get_enrolled_courses(db, s.id)] == ["BM101", "BM103"]


def test_bulk_enrollment_checks_courses_against_each_other(db, campus):
    bm = campus.department()
    a = campus.course(bm, "BM101", slots=[("Pazartesi", "09:00", "11:00")])
    b = campus.course(bm, "BM103", slots=[("Pazartesi", "10:00", "12:00")])
    s = campus.student(bm)

    result = enroll_courses(
        db, BulkEnrollIn(student_id=s.id, course_ids=[a.id, b.id], semester="fall", academic_year=YEAR)
    )
    assert result.inserted == []
    assert result.rejected[0].course_id == b.id
    assert result.rejected[0].reason_code == "schedule_conflict"


def test_bulk_enrollment_skips_existing(db, campus):
    bm = campus.department()
    a = campus.course(bm, "BM101")
    b = campus.course(bm, "BM103")
    s = campus.student(bm)
    campus.enroll(s, a)

    result = enroll_courses(
        db, BulkEnrollIn(student_id=s.id, course_ids=[a.id, b.id, b.id], semester="fall", academic_year=YEAR)
    )
    assert result.skipped_existing == [a.id]
    assert result.inserted == [b.id]


def test_bulk_enrollment_leaves_graded_rows_of_the_term_alone(db, campus):
    bm = campus.department()
    c = campus.course(bm, "BM101")
    s = campus.student(bm)
    failed = campus.enroll(s, c, status="failed")
    update_student_course(db, failed.id, StudentCourseUpdate(final_grade=20, letter_grade="FF", grade_point=0.0))

    result = enroll_courses(
        db, BulkEnrollIn(student_id=s.id, course_ids=[c.id], semester="fall", academic_year=YEAR)
    )
    assert result.inserted == []
    assert result.rejected[0].reason_code == "already_enrolled"

    (row,) = get_student_courses(db, s.id)
    assert row.status == "failed"
    assert row.letter_grade == "FF"
    assert row.final_grade == 20


def test_reactivated_rows_start_without_grades(db, campus):
    bm = campus.department()
    a = campus.course(bm, "BM101")
    b = campus.course(bm, "BM103")
    s = campus.student(bm)
    for course in (a, b):
        sc = campus.enroll(s, course)
        update_student_course(db, sc.id, StudentCourseUpdate(midterm_grade=35))
        drop_course(db, s.id, course.id)

    single = campus.enroll(s, a)
    assert single.status == "enrolled"
    assert single.midterm_grade is None

    result = enroll_courses(
        db, BulkEnrollIn(student_id=s.id, course_ids=[b.id], semester="fall", academic_year=YEAR)
    )
    assert result.inserted == [b.id]
    rows = {r.code: r for r in get_student_courses(db, s.id)}
    assert rows["BM103"].status == "enrolled"
    assert rows["BM103"].midterm_grade is None
    assert db.query(StudentCourse).filter(StudentCourse.student_id == s.id).count() == 2


def test_gpa_is_credit_weighted(db, campus):
    bm = campus.department()
    four = campus.course(bm, "BM101", credits=4)
    two = campus.course(bm, "BM103", credits=2)
    current = campus.course(bm, "BM105", credits=3)
    s = campus.student(bm)

    old_a = campus.enroll(s, four, status="passed", academic_year="2025-2026")
    old_b = campus.enroll(s, two, status="passed", academic_year="2025-2026")
    new = campus.enroll(s, current, status="passed", academic_year=YEAR)
    update_student_course(db, old_a.id, StudentCourseUpdate(grade_point=4.0, letter_grade="AA"))
    update_student_course(db, old_b.id, StudentCourseUpdate(grade_point=2.5, letter_grade="CB"))
    update_student_course(db, new.id, StudentCourseUpdate(grade_point=3.0, letter_grade="BB"))

    gpa = calculate_gpa(db, s.id, today=date(2026, 10, 19))
    # (4*4 + 2*2.5 + 3*3) / 9
    assert gpa.gno == 3.33
    assert gpa.yno == 3.0

    stored = get_student_by_id(db, s.id)
    assert stored.gno == 3.33
    assert stored.yno == 3.0


def test_gpa_without_grades_is_zero(db, campus):
    bm = campus.department()
    s = campus.student(bm)
    gpa = calculate_gpa(db, s.id)
    assert gpa.gno == 0.0
    assert gpa.yno == 0.0
    with pytest.raises(NotFoundError):
        calculate_gpa(db, 9999)


def test_student_courses_filter_by_term(db, campus):
    bm = campus.department()
    a = campus.course(bm, "BM101")
    b = campus.course(bm, "BM103")
    s = campus.student(bm)
    campus.enroll(s, a, status="passed", academic_year="2025-2026")
    campus.enroll(s, b, semester="spring")

    assert len(get_student_courses(db, s.id)) == 2
    assert [c.code for c in get_student_courses(db, s.id, academic_year="2025-2026")] == ["BM101"]
    assert [c.code for c in get_student_courses(db, s.id, semester="spring")] == ["BM103"]
