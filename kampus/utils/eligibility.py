from typing import Iterable, Optional

from kampus.schemas.enrollment import EligibilityOut
from kampus.utils.conflict import find_conflict


def _reject(code: str, reason: str) -> EligibilityOut:
    return EligibilityOut(is_eligible=False, eligibility_reason=reason, reason_code=code)


def evaluate_eligibility(
    *,
    student,
    course,
    enrollment_status: Optional[str],
    enrolled_schedules: Iterable,
    course_schedules: Iterable,
    missing_prerequisites: Iterable[str] = (),
) -> EligibilityOut:
    """
    Decide whether ``student`` may enroll in ``course``. Pure: everything it
    needs comes from a snapshot the caller already loaded.

    enrollment_status: "enrolled" / "passed" row the student already holds
        for this course, or None
    enrolled_schedules: schedule rows of the student's enrolled courses
        (course_code is used in the conflict message)
    course_schedules: schedule rows of ``course``
    missing_prerequisites: codes of prerequisite courses not passed yet

    The first failing check wins. Nothing here locks the store, so two
    enrollments racing on the last seat can both pass the quota check.
    """
    if student is None:
        return _reject("student_not_found", "student not found")
    if course is None:
        return _reject("course_not_found", "course not found")

    if course.department_id != student.department_id:
        return _reject("department_mismatch", "department mismatch")

    if course.class_year > student.class_year:
        return _reject("class_year", f"class year: this is a year {course.class_year} course")

    if enrollment_status == "enrolled":
        return _reject("already_enrolled", "already enrolled")
    if enrollment_status == "passed":
        return _reject("already_passed", "already passed")

    # None = unlimited
    if course.quota is not None and course.enrolled_count >= course.quota:
        return _reject("quota_full", "quota full")

    hit = find_conflict(enrolled_schedules, course_schedules)
    if hit:
        existing, new = hit
        return _reject(
            "schedule_conflict",
            f"schedule conflict with {existing.course_code} ({new.day} {new.start_time}-{new.end_time})",
        )

    missing = list(missing_prerequisites)
    if missing:
        return _reject("prerequisite_missing", f"prerequisite not passed: {', '.join(missing)}")

    return EligibilityOut(is_eligible=True)
