import logging
from collections import defaultdict
from datetime import date

from sqlalchemy.orm import Session

from kampus.config import academic_year_for
from kampus.database import commit_or_raise
from kampus.errors import DuplicateKeyError, NotFoundError
from kampus.models.course import Course, CoursePrerequisite
from kampus.models.student import Student
from kampus.models.student_course import StudentCourse
from kampus.schemas.enrollment import (
    BulkEnrollIn,
    BulkEnrollOut,
    CourseWithEligibility,
    EligibilityOut,
    EnrollmentCreate,
    GpaOut,
    RejectedCourse,
    StudentCourseOut,
    StudentCourseUpdate,
)
from kampus.services.courses import (
    get_course_by_id,
    get_course_schedules,
    get_courses_by_department_and_year,
    get_enrolled_schedules,
)
from kampus.services.exams import get_exams_by_course
from kampus.services.students import get_student_by_id
from kampus.utils.eligibility import evaluate_eligibility

logger = logging.getLogger("kampus.enrollment")


# ==================== enrollment rows ====================

def _enrollment_query(db: Session):
    return db.query(
        StudentCourse,
        Course.code,
        Course.name,
        Course.credits,
        Course.ects,
        Course.instructor,
        Course.class_year,
        Course.is_mandatory,
    ).join(Course, Course.id == StudentCourse.course_id)


def _to_out(row) -> StudentCourseOut:
    sc, code, name, credits, ects, instructor, class_year, is_mandatory = row
    return StudentCourseOut(
        id=sc.id,
        student_id=sc.student_id,
        course_id=sc.course_id,
        semester=sc.semester,
        academic_year=sc.academic_year,
        status=sc.status,
        midterm_grade=sc.midterm_grade,
        final_grade=sc.final_grade,
        makeup_grade=sc.makeup_grade,
        letter_grade=sc.letter_grade,
        grade_point=sc.grade_point,
        code=code,
        name=name,
        credits=credits,
        ects=ects,
        instructor=instructor,
        class_year=class_year,
        is_mandatory=is_mandatory,
    )


GRADE_FIELDS = ("midterm_grade", "final_grade", "makeup_grade", "letter_grade", "grade_point")


def _reopen(sc: StudentCourse, status: str) -> StudentCourse:
    """Reuse a dropped row of the same term as a fresh enrollment."""
    sc.status = status
    for field in GRADE_FIELDS:
        setattr(sc, field, None)
    return sc


def enroll_course(db: Session, body: EnrollmentCreate) -> StudentCourseOut:
    """
    Insert one enrollment row. A second identical call is rejected with
    DuplicateKeyError; a row dropped earlier in the same term is reactivated.
    Eligibility is the caller's job (see enroll_if_eligible).
    """
    if not db.query(Student.id).filter(Student.id == body.student_id).first():
        raise NotFoundError(f"Student {body.student_id} not found")
    if not db.query(Course.id).filter(Course.id == body.course_id).first():
        raise NotFoundError(f"Course {body.course_id} not found")

    existing = (
        db.query(StudentCourse)
        .filter(
            StudentCourse.student_id == body.student_id,
            StudentCourse.course_id == body.course_id,
            StudentCourse.semester == body.semester,
            StudentCourse.academic_year == body.academic_year,
        )
        .first()
    )
    if existing and existing.status != "dropped":
        raise DuplicateKeyError(
            f"already enrolled: student {body.student_id} / course {body.course_id} "
            f"({body.semester} {body.academic_year}, status={existing.status})"
        )

    if existing:
        sc = _reopen(existing, body.status)
    else:
        sc = StudentCourse(
            student_id=body.student_id,
            course_id=body.course_id,
            semester=body.semester,
            academic_year=body.academic_year,
            status=body.status,
        )
        db.add(sc)

    commit_or_raise(db)
    logger.info("Student %s enrolled in course %s (%s)", body.student_id, body.course_id, body.status)
    return _to_out(_enrollment_query(db).filter(StudentCourse.id == sc.id).first())


def enroll_if_eligible(db: Session, body: EnrollmentCreate) -> EligibilityOut:
    """Check then insert. Not atomic: a concurrent enrollment can slip in between."""
    result = check_course_eligibility(db, body.student_id, body.course_id)
    if result.is_eligible:
        enroll_course(db, body)
    else:
        logger.info(
            "Enrollment of student %s in course %s refused: %s",
            body.student_id, body.course_id, result.eligibility_reason,
        )
    return result


def unenroll_course(db: Session, student_id: int, course_id: int):
    deleted = (
        db.query(StudentCourse)
        .filter(
            StudentCourse.student_id == student_id,
            StudentCourse.course_id == course_id,
            StudentCourse.status == "enrolled",
        )
        .delete(synchronize_session=False)
    )
    if not deleted:
        raise NotFoundError(f"Student {student_id} is not enrolled in course {course_id}")
    commit_or_raise(db)
    logger.info("Student %s unenrolled from course %s", student_id, course_id)


def drop_course(db: Session, student_id: int, course_id: int):
    """Keep the row for the transcript, mark it dropped."""
    rows = (
        db.query(StudentCourse)
        .filter(
            StudentCourse.student_id == student_id,
            StudentCourse.course_id == course_id,
            StudentCourse.status == "enrolled",
        )
        .all()
    )
    if not rows:
        raise NotFoundError(f"Student {student_id} is not enrolled in course {course_id}")
    for sc in rows:
        sc.status = "dropped"
    commit_or_raise(db)


def get_enrolled_courses(db: Session, student_id: int) -> list[StudentCourseOut]:
    rows = (
        _enrollment_query(db)
        .filter(StudentCourse.student_id == student_id, StudentCourse.status == "enrolled")
        .order_by(Course.class_year.asc(), Course.code.asc())
        .all()
    )
    return [_to_out(r) for r in rows]


def get_student_courses(
    db: Session,
    student_id: int,
    academic_year: str | None = None,
    semester: str | None = None,
) -> list[StudentCourseOut]:
    q = _enrollment_query(db).filter(StudentCourse.student_id == student_id)
    if academic_year:
        q = q.filter(StudentCourse.academic_year == academic_year)
    if semester:
        q = q.filter(StudentCourse.semester == semester)
    rows = q.order_by(Course.class_year.asc(), Course.code.asc()).all()
    return [_to_out(r) for r in rows]


def update_student_course(db: Session, enrollment_id: int, body: StudentCourseUpdate) -> StudentCourseOut:
    sc = db.query(StudentCourse).filter(StudentCourse.id == enrollment_id).first()
    if not sc:
        raise NotFoundError(f"Enrollment {enrollment_id} not found")

    for k, v in body.model_dump(exclude_unset=True).items():
        setattr(sc, k, v)

    commit_or_raise(db)
    return _to_out(_enrollment_query(db).filter(StudentCourse.id == enrollment_id).first())


def _weighted_average(rows) -> float:
    total_credits = sum(c for c, _ in rows)
    if not total_credits:
        return 0.0
    return round(sum(c * gp for c, gp in rows) / total_credits, 2)


def calculate_gpa(db: Session, student_id: int, today: date | None = None) -> GpaOut:
    """
    gno: credit weighted average over every passed course
    yno: the same, restricted to the current academic year
    Both are written back to the student row.
    """
    s = db.query(Student).filter(Student.id == student_id).first()
    if not s:
        raise NotFoundError(f"Student {student_id} not found")

    base = (
        db.query(Course.credits, StudentCourse.grade_point, StudentCourse.academic_year)
        .join(Course, Course.id == StudentCourse.course_id)
        .filter(
            StudentCourse.student_id == student_id,
            StudentCourse.status == "passed",
            StudentCourse.grade_point.isnot(None),
        )
        .all()
    )
    year = academic_year_for(today or date.today())

    gno = _weighted_average([(c, gp) for c, gp, _ in base])
    yno = _weighted_average([(c, gp) for c, gp, y in base if y == year])

    s.gno = gno
    s.yno = yno
    commit_or_raise(db)
    return GpaOut(gno=gno, yno=yno)


# ==================== eligibility ====================

def _status_map(db: Session, student_id: int) -> dict[int, str]:
    """course_id -> 'enrolled' / 'passed' (enrolled wins)."""
    rows = (
        db.query(StudentCourse.course_id, StudentCourse.status)
        .filter(
            StudentCourse.student_id == student_id,
            StudentCourse.status.in_(["enrolled", "passed"]),
        )
        .all()
    )
    out: dict[int, str] = {}
    for course_id, status in rows:
        if out.get(course_id) != "enrolled":
            out[course_id] = status
    return out


def _missing_prerequisites(db: Session, course_ids: list[int], passed: set[int]) -> dict[int, list[str]]:
    rows = (
        db.query(CoursePrerequisite.course_id, CoursePrerequisite.prerequisite_course_id, Course.code)
        .join(Course, Course.id == CoursePrerequisite.prerequisite_course_id)
        .filter(CoursePrerequisite.course_id.in_(course_ids))
        .order_by(Course.code.asc())
        .all()
    )
    missing: dict[int, list[str]] = defaultdict(list)
    for course_id, prereq_id, code in rows:
        if prereq_id not in passed:
            missing[course_id].append(code)
    return missing


def check_course_eligibility(db: Session, student_id: int, course_id: int) -> EligibilityOut:
    student = get_student_by_id(db, student_id)
    course = get_course_by_id(db, course_id)
    if student is None or course is None:
        return evaluate_eligibility(
            student=student, course=course, enrollment_status=None,
            enrolled_schedules=[], course_schedules=[],
        )

    statuses = _status_map(db, student_id)
    passed = {cid for cid, st in statuses.items() if st == "passed"}
    return evaluate_eligibility(
        student=student,
        course=course,
        enrollment_status=statuses.get(course_id),
        enrolled_schedules=get_enrolled_schedules(db, student_id),
        course_schedules=get_course_schedules(db, course_id),
        missing_prerequisites=_missing_prerequisites(db, [course_id], passed).get(course_id, []),
    )


def get_available_courses_for_student(db: Session, student_id: int) -> list[CourseWithEligibility]:
    """
    Every course of the student's department up to their class year,
    annotated with is_eligible / eligibility_reason, schedules and exams.
    """
    student = get_student_by_id(db, student_id)
    if not student:
        return []

    courses = get_courses_by_department_and_year(db, student.department_id, student.class_year)
    if not courses:
        return []

    statuses = _status_map(db, student_id)
    passed = {cid for cid, st in statuses.items() if st == "passed"}
    enrolled_schedules = get_enrolled_schedules(db, student_id)
    missing = _missing_prerequisites(db, [c.id for c in courses], passed)

    out = []
    for course in courses:
        schedules = get_course_schedules(db, course.id)
        result = evaluate_eligibility(
            student=student,
            course=course,
            enrollment_status=statuses.get(course.id),
            enrolled_schedules=enrolled_schedules,
            course_schedules=schedules,
            missing_prerequisites=missing.get(course.id, []),
        )
        out.append(
            CourseWithEligibility(
                **course.model_dump(),
                is_eligible=result.is_eligible,
                eligibility_reason=result.eligibility_reason,
                reason_code=result.reason_code,
                is_enrolled=statuses.get(course.id) == "enrolled",
                schedules=schedules,
                exams=get_exams_by_course(db, course.id),
            )
        )
    return out


def enroll_courses(db: Session, body: BulkEnrollIn) -> BulkEnrollOut:
    """
    All-or-nothing bulk enrollment. Every course is checked against the
    student's current schedule plus the courses accepted earlier in the same
    batch; if any is rejected nothing is written.
    """
    course_ids = list(dict.fromkeys(body.course_ids))
    student = get_student_by_id(db, body.student_id)
    if not student:
        raise NotFoundError(f"Student {body.student_id} not found")

    statuses = _status_map(db, body.student_id)
    passed = {cid for cid, st in statuses.items() if st == "passed"}
    running_times = get_enrolled_schedules(db, body.student_id)
    missing = _missing_prerequisites(db, course_ids, passed)

    # dropped rows from earlier this term are reused, the term key is unique
    term_rows = {
        sc.course_id: sc
        for sc in db.query(StudentCourse).filter(
            StudentCourse.student_id == body.student_id,
            StudentCourse.semester == body.semester,
            StudentCourse.academic_year == body.academic_year,
            StudentCourse.course_id.in_(course_ids),
        )
    }

    result = BulkEnrollOut()
    to_insert = []
    accepted = []
    for cid in course_ids:
        if statuses.get(cid) == "enrolled":
            result.skipped_existing.append(cid)
            continue

        course = get_course_by_id(db, cid)
        new_times = get_course_schedules(db, cid) if course else []
        verdict = evaluate_eligibility(
            student=student,
            course=course,
            enrollment_status=statuses.get(cid),
            enrolled_schedules=running_times,
            course_schedules=new_times,
            missing_prerequisites=missing.get(cid, []),
        )
        if not verdict.is_eligible:
            result.rejected.append(
                RejectedCourse(
                    course_id=cid,
                    reason_code=verdict.reason_code,
                    eligibility_reason=verdict.eligibility_reason,
                )
            )
            continue

        existing = term_rows.get(cid)
        if existing is not None and existing.status != "dropped":
            # graded rows of this term are history, never reopened
            result.rejected.append(
                RejectedCourse(
                    course_id=cid,
                    reason_code="already_enrolled",
                    eligibility_reason=f"already recorded this term ({existing.status})",
                )
            )
            continue

        accepted.append(cid)
        if existing is not None:
            _reopen(existing, "enrolled")
        else:
            to_insert.append(
                StudentCourse(
                    student_id=body.student_id,
                    course_id=cid,
                    semester=body.semester,
                    academic_year=body.academic_year,
                    status="enrolled",
                )
            )
        running_times.extend(new_times)

    if result.rejected:
        logger.info(
            "Bulk enrollment for student %s aborted, %d course(s) rejected",
            body.student_id, len(result.rejected),
        )
        db.rollback()
        return result

    # single commit, a failure leaves no partial enrollment behind
    db.add_all(to_insert)
    commit_or_raise(db)
    result.inserted = accepted
    logger.info("Bulk enrolled student %s in %s", body.student_id, result.inserted)
    return result
