from typing import List, Optional

from sqlalchemy import delete, exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.auth.models import User
from academic_reporting.auth.schemas import CurrentUser
from academic_reporting.core import relationships, resolvers
from academic_reporting.core.audit import audit_trail, log_action
from academic_reporting.core.enums import UserRole
from academic_reporting.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    InvalidRelationshipError,
    NotFoundError,
)
from academic_reporting.core.models import (
    Course,
    Faculty,
    LecturerClass,
    Report,
    SchoolClass,
    StudentAttendance,
    Venue,
)
from academic_reporting.core.schemas import MessageResponse

from .schemas import (
    ClassReportItem,
    LecturerReportCreate,
    PRLReportCreate,
    ReportCreated,
    ReportResponse,
    StudentReportItem,
)

_LECTURER_FIELDS = (
    "class_id",
    "course_id",
    "venue_id",
    "week_of_reporting",
    "date_of_lecture",
    "scheduled_lecture_time",
    "actual_students_present",
    "total_registered_students",
    "topic_taught",
    "learning_outcomes",
)


def _report_query():
    return (
        select(
            Report.id,
            Report.lecturer_id,
            User.full_name.label("lecturer_name"),
            Report.class_id,
            SchoolClass.name.label("class_name"),
            Report.course_id,
            Course.name.label("course_name"),
            Faculty.name.label("faculty_name"),
            Report.venue_id,
            Venue.name.label("venue_name"),
            Report.week_of_reporting,
            Report.date_of_lecture,
            Report.scheduled_lecture_time,
            Report.actual_students_present,
            Report.total_registered_students,
            Report.topic_taught,
            Report.learning_outcomes,
            Report.recommendations,
            Report.prl_feedback,
            Report.created_at,
        )
        .join(User, User.id == Report.lecturer_id)
        .join(SchoolClass, SchoolClass.id == Report.class_id)
        .join(Course, Course.id == Report.course_id)
        .outerjoin(Faculty, Faculty.id == Course.faculty_id)
        .join(Venue, Venue.id == Report.venue_id)
    )


def _check_required(payload: LecturerReportCreate, fields, message: str) -> None:
    values = [getattr(payload, name) for name in fields]
    if any(v is None or v == "" for v in values):
        raise InvalidInputError(message, audit_details="Missing required fields")


def validate_report_numbers(week: int, actual: int, total: int) -> None:
    """Week within 1..52, non-negative counts, attendance not above registration."""
    if not 1 <= week <= 52:
        raise InvalidInputError(
            "Week of reporting must be between 1 and 52", audit_details=f"Invalid week_of_reporting: {week}"
        )
    if actual < 0:
        raise InvalidInputError(
            "Actual students present cannot be negative", audit_details=f"Invalid actual_students_present: {actual}"
        )
    if total < 0:
        raise InvalidInputError(
            "Total registered students cannot be negative",
            audit_details=f"Invalid total_registered_students: {total}",
        )
    if actual > total:
        raise InvalidInputError(
            "Actual students present cannot exceed total registered students",
            audit_details="Actual students present exceeds total registered",
        )


def _new_report(payload: LecturerReportCreate, lecturer_id: int, prl_feedback: Optional[str] = None) -> Report:
    return Report(
        lecturer_id=lecturer_id,
        class_id=payload.class_id,
        course_id=payload.course_id,
        venue_id=payload.venue_id,
        week_of_reporting=payload.week_of_reporting,
        date_of_lecture=payload.date_of_lecture,
        scheduled_lecture_time=payload.scheduled_lecture_time,
        actual_students_present=payload.actual_students_present,
        total_registered_students=payload.total_registered_students,
        topic_taught=payload.topic_taught,
        learning_outcomes=payload.learning_outcomes,
        recommendations=payload.recommendations or None,
        prl_feedback=prl_feedback or None,
    )


async def get_report(db: AsyncSession, report_id: int) -> Optional[ReportResponse]:
    result = await db.execute(_report_query().where(Report.id == report_id))
    row = result.mappings().one_or_none()
    return ReportResponse(**row) if row is not None else None


async def list_all_reports(db: AsyncSession) -> List[ReportResponse]:
    result = await db.execute(_report_query().order_by(Report.created_at.desc(), Report.id.desc()))
    return [ReportResponse(**row) for row in result.mappings().all()]


async def create_prl_report(db: AsyncSession, current_user: CurrentUser, payload: PRLReportCreate) -> ReportResponse:
    async with audit_trail(db, current_user.id, "Create PRL Report", "Failed to create report"):
        _check_required(payload, ("lecturer_id",) + _LECTURER_FIELDS, "All required fields must be provided and valid")
        validate_report_numbers(
            payload.week_of_reporting, payload.actual_students_present, payload.total_registered_students
        )
        await resolvers.get_user(db, payload.lecturer_id, role=UserRole.LECTURER)
        await resolvers.get_course(db, payload.course_id)
        await resolvers.get_venue(db, payload.venue_id)
        await resolvers.get_class(db, payload.class_id)
        if not await relationships.check_class_course(db, payload.class_id, payload.course_id):
            raise InvalidRelationshipError(
                "Class is not assigned to the selected course",
                audit_details=f"Class {payload.class_id} not assigned to course {payload.course_id}",
            )
        if not await relationships.check_lecturer_class(db, payload.lecturer_id, payload.class_id):
            raise InvalidRelationshipError(
                "Lecturer is not assigned to the selected class",
                audit_details=f"Lecturer {payload.lecturer_id} not assigned to class {payload.class_id}",
            )
        report = _new_report(payload, payload.lecturer_id, payload.prl_feedback)
        db.add(report)
        await db.commit()
        report_id = report.id

    await log_action(
        db, current_user.id, "Create PRL Report",
        f"Report created for lecturer {payload.lecturer_id}, class {payload.class_id}",
    )
    return await get_report(db, report_id)


async def delete_prl_report(db: AsyncSession, current_user: CurrentUser, report_id: int) -> MessageResponse:
    async with audit_trail(db, current_user.id, "Delete PRL Report", "Failed to delete report"):
        await resolvers.resolve(
            db, Report, Report.id == report_id,
            error=NotFoundError("Report not found", audit_details=f"Report not found: {report_id}"),
        )
        has_attendance = await db.execute(select(exists().where(StudentAttendance.report_id == report_id)))
        if has_attendance.scalar():
            raise ConflictError(
                "Cannot delete report with recorded attendance",
                audit_details=f"Report has attendance: {report_id}",
            )
        await db.execute(delete(Report).where(Report.id == report_id))
        await db.commit()

    await log_action(db, current_user.id, "Delete PRL Report", f"Report deleted: {report_id}")
    return MessageResponse(message="Report deleted successfully")


async def create_lecturer_report(
    db: AsyncSession, current_user: CurrentUser, payload: LecturerReportCreate
) -> ReportCreated:
    async with audit_trail(db, current_user.id, "Create Report", "Failed to create report"):
        _check_required(payload, _LECTURER_FIELDS, "All required fields must be provided")
        validate_report_numbers(
            payload.week_of_reporting, payload.actual_students_present, payload.total_registered_students
        )
        if not await relationships.check_lecturer_class(db, current_user.id, payload.class_id):
            raise ForbiddenError(
                "You are not assigned to this class",
                audit_details=f"Lecturer not assigned to class {payload.class_id}",
            )
        if not await relationships.check_class_course(db, payload.class_id, payload.course_id):
            raise InvalidRelationshipError(
                "Course is not associated with the selected class",
                audit_details=f"Course {payload.course_id} not associated with class {payload.class_id}",
            )
        await resolvers.get_venue(
            db, payload.venue_id,
            error=InvalidInputError("Invalid venue", audit_details=f"Invalid venue_id: {payload.venue_id}"),
        )
        course = await resolvers.get_course(
            db, payload.course_id,
            error=InvalidInputError(
                "Total registered students does not match course data",
                audit_details=f"Course not found: {payload.course_id}",
            ),
        )
        if (course.total_registered_students or 0) != payload.total_registered_students:
            raise InvalidInputError(
                "Total registered students does not match course data",
                audit_details=f"Invalid total_registered_students: {payload.total_registered_students}",
            )
        report = _new_report(payload, current_user.id)
        db.add(report)
        await db.commit()
        report_id = report.id

    await log_action(
        db, current_user.id, "Create Report",
        f"Report created for class {payload.class_id}, course {payload.course_id}",
    )
    return ReportCreated(message="Report created successfully", report_id=report_id)


async def list_lecturer_reports(db: AsyncSession, current_user: CurrentUser) -> List[ReportResponse]:
    result = await db.execute(
        _report_query()
        .where(Report.lecturer_id == current_user.id)
        .order_by(Report.created_at.desc(), Report.id.desc())
    )
    return [ReportResponse(**row) for row in result.mappings().all()]


async def list_class_reports(
    db: AsyncSession,
    current_user: CurrentUser,
    class_id: Optional[int] = None,
    course_id: Optional[int] = None,
) -> List[ClassReportItem]:
    """Reports for every class the lecturer is assigned to, by any lecturer."""
    my_classes = select(LecturerClass.class_id).where(LecturerClass.lecturer_id == current_user.id)
    stmt = (
        select(
            Report.id,
            Report.date_of_lecture.label("date"),
            Course.name.label("course_name"),
            SchoolClass.name.label("class_name"),
            Report.topic_taught,
            Report.actual_students_present,
            Report.total_registered_students,
        )
        .join(Course, Course.id == Report.course_id)
        .join(SchoolClass, SchoolClass.id == Report.class_id)
        .where(Report.class_id.in_(my_classes))
    )
    if class_id:
        stmt = stmt.where(Report.class_id == class_id)
    if course_id:
        stmt = stmt.where(Report.course_id == course_id)
    stmt = stmt.order_by(Report.date_of_lecture.desc(), Report.id.desc())
    result = await db.execute(stmt)
    return [ClassReportItem(**row) for row in result.mappings().all()]


async def list_student_reports(
    db: AsyncSession, current_user: CurrentUser, course_id: Optional[int]
) -> List[StudentReportItem]:
    async with audit_trail(db, current_user.id, "Fetch Reports", "Failed to fetch reports"):
        if not course_id:
            raise InvalidInputError("Course ID is required", audit_details="Missing course_id")
        if not await relationships.check_enrollment(db, current_user.id, course_id):
            raise ForbiddenError(
                "You are not enrolled in this course", audit_details=f"Not enrolled in course: {course_id}"
            )
        result = await db.execute(
            select(
                Report.id,
                Report.date_of_lecture.label("date"),
                Course.name.label("course_name"),
                User.full_name.label("lecturer_name"),
            )
            .join(Course, Course.id == Report.course_id)
            .join(User, User.id == Report.lecturer_id)
            .where(Report.course_id == course_id)
            .order_by(Report.date_of_lecture.desc(), Report.id.desc())
        )
        return [StudentReportItem(**row) for row in result.mappings().all()]
