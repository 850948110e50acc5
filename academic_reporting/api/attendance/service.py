"""
Attendance. A lecturer marks the students of a report's class; the report's
actual_students_present is then re-counted from the stored rows.
"""

from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.auth.models import User
from academic_reporting.auth.schemas import CurrentUser
from academic_reporting.core import relationships, resolvers
from academic_reporting.core.audit import audit_trail, log_action
from academic_reporting.core.enums import UserRole
from academic_reporting.core.exceptions import ConflictError, ForbiddenError, InvalidInputError
from academic_reporting.core.models import Course, Enrollment, Report, StudentAttendance, StudentClass
from academic_reporting.core.schemas import MessageResponse

from .schemas import (
    AttendanceRecord,
    AttendanceSubmission,
    ClassStudent,
    CourseProgress,
    StudentAttendanceDetail,
)


async def _class_students(db: AsyncSession, class_id: int):
    result = await db.execute(
        select(User)
        .join(StudentClass, StudentClass.student_id == User.id)
        .where(StudentClass.class_id == class_id, User.role == UserRole.STUDENT.value)
        .order_by(User.full_name, User.id)
    )
    return result.scalars().all()


async def list_class_students(
    db: AsyncSession, current_user: CurrentUser, class_id: Optional[int]
) -> List[ClassStudent]:
    async with audit_trail(db, current_user.id, "Fetch Class Students", "Failed to fetch class students"):
        if not class_id:
            raise InvalidInputError("Class ID is required", audit_details="Missing class_id")
        if not await relationships.check_lecturer_class(db, current_user.id, class_id):
            raise ForbiddenError(
                "You are not assigned to this class", audit_details=f"Not assigned to class: {class_id}"
            )
    students = await _class_students(db, class_id)
    return [ClassStudent(id=s.id, full_name=s.full_name, email=s.email) for s in students]


async def get_report_attendance(
    db: AsyncSession, current_user: CurrentUser, report_id: Optional[int]
) -> List[AttendanceRecord]:
    """Every student of the report's class; students without a stored row count as absent."""
    async with audit_trail(db, current_user.id, "Fetch Attendance", "Failed to fetch attendance"):
        if not report_id:
            raise InvalidInputError("Report ID is required", audit_details="Missing report_id")
        report = await resolvers.resolve(
            db, Report, Report.id == report_id, Report.lecturer_id == current_user.id,
            error=ForbiddenError(
                "You are not authorized to view this report", audit_details=f"Not authorized for report: {report_id}"
            ),
        )
    students = await _class_students(db, report.class_id)
    result = await db.execute(
        select(StudentAttendance.student_id, StudentAttendance.attended).where(StudentAttendance.report_id == report_id)
    )
    marked = dict(result.all())
    return [
        AttendanceRecord(student_id=s.id, student_name=s.full_name, attended=bool(marked.get(s.id, False)))
        for s in students
    ]


async def submit_attendance(
    db: AsyncSession, current_user: CurrentUser, payload: AttendanceSubmission
) -> MessageResponse:
    async with audit_trail(db, current_user.id, "Submit Attendance", "Failed to submit attendance"):
        if not payload.report_id or payload.attendance is None:
            raise InvalidInputError(
                "Report ID and attendance array are required", audit_details="Missing report_id or attendance array"
            )
        report_id = payload.report_id
        report = await resolvers.resolve(
            db, Report, Report.id == report_id, Report.lecturer_id == current_user.id,
            error=ForbiddenError(
                "You are not authorized to submit attendance for this report",
                audit_details=f"Not authorized for report: {report_id}",
            ),
        )
        result = await db.execute(select(StudentClass.student_id).where(StudentClass.class_id == report.class_id))
        members = set(result.scalars().all())
        for item in payload.attendance:
            if not item.student_id or not isinstance(item.attended, bool):
                raise InvalidInputError(
                    "Invalid student_id or attended value",
                    audit_details=f"Invalid student_id or attended for report: {report_id}",
                )
            if item.student_id not in members:
                raise InvalidInputError(
                    f"Student {item.student_id} is not enrolled in this class",
                    audit_details=f"Student {item.student_id} not in class: {report.class_id}",
                )

        result = await db.execute(select(StudentAttendance).where(StudentAttendance.report_id == report_id))
        rows = {row.student_id: row for row in result.scalars().all()}
        for item in payload.attendance:
            if item.student_id in rows:
                rows[item.student_id].attended = item.attended
            else:
                rows[item.student_id] = StudentAttendance(
                    report_id=report_id, student_id=item.student_id, attended=item.attended
                )
                db.add(rows[item.student_id])
        await db.flush()

        present = await db.scalar(
            select(func.count())
            .select_from(StudentAttendance)
            .where(StudentAttendance.report_id == report_id, StudentAttendance.attended.is_(True))
        )
        if present > report.total_registered_students:
            raise InvalidInputError(
                "Actual students present cannot exceed total registered students",
                audit_details=f"Attendance count {present} exceeds total for report: {report_id}",
            )
        report.actual_students_present = present
        try:
            await db.commit()
        except IntegrityError:
            raise ConflictError(
                "Attendance was submitted concurrently, please retry",
                audit_details=f"Concurrent attendance submission for report: {report_id}",
            )

    await log_action(
        db,
        current_user.id,
        "Submit Attendance",
        f"Submitted attendance for {len(payload.attendance)} students in report: {report_id}",
    )
    return MessageResponse(message="Attendance submitted successfully")


async def list_attendance_details(
    db: AsyncSession, current_user: CurrentUser, course_id: Optional[int]
) -> List[StudentAttendanceDetail]:
    """Every report of the student's enrolled courses with the student's mark, if any."""
    if course_id:
        async with audit_trail(db, current_user.id, "Fetch Attendance Details", "Failed to fetch attendance details"):
            if not await relationships.check_enrollment(db, current_user.id, course_id):
                raise ForbiddenError(
                    "You are not enrolled in this course", audit_details=f"Not enrolled in course: {course_id}"
                )
    stmt = (
        select(
            Report.id.label("report_id"),
            Report.date_of_lecture.label("date"),
            Course.name.label("course_name"),
            StudentAttendance.attended,
        )
        .join(Enrollment, Enrollment.course_id == Report.course_id)
        .join(Course, Course.id == Enrollment.course_id)
        .outerjoin(
            StudentAttendance,
            (StudentAttendance.report_id == Report.id) & (StudentAttendance.student_id == Enrollment.student_id),
        )
        .where(Enrollment.student_id == current_user.id)
    )
    if course_id:
        stmt = stmt.where(Enrollment.course_id == course_id)
    stmt = stmt.order_by(Report.date_of_lecture.desc(), Report.id.desc())
    result = await db.execute(stmt)
    return [StudentAttendanceDetail(**row) for row in result.mappings().all()]


async def list_course_progress(db: AsyncSession, current_user: CurrentUser) -> List[CourseProgress]:
    total_classes = (
        select(func.count(Report.id)).where(Report.course_id == Course.id).correlate(Course).scalar_subquery()
    )
    attended_classes = (
        select(func.count(StudentAttendance.id))
        .join(Report, Report.id == StudentAttendance.report_id)
        .where(
            Report.course_id == Course.id,
            StudentAttendance.student_id == Enrollment.student_id,
            StudentAttendance.attended.is_(True),
        )
        .correlate(Course, Enrollment)
        .scalar_subquery()
    )
    result = await db.execute(
        select(
            Course.id,
            Course.name,
            Course.code,
            total_classes.label("total_classes"),
            attended_classes.label("attended_classes"),
        )
        .join(Enrollment, Enrollment.course_id == Course.id)
        .where(Enrollment.student_id == current_user.id)
        .order_by(Course.id)
    )
    progress = []
    for row in result.all():
        total, attended = row.total_classes or 0, row.attended_classes or 0
        percentage = f"{attended / total * 100:.2f}" if total > 0 else "0.00"
        progress.append(
            CourseProgress(
                course_id=row.id,
                course_name=row.name,
                course_code=row.code,
                total_classes=total,
                attended_classes=attended,
                attendance_percentage=percentage,
            )
        )
    return progress
