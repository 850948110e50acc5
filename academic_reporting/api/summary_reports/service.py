"""
PL summary workbooks. Each report type runs one aggregate query and writes
the rows to an .xlsx file under REPORTS_DIR, served at /reports/<file>.
"""

import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Sequence, Tuple

from openpyxl import Workbook
from openpyxl.styles import Font
from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.auth.models import User
from academic_reporting.auth.schemas import CurrentUser
from academic_reporting.core import resolvers
from academic_reporting.core.audit import audit_trail, log_action
from academic_reporting.core.config import settings
from academic_reporting.core.enums import SummaryReportType, UserRole
from academic_reporting.core.exceptions import InvalidInputError, NotFoundError
from academic_reporting.core.logging_config import logger
from academic_reporting.core.models import Course, Enrollment, Faculty, LecturerCourse, SummaryReport
from academic_reporting.core.schemas import MessageResponse

from .schemas import SummaryReportCreate, SummaryReportResponse

PUBLIC_PREFIX = "/reports/"

# (column key, header title) per report type
REPORT_COLUMNS: Dict[SummaryReportType, Tuple[Tuple[str, str], ...]] = {
    SummaryReportType.STUDENT_REGISTRATION: (
        ("full_name", "Student Name"),
        ("email", "Email"),
        ("course_name", "Course"),
        ("faculty_name", "Faculty"),
    ),
    SummaryReportType.COURSE_COMPLETION: (
        ("course_name", "Course"),
        ("faculty_name", "Faculty"),
        ("total_registered_students", "Registered Students"),
    ),
    SummaryReportType.LECTURER_WORKLOAD: (
        ("full_name", "Lecturer Name"),
        ("course_count", "Number of Courses"),
    ),
}


def _report_query(report_type: SummaryReportType):
    if report_type == SummaryReportType.STUDENT_REGISTRATION:
        return (
            select(
                User.full_name,
                User.email,
                Course.name.label("course_name"),
                Faculty.name.label("faculty_name"),
            )
            .select_from(Enrollment)
            .join(User, User.id == Enrollment.student_id)
            .join(Course, Course.id == Enrollment.course_id)
            .join(Faculty, Faculty.id == Course.faculty_id)
            .where(User.role == UserRole.STUDENT.value)
            .order_by(User.full_name, Course.name)
        )
    if report_type == SummaryReportType.COURSE_COMPLETION:
        return (
            select(
                Course.name.label("course_name"),
                Faculty.name.label("faculty_name"),
                func.coalesce(Course.total_registered_students, 0).label("total_registered_students"),
            )
            .outerjoin(Faculty, Faculty.id == Course.faculty_id)
            .order_by(Course.name)
        )
    return (
        select(User.full_name, func.count(LecturerCourse.course_id).label("course_count"))
        .outerjoin(LecturerCourse, LecturerCourse.lecturer_id == User.id)
        .where(User.role == UserRole.LECTURER.value)
        .group_by(User.id, User.full_name)
        .order_by(User.full_name)
    )


def write_workbook(path: str, title: str, columns: Sequence[Tuple[str, str]], rows: List[Dict[str, Any]]) -> None:
    wb = Workbook()
    ws = wb.active
    ws.title = title[:31]
    ws.append([header for _, header in columns])
    for cell in ws[1]:
        cell.font = Font(bold=True)
    for row in rows:
        ws.append([row.get(key) for key, _ in columns])
    wb.save(path)


def _local_path(file_path: str) -> str:
    return os.path.join(settings.reports_dir, os.path.basename(file_path))


async def list_reports(db: AsyncSession) -> List[SummaryReportResponse]:
    result = await db.execute(select(SummaryReport).order_by(SummaryReport.generated_at.desc()))
    return [SummaryReportResponse.model_validate(r) for r in result.scalars().all()]


async def generate_report(
    db: AsyncSession, current_user: CurrentUser, payload: SummaryReportCreate
) -> SummaryReportResponse:
    async with audit_trail(db, current_user.id, "Generate Report", "Failed to generate report"):
        try:
            report_type = SummaryReportType(payload.type)
        except ValueError:
            raise InvalidInputError("Invalid report type", audit_details=f"Invalid report type: {payload.type}")

        result = await db.execute(_report_query(report_type))
        rows = [dict(r) for r in result.mappings().all()]

        generated_at = datetime.now(timezone.utc)
        filename = f"{report_type.value}_{generated_at.strftime('%Y%m%d%H%M%S%f')}.xlsx"
        os.makedirs(settings.reports_dir, exist_ok=True)
        local_path = os.path.join(settings.reports_dir, filename)
        write_workbook(local_path, report_type.value, REPORT_COLUMNS[report_type], rows)

        report = SummaryReport(type=report_type.value, file_path=PUBLIC_PREFIX + filename, generated_at=generated_at)
        db.add(report)
        try:
            await db.commit()
        except SQLAlchemyError:
            os.remove(local_path)
            raise
        response = SummaryReportResponse.model_validate(report)

    await log_action(db, current_user.id, "Generate Report", f"Report generated: {report_type.value}, File: {filename}")
    return response


async def delete_report(db: AsyncSession, current_user: CurrentUser, report_id: int) -> MessageResponse:
    async with audit_trail(db, current_user.id, "Delete Report", "Failed to delete report"):
        report = await resolvers.resolve(
            db, SummaryReport, SummaryReport.id == report_id,
            error=NotFoundError("Report not found", audit_details=f"Report not found: {report_id}"),
        )
        local_path = _local_path(report.file_path)
        await db.execute(delete(SummaryReport).where(SummaryReport.id == report_id))
        await db.commit()

    try:
        os.remove(local_path)
    except OSError as exc:
        logger.warning(f"Failed to delete file {local_path}: {exc}")
    await log_action(db, current_user.id, "Delete Report", f"Report deleted: {report_id}")
    return MessageResponse(message="Report deleted successfully")
