from typing import List

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.auth.models import User
from academic_reporting.auth.schemas import CurrentUser
from academic_reporting.core import relationships, resolvers
from academic_reporting.core.audit import audit_trail, log_action
from academic_reporting.core.enums import UserRole
from academic_reporting.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from academic_reporting.core.models import Course, Faculty, LecturerCourse
from academic_reporting.core.schemas import MessageResponse

from .schemas import LecturerCourseRequest, LecturerCourseResponse


def _assignment_query():
    return (
        select(
            LecturerCourse.lecturer_id,
            LecturerCourse.course_id,
            User.full_name.label("lecturer_name"),
            Course.name.label("course_name"),
            Faculty.name.label("faculty_name"),
        )
        .join(User, User.id == LecturerCourse.lecturer_id)
        .join(Course, Course.id == LecturerCourse.course_id)
        .outerjoin(Faculty, Faculty.id == Course.faculty_id)
    )


def _check_ids(payload: LecturerCourseRequest) -> None:
    if not payload.lecturer_id or not payload.course_id:
        raise InvalidInputError("Lecturer ID and Course ID are required", audit_details="Missing required fields")


async def list_assignments(db: AsyncSession) -> List[LecturerCourseResponse]:
    result = await db.execute(_assignment_query().order_by(LecturerCourse.lecturer_id, LecturerCourse.course_id))
    return [LecturerCourseResponse(**row) for row in result.mappings().all()]


async def assign_lecturer_to_course(
    db: AsyncSession, current_user: CurrentUser, payload: LecturerCourseRequest
) -> LecturerCourseResponse:
    async with audit_trail(db, current_user.id, "Assign Lecturer Course", "Failed to assign lecturer to course"):
        _check_ids(payload)
        lecturer_id, course_id = payload.lecturer_id, payload.course_id
        await resolvers.get_user(
            db, lecturer_id, role=UserRole.LECTURER,
            error=NotFoundError("Lecturer not found", audit_details=f"Lecturer not found: {lecturer_id}"),
        )
        await resolvers.get_course(
            db, course_id, error=NotFoundError("Course not found", audit_details=f"Course not found: {course_id}")
        )
        duplicate = ConflictError(
            "Assignment already exists", audit_details=f"Assignment already exists: {lecturer_id}, {course_id}"
        )
        if await relationships.check_lecturer_course(db, lecturer_id, course_id):
            raise duplicate
        db.add(LecturerCourse(lecturer_id=lecturer_id, course_id=course_id))
        try:
            await db.commit()
        except IntegrityError:
            raise duplicate

    result = await db.execute(
        _assignment_query().where(LecturerCourse.lecturer_id == lecturer_id, LecturerCourse.course_id == course_id)
    )
    row = result.mappings().one()
    await log_action(db, current_user.id, "Assign Lecturer Course", f"Lecturer {lecturer_id} assigned to course {course_id}")
    return LecturerCourseResponse(**row)


async def delete_assignment(
    db: AsyncSession, current_user: CurrentUser, payload: LecturerCourseRequest
) -> MessageResponse:
    async with audit_trail(db, current_user.id, "Delete Lecturer Course", "Failed to delete assignment"):
        _check_ids(payload)
        lecturer_id, course_id = payload.lecturer_id, payload.course_id
        if not await relationships.check_lecturer_course(db, lecturer_id, course_id):
            raise NotFoundError(
                "Assignment not found", audit_details=f"Assignment not found: {lecturer_id}, {course_id}"
            )
        await db.execute(
            delete(LecturerCourse).where(
                LecturerCourse.lecturer_id == lecturer_id, LecturerCourse.course_id == course_id
            )
        )
        await db.commit()

    await log_action(db, current_user.id, "Delete Lecturer Course", f"Assignment deleted: {lecturer_id}, {course_id}")
    return MessageResponse(message="Assignment deleted successfully")
