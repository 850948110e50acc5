from typing import List

from sqlalchemy import delete, exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.auth.schemas import CurrentUser
from academic_reporting.core import resolvers
from academic_reporting.core.audit import audit_trail, log_action
from academic_reporting.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from academic_reporting.core.models import (
    ClassCourse,
    Course,
    Enrollment,
    Faculty,
    LecturerCourse,
    Rating,
    Report,
)
from academic_reporting.core.schemas import MessageResponse

from .schemas import CourseRequest, CourseResponse


def _course_query():
    return (
        select(
            Course.id,
            Course.name,
            Course.faculty_id,
            Course.code,
            Course.total_registered_students,
            Faculty.name.label("faculty_name"),
        )
        .outerjoin(Faculty, Faculty.id == Course.faculty_id)
    )


def _check_payload(payload: CourseRequest) -> None:
    if not payload.name or not payload.faculty_id:
        raise InvalidInputError("Course name and faculty ID are required", audit_details="Missing required fields")
    if len(payload.name) > 100:
        raise InvalidInputError("Course name must be 100 characters or less", audit_details="Name too long")
    if payload.code and len(payload.code) > 10:
        raise InvalidInputError("Course code must be 10 characters or less", audit_details="Code too long")


async def _check_faculty(db: AsyncSession, faculty_id: int) -> None:
    await resolvers.get_faculty(
        db, faculty_id, error=InvalidInputError("Invalid faculty ID", audit_details=f"Invalid faculty ID: {faculty_id}")
    )


def _not_found(course_id: int) -> NotFoundError:
    return NotFoundError("Course not found", audit_details=f"Course not found: {course_id}")


async def list_courses(db: AsyncSession) -> List[CourseResponse]:
    result = await db.execute(_course_query().order_by(Course.id))
    return [CourseResponse(**row) for row in result.mappings().all()]


async def get_course(db: AsyncSession, current_user: CurrentUser, course_id: int) -> CourseResponse:
    async with audit_trail(db, current_user.id, "Fetch Course", "Failed to fetch course"):
        result = await db.execute(_course_query().where(Course.id == course_id))
        row = result.mappings().one_or_none()
        if row is None:
            raise _not_found(course_id)
        return CourseResponse(**row)


async def create_course(db: AsyncSession, current_user: CurrentUser, payload: CourseRequest) -> CourseResponse:
    async with audit_trail(db, current_user.id, "Create Course", "Failed to create course"):
        _check_payload(payload)
        await _check_faculty(db, payload.faculty_id)
        course = Course(
            name=payload.name,
            faculty_id=payload.faculty_id,
            code=payload.code or None,
            total_registered_students=0,
        )
        db.add(course)
        await db.commit()
        course_id = course.id

    await log_action(db, current_user.id, "Create Course", f"Course created: {payload.name}")
    return CourseResponse(
        id=course_id,
        name=payload.name,
        faculty_id=payload.faculty_id,
        code=payload.code or None,
        total_registered_students=0,
    )


async def update_course(
    db: AsyncSession, current_user: CurrentUser, course_id: int, payload: CourseRequest
) -> CourseResponse:
    async with audit_trail(db, current_user.id, "Update Course", "Failed to update course"):
        _check_payload(payload)
        course = await resolvers.get_course(db, course_id, error=_not_found(course_id))
        await _check_faculty(db, payload.faculty_id)
        course.name = payload.name
        course.faculty_id = payload.faculty_id
        course.code = payload.code or None
        total = course.total_registered_students or 0
        await db.commit()

    await log_action(db, current_user.id, "Update Course", f"Course updated: {payload.name}, ID: {course_id}")
    return CourseResponse(
        id=course_id,
        name=payload.name,
        faculty_id=payload.faculty_id,
        code=payload.code or None,
        total_registered_students=total,
    )


async def _is_referenced(db: AsyncSession, course_id: int) -> bool:
    for column in (
        ClassCourse.course_id,
        LecturerCourse.course_id,
        Enrollment.course_id,
        Report.course_id,
        Rating.course_id,
    ):
        result = await db.execute(select(exists().where(column == course_id)))
        if result.scalar():
            return True
    return False


async def delete_course(db: AsyncSession, current_user: CurrentUser, course_id: int) -> MessageResponse:
    async with audit_trail(db, current_user.id, "Delete Course", "Failed to delete course"):
        await resolvers.get_course(db, course_id, error=_not_found(course_id))
        conflict = ConflictError(
            "Cannot delete course with associated records",
            audit_details=f"Course still referenced: {course_id}",
        )
        if await _is_referenced(db, course_id):
            raise conflict
        try:
            await db.execute(delete(Course).where(Course.id == course_id))
            await db.commit()
        except IntegrityError:
            raise conflict

    await log_action(db, current_user.id, "Delete Course", f"Course deleted: {course_id}")
    return MessageResponse(message="Course deleted successfully")
