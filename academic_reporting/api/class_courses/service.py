from typing import Tuple

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.auth.schemas import CurrentUser
from academic_reporting.core import relationships, resolvers
from academic_reporting.core.audit import audit_trail, log_action
from academic_reporting.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from academic_reporting.core.models import ClassCourse
from academic_reporting.core.schemas import MessageResponse

from .schemas import ClassCourseRequest, ClassCourseResponse


async def _validate_chain(db: AsyncSession, current_user: CurrentUser, payload: ClassCourseRequest) -> Tuple[int, int]:
    """PRL faculty -> class -> course in that faculty. Returns (class_id, course_id)."""
    if not payload.class_id or not payload.course_id:
        raise InvalidInputError("Class ID and Course ID are required", audit_details="Missing required fields")
    faculty_id = await relationships.prl_faculty(db, current_user.id)
    await resolvers.get_class(db, payload.class_id)
    await resolvers.get_course(
        db,
        payload.course_id,
        faculty_id=faculty_id,
        error=NotFoundError(
            "Course not found or not in your faculty",
            audit_details=f"Course not found or not in PRL's faculty: {payload.course_id}",
        ),
    )
    return payload.class_id, payload.course_id


async def assign_course_to_class(
    db: AsyncSession, current_user: CurrentUser, payload: ClassCourseRequest
) -> ClassCourseResponse:
    async with audit_trail(db, current_user.id, "Assign Class Course", "Failed to assign course to class"):
        class_id, course_id = await _validate_chain(db, current_user, payload)
        duplicate = ConflictError(
            "Class is already assigned to this course",
            audit_details=f"Assignment already exists: {class_id}, {course_id}",
        )
        if await relationships.check_class_course(db, class_id, course_id):
            raise duplicate
        db.add(ClassCourse(class_id=class_id, course_id=course_id))
        try:
            await db.commit()
        except IntegrityError:
            raise duplicate

    await log_action(db, current_user.id, "Assign Class Course", f"Class {class_id} assigned to course {course_id}")
    return ClassCourseResponse(class_id=class_id, course_id=course_id, message="Course assigned to class successfully")


async def unassign_course_from_class(
    db: AsyncSession, current_user: CurrentUser, payload: ClassCourseRequest
) -> MessageResponse:
    async with audit_trail(db, current_user.id, "Unassign Class Course", "Failed to unassign course from class"):
        class_id, course_id = await _validate_chain(db, current_user, payload)
        if not await relationships.check_class_course(db, class_id, course_id):
            raise NotFoundError("Assignment not found", audit_details=f"Assignment not found: {class_id}, {course_id}")
        await db.execute(
            delete(ClassCourse).where(ClassCourse.class_id == class_id, ClassCourse.course_id == course_id)
        )
        await db.commit()

    await log_action(db, current_user.id, "Unassign Class Course", f"Assignment deleted: {class_id}, {course_id}")
    return MessageResponse(message="Course unassigned from class successfully")
