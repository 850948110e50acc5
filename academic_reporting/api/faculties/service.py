from typing import List

from sqlalchemy import delete, exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.auth.schemas import CurrentUser
from academic_reporting.core import resolvers
from academic_reporting.core.audit import audit_trail, log_action
from academic_reporting.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from academic_reporting.core.models import Course, Faculty, PrincipalLecturerFaculty, StudentClass
from academic_reporting.core.schemas import MessageResponse

from .schemas import FacultyRequest, FacultyResponse

NAME_RULE_MESSAGE = "Faculty name is required and must be 100 characters or less"


def _check_name(payload: FacultyRequest) -> str:
    if not payload.name or len(payload.name) > 100:
        raise InvalidInputError(NAME_RULE_MESSAGE, audit_details="Invalid or missing name")
    return payload.name


def _not_found(faculty_id: int) -> NotFoundError:
    return NotFoundError("Faculty not found", audit_details=f"Faculty not found: {faculty_id}")


async def list_faculties(db: AsyncSession) -> List[FacultyResponse]:
    result = await db.execute(select(Faculty).order_by(Faculty.id))
    return [FacultyResponse.model_validate(f) for f in result.scalars().all()]


async def get_faculty(db: AsyncSession, current_user: CurrentUser, faculty_id: int) -> FacultyResponse:
    async with audit_trail(db, current_user.id, "Fetch Faculty", "Failed to fetch faculty"):
        faculty = await resolvers.get_faculty(db, faculty_id, error=_not_found(faculty_id))
        return FacultyResponse.model_validate(faculty)


async def create_faculty(db: AsyncSession, current_user: CurrentUser, payload: FacultyRequest) -> FacultyResponse:
    async with audit_trail(db, current_user.id, "Create Faculty", "Failed to create faculty"):
        name = _check_name(payload)
        faculty = Faculty(name=name)
        db.add(faculty)
        try:
            await db.commit()
        except IntegrityError:
            raise ConflictError("Faculty name already exists", audit_details=f"Faculty already exists: {name}")
        response = FacultyResponse.model_validate(faculty)

    await log_action(db, current_user.id, "Create Faculty", f"Faculty created: {name}")
    return response


async def update_faculty(
    db: AsyncSession, current_user: CurrentUser, faculty_id: int, payload: FacultyRequest
) -> FacultyResponse:
    async with audit_trail(db, current_user.id, "Update Faculty", "Failed to update faculty"):
        name = _check_name(payload)
        faculty = await resolvers.get_faculty(db, faculty_id, error=_not_found(faculty_id))
        faculty.name = name
        try:
            await db.commit()
        except IntegrityError:
            raise ConflictError("Faculty name already exists", audit_details=f"Faculty already exists: {name}")
        response = FacultyResponse(id=faculty_id, name=name)

    await log_action(db, current_user.id, "Update Faculty", f"Faculty updated: {name}, ID: {faculty_id}")
    return response


async def delete_faculty(db: AsyncSession, current_user: CurrentUser, faculty_id: int) -> MessageResponse:
    async with audit_trail(db, current_user.id, "Delete Faculty", "Failed to delete faculty"):
        await resolvers.get_faculty(db, faculty_id, error=_not_found(faculty_id))
        has_courses = await db.execute(select(exists().where(Course.faculty_id == faculty_id)))
        if has_courses.scalar():
            raise InvalidInputError(
                "Cannot delete faculty with associated courses",
                audit_details=f"Faculty has associated courses: {faculty_id}",
            )
        for column in (PrincipalLecturerFaculty.faculty_id, StudentClass.faculty_id):
            in_use = await db.execute(select(exists().where(column == faculty_id)))
            if in_use.scalar():
                raise InvalidInputError(
                    "Cannot delete faculty that is still referenced",
                    audit_details=f"Faculty still referenced by {column.table.name}: {faculty_id}",
                )
        try:
            await db.execute(delete(Faculty).where(Faculty.id == faculty_id))
            await db.commit()
        except IntegrityError:
            raise ConflictError(
                "Cannot delete faculty that is still referenced",
                audit_details=f"Faculty still referenced: {faculty_id}",
            )

    await log_action(db, current_user.id, "Delete Faculty", f"Faculty deleted: {faculty_id}")
    return MessageResponse(message="Faculty deleted successfully")
