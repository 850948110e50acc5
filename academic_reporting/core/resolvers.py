"""
Entity lookups by id or exact (case-sensitive) name.
Absence raises NotFoundError unless the caller supplies a different error.
"""

from typing import Any, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.auth.models import User
from academic_reporting.core.enums import UserRole
from academic_reporting.core.exceptions import NotFoundError, ServiceError
from academic_reporting.core.models import Course, Faculty, SchoolClass, Venue

ModelT = TypeVar("ModelT")


async def find_one(db: AsyncSession, model: Type[ModelT], *criteria: Any) -> Optional[ModelT]:
    result = await db.execute(select(model).where(*criteria).limit(1))
    return result.scalar_one_or_none()


async def resolve(
    db: AsyncSession,
    model: Type[ModelT],
    *criteria: Any,
    error: ServiceError,
) -> ModelT:
    obj = await find_one(db, model, *criteria)
    if obj is None:
        raise error
    return obj


async def get_faculty(db: AsyncSession, faculty_id: int, error: Optional[ServiceError] = None) -> Faculty:
    return await resolve(
        db, Faculty, Faculty.id == faculty_id,
        error=error or NotFoundError("Faculty not found", audit_details=f"Faculty ID: {faculty_id}"),
    )


async def get_course(
    db: AsyncSession,
    course_id: int,
    *,
    faculty_id: Optional[int] = None,
    error: Optional[ServiceError] = None,
) -> Course:
    """Course by id, optionally restricted to one faculty."""
    criteria = [Course.id == course_id]
    if faculty_id is not None:
        criteria.append(Course.faculty_id == faculty_id)
    return await resolve(
        db, Course, *criteria,
        error=error or NotFoundError("Course not found", audit_details=f"Course ID: {course_id}"),
    )


async def get_class(db: AsyncSession, class_id: int, error: Optional[ServiceError] = None) -> SchoolClass:
    return await resolve(
        db, SchoolClass, SchoolClass.id == class_id,
        error=error or NotFoundError("Class not found", audit_details=f"Class ID: {class_id}"),
    )


async def get_venue(db: AsyncSession, venue_id: int, error: Optional[ServiceError] = None) -> Venue:
    return await resolve(
        db, Venue, Venue.id == venue_id,
        error=error or NotFoundError("Venue not found", audit_details=f"Venue ID: {venue_id}"),
    )


async def get_user(
    db: AsyncSession,
    user_id: int,
    *,
    role: Optional[UserRole] = None,
    error: Optional[ServiceError] = None,
) -> User:
    """User by id; when ``role`` is given the user must also hold that role."""
    criteria = [User.id == user_id]
    if role is not None:
        criteria.append(User.role == role.value)
    label = role.value if role is not None else "User"
    return await resolve(
        db, User, *criteria,
        error=error or NotFoundError(f"{label} not found", audit_details=f"{label} ID: {user_id}"),
    )


async def get_course_by_name(db: AsyncSession, name: str, error: Optional[ServiceError] = None) -> Course:
    return await resolve(
        db, Course, Course.name == name,
        error=error or NotFoundError("Course not found", audit_details=f"Course: {name}"),
    )


async def get_class_by_name(db: AsyncSession, name: str, error: Optional[ServiceError] = None) -> SchoolClass:
    return await resolve(
        db, SchoolClass, SchoolClass.name == name,
        error=error or NotFoundError("Class not found", audit_details=f"Class: {name}"),
    )


async def get_faculty_by_name(db: AsyncSession, name: str, error: Optional[ServiceError] = None) -> Faculty:
    return await resolve(
        db, Faculty, Faculty.name == name,
        error=error or NotFoundError("Faculty not found", audit_details=f"Faculty: {name}"),
    )


async def get_lecturer_by_name(db: AsyncSession, full_name: str, error: Optional[ServiceError] = None) -> User:
    return await resolve(
        db, User, User.full_name == full_name, User.role == UserRole.LECTURER.value,
        error=error or NotFoundError("Lecturer not found", audit_details=f"Lecturer: {full_name}"),
    )
