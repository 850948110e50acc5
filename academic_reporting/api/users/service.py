from typing import List, Optional

from sqlalchemy import delete, exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.auth.models import User
from academic_reporting.auth.schemas import PASSWORD_POLICY_MESSAGE, CurrentUser, is_strong_password
from academic_reporting.auth.security import hash_password
from academic_reporting.core import resolvers
from academic_reporting.core.audit import audit_trail, log_action
from academic_reporting.core.enums import UserRole
from academic_reporting.core.exceptions import ConflictError, ForbiddenError, InvalidInputError, NotFoundError
from academic_reporting.core.models import (
    Course,
    Enrollment,
    LecturerClass,
    LecturerCourse,
    LecturerPRL,
    LecturerPRLRating,
    PrincipalLecturerFaculty,
    Rating,
    Report,
    StudentAttendance,
    StudentClass,
)
from academic_reporting.core.schemas import MessageResponse

from .schemas import UserCreate, UserResponse, UserUpdate

VALID_ROLES = {r.value for r in UserRole}


def _not_found(user_id: int) -> NotFoundError:
    return NotFoundError("User not found", audit_details=f"User not found: {user_id}")


async def list_users(
    db: AsyncSession,
    current_user: CurrentUser,
    path: str,
    role: Optional[str] = None,
    faculty_id: Optional[int] = None,
) -> List[UserResponse]:
    """PL sees everyone; a PRL may only list lecturers (optionally those teaching in a faculty)."""
    if current_user.role != UserRole.PROGRAM_LEADER and role != UserRole.LECTURER.value:
        await log_action(
            db, current_user.id, "Unauthorized Access", f"User with role {current_user.role.value} accessed {path}"
        )
        raise ForbiddenError()

    stmt = select(User).order_by(User.id)
    if role:
        stmt = stmt.where(User.role == role)
    if faculty_id and role == UserRole.LECTURER.value:
        teaching_in_faculty = (
            select(LecturerCourse.lecturer_id)
            .join(Course, Course.id == LecturerCourse.course_id)
            .where(Course.faculty_id == faculty_id)
        )
        stmt = stmt.where(User.id.in_(teaching_in_faculty))
    result = await db.execute(stmt)
    return [UserResponse.model_validate(u) for u in result.scalars().all()]


async def list_all_users(db: AsyncSession) -> List[UserResponse]:
    result = await db.execute(select(User).order_by(User.id))
    return [UserResponse.model_validate(u) for u in result.scalars().all()]


async def get_user(db: AsyncSession, current_user: CurrentUser, user_id: int) -> UserResponse:
    async with audit_trail(db, current_user.id, "Fetch User", "Failed to fetch user"):
        user = await resolvers.get_user(db, user_id, error=_not_found(user_id))
        return UserResponse.model_validate(user)


async def create_user(db: AsyncSession, current_user: CurrentUser, payload: UserCreate) -> UserResponse:
    async with audit_trail(db, current_user.id, "Create User", "Failed to create user"):
        if not all([payload.full_name, payload.email, payload.password, payload.role]):
            raise InvalidInputError("All fields are required", audit_details="Missing required fields")
        if not is_strong_password(payload.password):
            raise InvalidInputError(PASSWORD_POLICY_MESSAGE, audit_details="Invalid password format")
        email_taken = ConflictError("Email already exists", audit_details=f"Email already exists: {payload.email}")
        existing = await db.execute(select(User.id).where(User.email == payload.email))
        if existing.scalar_one_or_none() is not None:
            raise email_taken
        if payload.role not in VALID_ROLES:
            raise InvalidInputError("Invalid role", audit_details=f"Invalid role: {payload.role}")
        user = User(
            full_name=payload.full_name,
            email=payload.email,
            password_hash=hash_password(payload.password),
            role=payload.role,
        )
        db.add(user)
        try:
            await db.commit()
        except IntegrityError:
            raise email_taken
        response = UserResponse.model_validate(user)

    await log_action(db, current_user.id, "Create User", f"User created: {payload.email}, Role: {payload.role}")
    return response


async def update_user(
    db: AsyncSession, current_user: CurrentUser, user_id: int, payload: UserUpdate
) -> UserResponse:
    async with audit_trail(db, current_user.id, "Update User", "Failed to update user"):
        if not payload.full_name or not payload.email or not payload.role:
            raise InvalidInputError("Full name, email, and role are required", audit_details="Missing required fields")
        if payload.role not in VALID_ROLES:
            raise InvalidInputError("Invalid role", audit_details=f"Invalid role: {payload.role}")
        user = await resolvers.get_user(db, user_id, error=_not_found(user_id))
        if payload.password and not is_strong_password(payload.password):
            raise InvalidInputError(PASSWORD_POLICY_MESSAGE, audit_details="Invalid password format")
        user.full_name = payload.full_name
        user.email = payload.email
        user.role = payload.role
        if payload.password:
            user.password_hash = hash_password(payload.password)
        try:
            await db.commit()
        except IntegrityError:
            raise ConflictError("Email already exists", audit_details=f"Email already exists: {payload.email}")

    await log_action(db, current_user.id, "Update User", f"User updated: {payload.email}, ID: {user_id}")
    return UserResponse(id=user_id, full_name=payload.full_name, email=payload.email, role=payload.role)


async def _is_referenced(db: AsyncSession, user_id: int) -> bool:
    for column in (
        Report.lecturer_id,
        LecturerClass.lecturer_id,
        LecturerCourse.lecturer_id,
        LecturerPRL.lecturer_id,
        LecturerPRL.prl_id,
        PrincipalLecturerFaculty.prl_id,
        StudentClass.student_id,
        Enrollment.student_id,
        Rating.student_id,
        Rating.lecturer_id,
        LecturerPRLRating.lecturer_id,
        LecturerPRLRating.prl_id,
        StudentAttendance.student_id,
    ):
        result = await db.execute(select(exists().where(column == user_id)))
        if result.scalar():
            return True
    return False


async def delete_user(db: AsyncSession, current_user: CurrentUser, user_id: int) -> MessageResponse:
    async with audit_trail(db, current_user.id, "Delete User", "Failed to delete user"):
        await resolvers.get_user(db, user_id, error=_not_found(user_id))
        conflict = ConflictError(
            "Cannot delete user with associated records",
            audit_details=f"User still referenced: {user_id}",
        )
        if await _is_referenced(db, user_id):
            raise conflict
        try:
            await db.execute(delete(User).where(User.id == user_id))
            await db.commit()
        except IntegrityError:
            raise conflict

    await log_action(db, current_user.id, "Delete User", f"User deleted: {user_id}")
    return MessageResponse(message="User deleted")
