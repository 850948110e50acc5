from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.api.classes.schemas import ClassResponse
from academic_reporting.api.classes.service import courses_by_class
from academic_reporting.auth.models import User
from academic_reporting.auth.schemas import CurrentUser
from academic_reporting.core import relationships, resolvers
from academic_reporting.core.audit import audit_trail, log_action
from academic_reporting.core.enums import UserRole
from academic_reporting.core.exceptions import (
    ConflictError,
    InvalidInputError,
    InvalidRelationshipError,
    NotFoundError,
)
from academic_reporting.core.models import ClassCourse, Course, LecturerClass, SchoolClass
from academic_reporting.core.schemas import MessageResponse

from .schemas import LecturerClassRequest, LecturerClassResponse


def _check_ids(payload: LecturerClassRequest) -> None:
    if not payload.lecturer_id or not payload.class_id:
        raise InvalidInputError("Lecturer ID and Class ID are required", audit_details="Missing required fields")


def _not_in_faculty(class_id: int) -> InvalidRelationshipError:
    return InvalidRelationshipError(
        "Class is not associated with your assigned faculties",
        audit_details=f"Class {class_id} not associated with PRL's faculties",
    )


async def _load_assignments(
    db: AsyncSession,
    *,
    lecturer_id: Optional[int] = None,
    class_id: Optional[int] = None,
    faculty_id: Optional[int] = None,
) -> List[LecturerClassResponse]:
    stmt = (
        select(
            LecturerClass.lecturer_id,
            LecturerClass.class_id,
            User.full_name.label("lecturer_name"),
            SchoolClass.name.label("class_name"),
        )
        .join(User, User.id == LecturerClass.lecturer_id)
        .join(SchoolClass, SchoolClass.id == LecturerClass.class_id)
    )
    if lecturer_id is not None:
        stmt = stmt.where(LecturerClass.lecturer_id == lecturer_id)
    if class_id is not None:
        stmt = stmt.where(LecturerClass.class_id == class_id)
    if faculty_id is not None:
        classes_in_faculty = (
            select(ClassCourse.class_id)
            .join(Course, Course.id == ClassCourse.course_id)
            .where(Course.faculty_id == faculty_id)
        )
        stmt = stmt.where(LecturerClass.class_id.in_(classes_in_faculty))
    stmt = stmt.order_by(LecturerClass.lecturer_id, LecturerClass.class_id)
    rows = (await db.execute(stmt)).mappings().all()

    courses = await courses_by_class(db, {r["class_id"] for r in rows}, faculty_id=faculty_id)
    return [
        LecturerClassResponse(
            **row,
            course_ids=[c[0] for c in courses.get(row["class_id"], [])],
            course_names=[c[1] for c in courses.get(row["class_id"], [])],
        )
        for row in rows
    ]


async def list_assignments(db: AsyncSession, current_user: CurrentUser) -> List[LecturerClassResponse]:
    """PL sees all assignments, a PRL those in their faculty, a lecturer their own."""
    if current_user.role == UserRole.PRINCIPAL_LECTURER:
        async with audit_trail(db, current_user.id, "Fetch Lecturer Classes", "Failed to fetch lecturer-class assignments"):
            faculty_id = await relationships.prl_faculty(db, current_user.id)
        return await _load_assignments(db, faculty_id=faculty_id)
    if current_user.role == UserRole.LECTURER:
        return await _load_assignments(db, lecturer_id=current_user.id)
    return await _load_assignments(db)


async def assign_lecturer_to_class(
    db: AsyncSession, current_user: CurrentUser, payload: LecturerClassRequest
) -> LecturerClassResponse:
    async with audit_trail(db, current_user.id, "Assign Lecturer Class", "Failed to assign lecturer to class"):
        _check_ids(payload)
        lecturer_id, class_id = payload.lecturer_id, payload.class_id
        await resolvers.get_user(db, lecturer_id, role=UserRole.LECTURER)
        await resolvers.get_class(db, class_id)
        faculty_id = await relationships.prl_faculty(db, current_user.id)
        if not await relationships.check_class_in_faculty(db, class_id, faculty_id):
            raise _not_in_faculty(class_id)
        duplicate = ConflictError(
            "Lecturer is already assigned to this class",
            audit_details=f"Assignment already exists: {lecturer_id}, {class_id}",
        )
        if await relationships.check_lecturer_class(db, lecturer_id, class_id):
            raise duplicate
        db.add(LecturerClass(lecturer_id=lecturer_id, class_id=class_id))
        try:
            await db.commit()
        except IntegrityError:
            raise duplicate

    assignment = (await _load_assignments(db, lecturer_id=lecturer_id, class_id=class_id))[0]
    await log_action(db, current_user.id, "Assign Lecturer Class", f"Lecturer {lecturer_id} assigned to class {class_id}")
    return assignment


async def unassign_lecturer_from_class(
    db: AsyncSession, current_user: CurrentUser, payload: LecturerClassRequest
) -> MessageResponse:
    async with audit_trail(db, current_user.id, "Unassign Lecturer Class", "Failed to unassign lecturer from class"):
        _check_ids(payload)
        lecturer_id, class_id = payload.lecturer_id, payload.class_id
        if not await relationships.check_lecturer_class(db, lecturer_id, class_id):
            raise NotFoundError("Assignment not found", audit_details=f"Assignment not found: {lecturer_id}, {class_id}")
        faculty_id = await relationships.prl_faculty(db, current_user.id)
        if not await relationships.check_class_in_faculty(db, class_id, faculty_id):
            raise _not_in_faculty(class_id)
        await db.execute(
            delete(LecturerClass).where(LecturerClass.lecturer_id == lecturer_id, LecturerClass.class_id == class_id)
        )
        await db.commit()

    await log_action(db, current_user.id, "Unassign Lecturer Class", f"Assignment deleted: {lecturer_id}, {class_id}")
    return MessageResponse(message="Lecturer unassigned from class successfully")


async def list_my_classes(db: AsyncSession, current_user: CurrentUser) -> List[ClassResponse]:
    result = await db.execute(
        select(SchoolClass)
        .join(LecturerClass, LecturerClass.class_id == SchoolClass.id)
        .where(LecturerClass.lecturer_id == current_user.id)
        .order_by(SchoolClass.id)
    )
    classes = result.scalars().all()
    courses = await courses_by_class(db, [c.id for c in classes])
    return [
        ClassResponse(
            id=c.id,
            name=c.name,
            course_ids=[x[0] for x in courses.get(c.id, [])],
            course_names=[x[1] for x in courses.get(c.id, [])],
        )
        for c in classes
    ]
