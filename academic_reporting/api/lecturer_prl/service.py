from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.auth.models import User
from academic_reporting.auth.schemas import CurrentUser
from academic_reporting.core import relationships, resolvers
from academic_reporting.core.audit import audit_trail, log_action
from academic_reporting.core.enums import UserRole
from academic_reporting.core.exceptions import InvalidInputError, InvalidRelationshipError, NotFoundError
from academic_reporting.core.models import Course, LecturerCourse, LecturerPRL, PrincipalLecturerFaculty

from .schemas import PRLSelectRequest, PRLSelected, PRLSummary


async def list_available_prls(db: AsyncSession, current_user: CurrentUser) -> List[PRLSummary]:
    """PRLs whose faculty contains at least one course the lecturer teaches."""
    result = await db.execute(
        select(User)
        .distinct()
        .join(PrincipalLecturerFaculty, PrincipalLecturerFaculty.prl_id == User.id)
        .join(Course, Course.faculty_id == PrincipalLecturerFaculty.faculty_id)
        .join(LecturerCourse, LecturerCourse.course_id == Course.id)
        .where(User.role == UserRole.PRINCIPAL_LECTURER.value, LecturerCourse.lecturer_id == current_user.id)
        .order_by(User.id)
    )
    return [PRLSummary.model_validate(u) for u in result.scalars().all()]


async def get_current_prl(db: AsyncSession, current_user: CurrentUser) -> PRLSummary:
    async with audit_trail(db, current_user.id, "Fetch Current PRL", "Failed to fetch current PRL"):
        result = await db.execute(
            select(User)
            .join(LecturerPRL, LecturerPRL.prl_id == User.id)
            .where(LecturerPRL.lecturer_id == current_user.id)
        )
        prl = result.scalar_one_or_none()
        if prl is None:
            raise NotFoundError("No PRL assigned")
    return PRLSummary.model_validate(prl)


async def select_prl(db: AsyncSession, current_user: CurrentUser, payload: PRLSelectRequest) -> PRLSelected:
    async with audit_trail(db, current_user.id, "Select PRL", "Failed to select Principal Lecturer"):
        if not payload.prl_id:
            raise InvalidInputError("Principal Lecturer ID is required", audit_details="Missing prl_id")
        prl = await resolvers.get_user(
            db,
            payload.prl_id,
            role=UserRole.PRINCIPAL_LECTURER,
            error=InvalidInputError(
                "Invalid Principal Lecturer ID", audit_details=f"Invalid PRL ID: {payload.prl_id}"
            ),
        )
        if not await relationships.check_lecturer_shares_faculty_with_prl(db, current_user.id, prl.id):
            raise InvalidRelationshipError(
                "You cannot select this PRL as you do not share any faculties",
                audit_details=f"No shared faculty with PRL {prl.id}",
            )
        existing = await db.execute(select(LecturerPRL.prl_id).where(LecturerPRL.lecturer_id == current_user.id))
        current_prl = existing.scalar_one_or_none()
        already = InvalidRelationshipError(
            "You are already assigned to a Principal Lecturer",
            audit_details=f"Lecturer already assigned to PRL {current_prl}",
        )
        if current_prl is not None:
            raise already
        response = PRLSelected(message="Principal Lecturer selected successfully", prl=PRLSummary.model_validate(prl))
        db.add(LecturerPRL(lecturer_id=current_user.id, prl_id=prl.id))
        try:
            await db.commit()
        except IntegrityError:
            raise already

    await log_action(db, current_user.id, "Select PRL", f"Lecturer {current_user.id} assigned to PRL {response.prl.id}")
    return response
