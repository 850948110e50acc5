from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.auth.schemas import CurrentUser
from academic_reporting.core.audit import audit_trail, log_action
from academic_reporting.core.exceptions import ConflictError, InvalidInputError
from academic_reporting.core.models import ClassCourse, Course, SchoolClass

from .schemas import ClassCreate, ClassResponse


async def courses_by_class(
    db: AsyncSession,
    class_ids: Iterable[int],
    faculty_id: Optional[int] = None,
) -> Dict[int, List[Tuple[int, str]]]:
    """Map class id -> [(course_id, course_name)], optionally limited to one faculty."""
    class_ids = list(class_ids)
    if not class_ids:
        return {}
    stmt = (
        select(ClassCourse.class_id, Course.id, Course.name)
        .join(Course, Course.id == ClassCourse.course_id)
        .where(ClassCourse.class_id.in_(class_ids))
        .order_by(Course.id)
    )
    if faculty_id is not None:
        stmt = stmt.where(Course.faculty_id == faculty_id)
    grouped: Dict[int, List[Tuple[int, str]]] = defaultdict(list)
    for class_id, course_id, course_name in (await db.execute(stmt)).all():
        grouped[class_id].append((course_id, course_name))
    return grouped


def _to_response(cl: SchoolClass, courses: List[Tuple[int, str]]) -> ClassResponse:
    return ClassResponse(
        id=cl.id,
        name=cl.name,
        course_ids=[c[0] for c in courses],
        course_names=[c[1] for c in courses],
    )


async def list_classes(db: AsyncSession) -> List[ClassResponse]:
    result = await db.execute(select(SchoolClass).order_by(SchoolClass.id))
    classes = result.scalars().all()
    grouped = await courses_by_class(db, [c.id for c in classes])
    return [_to_response(c, grouped.get(c.id, [])) for c in classes]


async def create_class(db: AsyncSession, current_user: CurrentUser, payload: ClassCreate) -> ClassResponse:
    async with audit_trail(db, current_user.id, "Create Class", "Failed to create class"):
        if not payload.name:
            raise InvalidInputError("Class name is required", audit_details="Missing name")
        if len(payload.name) > 50:
            raise InvalidInputError("Class name must be 50 characters or less", audit_details="Class name too long")
        existing = await db.execute(select(SchoolClass.id).where(SchoolClass.name == payload.name))
        if existing.scalar_one_or_none() is not None:
            raise ConflictError("Class name already exists", audit_details=f"Class already exists: {payload.name}")
        cl = SchoolClass(name=payload.name)
        db.add(cl)
        try:
            await db.commit()
        except IntegrityError:
            raise ConflictError("Class name already exists", audit_details=f"Class already exists: {payload.name}")
        response = _to_response(cl, [])

    await log_action(db, current_user.id, "Create Class", f"Class created: {payload.name}")
    return response
