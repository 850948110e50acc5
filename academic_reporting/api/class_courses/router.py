from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.auth.rbac import require_roles
from academic_reporting.auth.schemas import CurrentUser
from academic_reporting.core.enums import UserRole
from academic_reporting.db.session import get_db
from academic_reporting.core.schemas import MessageResponse

from .schemas import ClassCourseRequest, ClassCourseResponse
from . import service

router = APIRouter(prefix="/class-courses", tags=["class-courses"])


@router.post("", response_model=ClassCourseResponse, status_code=status.HTTP_201_CREATED)
async def assign_course_to_class(
    payload: ClassCourseRequest,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(UserRole.PRINCIPAL_LECTURER)),
):
    return await service.assign_course_to_class(db, current_user, payload)


@router.delete("", response_model=MessageResponse)
async def unassign_course_from_class(
    payload: ClassCourseRequest = Body(...),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(UserRole.PRINCIPAL_LECTURER)),
):
    return await service.unassign_course_from_class(db, current_user, payload)
