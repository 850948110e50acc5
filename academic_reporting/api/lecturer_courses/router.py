from typing import List

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.auth.rbac import require_roles
from academic_reporting.auth.schemas import CurrentUser
from academic_reporting.core.enums import UserRole
from academic_reporting.core.schemas import MessageResponse
from academic_reporting.db.session import get_db

from .schemas import LecturerCourseRequest, LecturerCourseResponse
from . import service

router = APIRouter(tags=["lecturer-courses"])

_program_leader = require_roles(UserRole.PROGRAM_LEADER)


@router.get(
    "/admin/lecturer-courses",
    response_model=List[LecturerCourseResponse],
    dependencies=[Depends(_program_leader)],
)
async def list_lecturer_courses(db: AsyncSession = Depends(get_db)):
    return await service.list_assignments(db)


@router.post("/pl/lecturer-courses", response_model=LecturerCourseResponse, status_code=status.HTTP_201_CREATED)
async def assign_lecturer_to_course(
    payload: LecturerCourseRequest,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_program_leader),
):
    return await service.assign_lecturer_to_course(db, current_user, payload)


@router.delete("/admin/lecturer-courses", response_model=MessageResponse)
async def delete_lecturer_course(
    payload: LecturerCourseRequest = Body(...),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_program_leader),
):
    return await service.delete_assignment(db, current_user, payload)
