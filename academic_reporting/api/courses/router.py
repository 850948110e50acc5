from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.auth.dependencies import get_current_user
from academic_reporting.auth.rbac import require_roles
from academic_reporting.auth.schemas import CurrentUser
from academic_reporting.core.enums import UserRole
from academic_reporting.db.session import get_db
from academic_reporting.core.schemas import MessageResponse

from .schemas import CourseRequest, CourseResponse
from . import service

router = APIRouter(prefix="/courses", tags=["courses"])

_program_leader = require_roles(UserRole.PROGRAM_LEADER)


@router.get("", response_model=List[CourseResponse], dependencies=[Depends(get_current_user)])
async def list_courses(db: AsyncSession = Depends(get_db)):
    return await service.list_courses(db)


@router.get("/{course_id}", response_model=CourseResponse)
async def get_course(
    course_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return await service.get_course(db, current_user, course_id)


@router.post("", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
async def create_course(
    payload: CourseRequest,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_program_leader),
):
    return await service.create_course(db, current_user, payload)


@router.put("/{course_id}", response_model=CourseResponse)
async def update_course(
    course_id: int,
    payload: CourseRequest,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_program_leader),
):
    return await service.update_course(db, current_user, course_id, payload)


@router.delete("/{course_id}", response_model=MessageResponse)
async def delete_course(
    course_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_program_leader),
):
    return await service.delete_course(db, current_user, course_id)
