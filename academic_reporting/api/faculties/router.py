from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.auth.dependencies import get_current_user
from academic_reporting.auth.rbac import require_roles
from academic_reporting.auth.schemas import CurrentUser
from academic_reporting.core.enums import UserRole
from academic_reporting.db.session import get_db
from academic_reporting.core.schemas import MessageResponse

from .schemas import FacultyRequest, FacultyResponse
from . import service

router = APIRouter(prefix="/faculties", tags=["faculties"])

_program_leader = require_roles(UserRole.PROGRAM_LEADER)


@router.get("", response_model=List[FacultyResponse], dependencies=[Depends(get_current_user)])
async def list_faculties(db: AsyncSession = Depends(get_db)):
    return await service.list_faculties(db)


@router.get("/{faculty_id}", response_model=FacultyResponse)
async def get_faculty(
    faculty_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return await service.get_faculty(db, current_user, faculty_id)


@router.post("", response_model=FacultyResponse, status_code=status.HTTP_201_CREATED)
async def create_faculty(
    payload: FacultyRequest,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_program_leader),
):
    return await service.create_faculty(db, current_user, payload)


@router.put("/{faculty_id}", response_model=FacultyResponse)
async def update_faculty(
    faculty_id: int,
    payload: FacultyRequest,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_program_leader),
):
    return await service.update_faculty(db, current_user, faculty_id, payload)


@router.delete("/{faculty_id}", response_model=MessageResponse)
async def delete_faculty(
    faculty_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_program_leader),
):
    return await service.delete_faculty(db, current_user, faculty_id)
