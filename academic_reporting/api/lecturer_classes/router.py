from typing import List

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.api.classes.schemas import ClassResponse
from academic_reporting.auth.rbac import require_roles
from academic_reporting.auth.schemas import CurrentUser
from academic_reporting.core.enums import UserRole
from academic_reporting.core.schemas import MessageResponse
from academic_reporting.db.session import get_db

from .schemas import LecturerClassRequest, LecturerClassResponse
from . import service

router = APIRouter(tags=["lecturer-classes"])

_prl = require_roles(UserRole.PRINCIPAL_LECTURER)


@router.get("/lecturer-classes", response_model=List[LecturerClassResponse])
async def list_lecturer_classes(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(
        require_roles(UserRole.PROGRAM_LEADER, UserRole.PRINCIPAL_LECTURER, UserRole.LECTURER)
    ),
):
    return await service.list_assignments(db, current_user)


@router.post("/lecturer-classes", response_model=LecturerClassResponse, status_code=status.HTTP_201_CREATED)
async def assign_lecturer_to_class(
    payload: LecturerClassRequest,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_prl),
):
    return await service.assign_lecturer_to_class(db, current_user, payload)


@router.delete("/lecturer-classes", response_model=MessageResponse)
async def unassign_lecturer_from_class(
    payload: LecturerClassRequest = Body(...),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_prl),
):
    return await service.unassign_lecturer_from_class(db, current_user, payload)


@router.get("/lecturer/classes", response_model=List[ClassResponse])
async def list_my_classes(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(UserRole.LECTURER)),
):
    return await service.list_my_classes(db, current_user)
