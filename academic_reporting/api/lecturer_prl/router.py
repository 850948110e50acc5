from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.auth.rbac import require_roles
from academic_reporting.auth.schemas import CurrentUser
from academic_reporting.core.enums import UserRole
from academic_reporting.db.session import get_db

from .schemas import PRLSelectRequest, PRLSelected, PRLSummary
from . import service

router = APIRouter(prefix="/lecturer", tags=["lecturer-prl"])

_lecturer = require_roles(UserRole.LECTURER)


@router.get("/available-prls", response_model=List[PRLSummary])
async def list_available_prls(db: AsyncSession = Depends(get_db), current_user: CurrentUser = Depends(_lecturer)):
    return await service.list_available_prls(db, current_user)


@router.get("/current-prl", response_model=PRLSummary)
async def get_current_prl(db: AsyncSession = Depends(get_db), current_user: CurrentUser = Depends(_lecturer)):
    return await service.get_current_prl(db, current_user)


@router.post("/select-prl", response_model=PRLSelected, status_code=status.HTTP_201_CREATED)
async def select_prl(
    payload: PRLSelectRequest,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_lecturer),
):
    return await service.select_prl(db, current_user, payload)
