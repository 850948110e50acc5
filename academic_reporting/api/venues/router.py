from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.auth.dependencies import get_current_user
from academic_reporting.auth.rbac import require_roles
from academic_reporting.auth.schemas import CurrentUser
from academic_reporting.core.enums import UserRole
from academic_reporting.db.session import get_db

from .schemas import VenueCreate, VenueResponse
from . import service

router = APIRouter(prefix="/venues", tags=["venues"])


@router.get("", response_model=List[VenueResponse], dependencies=[Depends(get_current_user)])
async def list_venues(db: AsyncSession = Depends(get_db)):
    return await service.list_venues(db)


@router.post("", response_model=VenueResponse, status_code=status.HTTP_201_CREATED)
async def create_venue(
    payload: VenueCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(UserRole.PROGRAM_LEADER, UserRole.PRINCIPAL_LECTURER)),
):
    return await service.create_venue(db, current_user, payload)
