from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.auth.rbac import require_roles
from academic_reporting.auth.schemas import CurrentUser
from academic_reporting.core.enums import UserRole
from academic_reporting.db.session import get_db

from .schemas import ClassCreate, ClassResponse
from . import service

router = APIRouter(prefix="/classes", tags=["classes"])

_class_admins = require_roles(UserRole.PROGRAM_LEADER, UserRole.PRINCIPAL_LECTURER)


@router.get("", response_model=List[ClassResponse], dependencies=[Depends(_class_admins)])
async def list_classes(db: AsyncSession = Depends(get_db)):
    return await service.list_classes(db)


@router.post("", response_model=ClassResponse, status_code=status.HTTP_201_CREATED)
async def create_class(
    payload: ClassCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_class_admins),
):
    return await service.create_class(db, current_user, payload)
