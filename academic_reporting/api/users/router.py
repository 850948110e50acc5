from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.auth.rbac import require_roles
from academic_reporting.auth.schemas import CurrentUser
from academic_reporting.core.enums import UserRole
from academic_reporting.core.schemas import MessageResponse
from academic_reporting.db.session import get_db

from .schemas import UserCreate, UserResponse, UserUpdate
from . import service

router = APIRouter(tags=["users"])

_program_leader = require_roles(UserRole.PROGRAM_LEADER)


@router.get("/users", response_model=List[UserResponse])
async def list_users(
    request: Request,
    role: Optional[str] = Query(None),
    faculty_id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(UserRole.PROGRAM_LEADER, UserRole.PRINCIPAL_LECTURER)),
):
    return await service.list_users(db, current_user, request.url.path, role=role, faculty_id=faculty_id)


@router.get("/admin/users", response_model=List[UserResponse], dependencies=[Depends(_program_leader)])
async def list_all_users(db: AsyncSession = Depends(get_db)):
    return await service.list_all_users(db)


@router.post("/admin/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_program_leader),
):
    return await service.create_user(db, current_user, payload)


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_program_leader),
):
    return await service.get_user(db, current_user, user_id)


@router.put("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    payload: UserUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_program_leader),
):
    return await service.update_user(db, current_user, user_id, payload)


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_program_leader),
):
    return await service.delete_user(db, current_user, user_id)
