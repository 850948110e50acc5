from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.auth.rbac import require_roles
from academic_reporting.auth.schemas import CurrentUser
from academic_reporting.core.enums import UserRole
from academic_reporting.core.schemas import MessageResponse
from academic_reporting.db.session import get_db

from .schemas import (
    FacultyRatingItem,
    LecturerRatingItem,
    PRLRatingRequest,
    StreamRatingItem,
    StudentRatingRequest,
)
from . import service

router = APIRouter(tags=["ratings"])

_student = require_roles(UserRole.STUDENT)
_lecturer = require_roles(UserRole.LECTURER)
_prl = require_roles(UserRole.PRINCIPAL_LECTURER)


@router.post("/student/rate", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def rate_lecturer(
    payload: StudentRatingRequest,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_student),
):
    return await service.rate_lecturer(db, current_user, payload)


@router.get("/lecturer/ratings", response_model=List[LecturerRatingItem])
async def list_lecturer_ratings(db: AsyncSession = Depends(get_db), current_user: CurrentUser = Depends(_lecturer)):
    return await service.list_lecturer_ratings(db, current_user)


@router.get("/prl/ratings", response_model=List[FacultyRatingItem])
async def list_faculty_ratings(db: AsyncSession = Depends(get_db), current_user: CurrentUser = Depends(_prl)):
    return await service.list_faculty_ratings(db, current_user)


@router.get("/prl/lecturer-ratings", response_model=List[StreamRatingItem])
async def list_stream_ratings(db: AsyncSession = Depends(get_db), current_user: CurrentUser = Depends(_prl)):
    return await service.list_stream_ratings(db, current_user)


@router.post("/prl/submit-rating", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def submit_prl_rating(
    payload: PRLRatingRequest,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_prl),
):
    return await service.submit_prl_rating(db, current_user, payload)
