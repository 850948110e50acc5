from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.api.faculties.schemas import FacultyResponse
from academic_reporting.auth.rbac import require_roles
from academic_reporting.auth.schemas import CurrentUser
from academic_reporting.core.enums import UserRole
from academic_reporting.db.session import get_db

from .schemas import FacultyClass, FacultyCourse, FacultySelectRequest, FacultySelected, StreamLecturer
from . import service

router = APIRouter(prefix="/prl", tags=["prl"])

_prl = require_roles(UserRole.PRINCIPAL_LECTURER)


@router.get("/faculties", response_model=List[FacultyResponse])
async def list_my_faculties(db: AsyncSession = Depends(get_db), current_user: CurrentUser = Depends(_prl)):
    return await service.list_my_faculties(db, current_user)


@router.get("/current-faculty", response_model=FacultyResponse)
async def get_current_faculty(db: AsyncSession = Depends(get_db), current_user: CurrentUser = Depends(_prl)):
    return await service.get_current_faculty(db, current_user)


@router.post("/select-faculty", response_model=FacultySelected, status_code=status.HTTP_201_CREATED)
async def select_faculty(
    payload: FacultySelectRequest,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_prl),
):
    return await service.select_faculty(db, current_user, payload)


@router.get("/lecturers", response_model=List[StreamLecturer])
async def list_lecturers(db: AsyncSession = Depends(get_db), current_user: CurrentUser = Depends(_prl)):
    return await service.list_stream_lecturers(db, current_user)


@router.get("/classes", response_model=List[FacultyClass])
async def list_classes(db: AsyncSession = Depends(get_db), current_user: CurrentUser = Depends(_prl)):
    return await service.list_faculty_classes(db, current_user)


@router.get("/courses", response_model=List[FacultyCourse])
async def list_courses(db: AsyncSession = Depends(get_db), current_user: CurrentUser = Depends(_prl)):
    return await service.list_faculty_courses(db, current_user)
