from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.auth.rbac import require_roles
from academic_reporting.auth.schemas import CurrentUser
from academic_reporting.core.enums import UserRole
from academic_reporting.db.session import get_db

from .schemas import (
    ClassEnrolled,
    ClassEnrollRequest,
    ClassOption,
    CourseEnrolled,
    CourseEnrollRequest,
    CourseOption,
    EnrolledClass,
)
from . import service

router = APIRouter(prefix="/student", tags=["enrollments"])

_student = require_roles(UserRole.STUDENT)


@router.get("/enrolled-class", response_model=EnrolledClass)
async def get_enrolled_class(db: AsyncSession = Depends(get_db), current_user: CurrentUser = Depends(_student)):
    return await service.get_enrolled_class(db, current_user)


@router.get("/enrolled-courses", response_model=List[CourseOption])
async def list_enrolled_courses(db: AsyncSession = Depends(get_db), current_user: CurrentUser = Depends(_student)):
    return await service.list_enrolled_courses(db, current_user)


@router.get("/classes", response_model=List[ClassOption])
async def list_faculty_classes(
    faculty_name: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_student),
):
    return await service.list_faculty_classes(db, current_user, faculty_name)


@router.get("/courses", response_model=List[CourseOption])
async def list_class_courses(
    class_name: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_student),
):
    return await service.list_class_courses(db, current_user, class_name)


@router.post("/enroll-class", response_model=ClassEnrolled, status_code=status.HTTP_201_CREATED)
async def enroll_in_class(
    payload: ClassEnrollRequest,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_student),
):
    return await service.enroll_in_class(db, current_user, payload)


@router.post("/enroll", response_model=CourseEnrolled, status_code=status.HTTP_201_CREATED)
async def enroll_in_course(
    payload: CourseEnrollRequest,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_student),
):
    return await service.enroll_in_course(db, current_user, payload)
