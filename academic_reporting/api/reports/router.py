from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.auth.rbac import require_roles
from academic_reporting.auth.schemas import CurrentUser
from academic_reporting.core.enums import UserRole
from academic_reporting.core.schemas import MessageResponse
from academic_reporting.db.session import get_db

from .schemas import (
    ClassReportItem,
    LecturerReportCreate,
    PRLReportCreate,
    ReportCreated,
    ReportResponse,
    StudentReportItem,
)
from . import service

router = APIRouter(tags=["reports"])

_prl = require_roles(UserRole.PRINCIPAL_LECTURER)
_lecturer = require_roles(UserRole.LECTURER)
_student = require_roles(UserRole.STUDENT)


@router.get("/prl/reports", response_model=List[ReportResponse], dependencies=[Depends(_prl)])
async def list_prl_reports(db: AsyncSession = Depends(get_db)):
    return await service.list_all_reports(db)


@router.post("/prl/reports", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def create_prl_report(
    payload: PRLReportCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_prl),
):
    return await service.create_prl_report(db, current_user, payload)


@router.delete("/prl/reports/{report_id}", response_model=MessageResponse)
async def delete_prl_report(
    report_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_prl),
):
    return await service.delete_prl_report(db, current_user, report_id)


@router.get("/lecturer/reports", response_model=List[ReportResponse])
async def list_lecturer_reports(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_lecturer),
):
    return await service.list_lecturer_reports(db, current_user)


@router.post("/lecturer/reports", response_model=ReportCreated, status_code=status.HTTP_201_CREATED)
async def create_lecturer_report(
    payload: LecturerReportCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_lecturer),
):
    return await service.create_lecturer_report(db, current_user, payload)


@router.get("/lecturer/class-reports", response_model=List[ClassReportItem])
async def list_class_reports(
    class_id: Optional[int] = Query(None),
    course_id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_lecturer),
):
    return await service.list_class_reports(db, current_user, class_id=class_id, course_id=course_id)


@router.get("/student/reports", response_model=List[StudentReportItem])
async def list_student_reports(
    course_id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_student),
):
    return await service.list_student_reports(db, current_user, course_id)
