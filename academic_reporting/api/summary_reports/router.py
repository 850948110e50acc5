from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.auth.rbac import require_roles
from academic_reporting.auth.schemas import CurrentUser
from academic_reporting.core.enums import UserRole
from academic_reporting.core.schemas import MessageResponse
from academic_reporting.db.session import get_db

from .schemas import SummaryReportCreate, SummaryReportResponse
from . import service

router = APIRouter(tags=["summary-reports"])

_program_leader = require_roles(UserRole.PROGRAM_LEADER)


@router.get("/pl/reports", response_model=List[SummaryReportResponse], dependencies=[Depends(_program_leader)])
async def list_summary_reports(db: AsyncSession = Depends(get_db)):
    return await service.list_reports(db)


@router.post("/pl/reports", response_model=SummaryReportResponse, status_code=status.HTTP_201_CREATED)
async def generate_summary_report(
    payload: SummaryReportCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_program_leader),
):
    return await service.generate_report(db, current_user, payload)


@router.delete("/admin/reports/{report_id}", response_model=MessageResponse)
async def delete_summary_report(
    report_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_program_leader),
):
    return await service.delete_report(db, current_user, report_id)
