from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.auth.rbac import require_roles
from academic_reporting.auth.schemas import CurrentUser
from academic_reporting.core.enums import UserRole
from academic_reporting.core.schemas import MessageResponse
from academic_reporting.db.session import get_db

from .schemas import (
    AttendanceRecord,
    AttendanceSubmission,
    ClassStudent,
    CourseProgress,
    StudentAttendanceDetail,
)
from . import service

router = APIRouter(tags=["attendance"])

_lecturer = require_roles(UserRole.LECTURER)
_student = require_roles(UserRole.STUDENT)


@router.get("/lecturer/class-students", response_model=List[ClassStudent])
async def list_class_students(
    class_id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_lecturer),
):
    return await service.list_class_students(db, current_user, class_id)


@router.get("/lecturer/attendance", response_model=List[AttendanceRecord])
async def get_report_attendance(
    report_id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_lecturer),
):
    return await service.get_report_attendance(db, current_user, report_id)


@router.post("/lecturer/submit-attendance", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def submit_attendance(
    payload: AttendanceSubmission,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_lecturer),
):
    return await service.submit_attendance(db, current_user, payload)


@router.get("/student/attendance-details", response_model=List[StudentAttendanceDetail])
async def list_attendance_details(
    course_id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(_student),
):
    return await service.list_attendance_details(db, current_user, course_id)


@router.get("/student/course-progress", response_model=List[CourseProgress])
async def list_course_progress(db: AsyncSession = Depends(get_db), current_user: CurrentUser = Depends(_student)):
    return await service.list_course_progress(db, current_user)
