"""
Relationship checks used by the validation chains. Predicates return bool and
never raise; callers decide which error a missing edge maps to.
"""

from typing import Optional

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.core.exceptions import NoFacultyAssignedError
from academic_reporting.core.models import (
    ClassCourse,
    Course,
    Enrollment,
    LecturerClass,
    LecturerCourse,
    LecturerPRL,
    PrincipalLecturerFaculty,
    StudentClass,
)


async def _exists(db: AsyncSession, *criteria) -> bool:
    result = await db.execute(select(exists().where(*criteria)))
    return bool(result.scalar())


async def find_prl_faculty_id(db: AsyncSession, prl_id: int) -> Optional[int]:
    result = await db.execute(
        select(PrincipalLecturerFaculty.faculty_id).where(PrincipalLecturerFaculty.prl_id == prl_id)
    )
    return result.scalar_one_or_none()


async def prl_faculty(db: AsyncSession, prl_id: int) -> int:
    """Faculty id of the PRL; raises NoFacultyAssignedError if none."""
    faculty_id = await find_prl_faculty_id(db, prl_id)
    if faculty_id is None:
        raise NoFacultyAssignedError(audit_details=f"PRL ID: {prl_id}")
    return faculty_id


async def check_class_course(db: AsyncSession, class_id: int, course_id: int) -> bool:
    return await _exists(db, ClassCourse.class_id == class_id, ClassCourse.course_id == course_id)


async def check_lecturer_class(db: AsyncSession, lecturer_id: int, class_id: int) -> bool:
    return await _exists(db, LecturerClass.lecturer_id == lecturer_id, LecturerClass.class_id == class_id)


async def check_lecturer_course(db: AsyncSession, lecturer_id: int, course_id: int) -> bool:
    return await _exists(db, LecturerCourse.lecturer_id == lecturer_id, LecturerCourse.course_id == course_id)


async def check_class_in_faculty(db: AsyncSession, class_id: int, faculty_id: int) -> bool:
    """True if at least one course of the class belongs to the faculty."""
    return await _exists(
        db,
        ClassCourse.class_id == class_id,
        ClassCourse.course_id == Course.id,
        Course.faculty_id == faculty_id,
    )


async def find_student_class_id(db: AsyncSession, student_id: int) -> Optional[int]:
    result = await db.execute(select(StudentClass.class_id).where(StudentClass.student_id == student_id))
    return result.scalar_one_or_none()


async def check_student_in_class(db: AsyncSession, student_id: int, class_id: int) -> bool:
    return await _exists(db, StudentClass.student_id == student_id, StudentClass.class_id == class_id)


async def check_enrollment(db: AsyncSession, student_id: int, course_id: int) -> bool:
    return await _exists(db, Enrollment.student_id == student_id, Enrollment.course_id == course_id)


async def check_lecturer_shares_faculty_with_prl(db: AsyncSession, lecturer_id: int, prl_id: int) -> bool:
    """Lecturer teaches at least one course in the PRL's faculty."""
    return await _exists(
        db,
        PrincipalLecturerFaculty.prl_id == prl_id,
        Course.faculty_id == PrincipalLecturerFaculty.faculty_id,
        LecturerCourse.course_id == Course.id,
        LecturerCourse.lecturer_id == lecturer_id,
    )


async def check_lecturer_in_prl_stream(db: AsyncSession, lecturer_id: int, prl_id: int, faculty_id: int) -> bool:
    """Lecturer has selected this PRL and teaches a course in the PRL's faculty."""
    if not await _exists(db, LecturerPRL.lecturer_id == lecturer_id, LecturerPRL.prl_id == prl_id):
        return False
    return await _exists(
        db,
        LecturerCourse.lecturer_id == lecturer_id,
        LecturerCourse.course_id == Course.id,
        Course.faculty_id == faculty_id,
    )
