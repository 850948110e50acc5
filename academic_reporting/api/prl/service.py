"""
PRL scope: the single faculty a PRL oversees and the lecturers, classes and
courses visible through it.
"""

from typing import List

from sqlalchemy import exists, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.api.classes.service import courses_by_class
from academic_reporting.api.faculties.schemas import FacultyResponse
from academic_reporting.auth.models import User
from academic_reporting.auth.schemas import CurrentUser
from academic_reporting.core import relationships, resolvers
from academic_reporting.core.audit import audit_trail, log_action
from academic_reporting.core.exceptions import InvalidInputError, InvalidRelationshipError
from academic_reporting.core.models import (
    ClassCourse,
    Course,
    Faculty,
    LecturerCourse,
    LecturerPRL,
    PrincipalLecturerFaculty,
    SchoolClass,
)

from .schemas import FacultyClass, FacultyCourse, FacultySelectRequest, FacultySelected, StreamLecturer


async def list_my_faculties(db: AsyncSession, current_user: CurrentUser) -> List[FacultyResponse]:
    async with audit_trail(db, current_user.id, "Fetch PRL Faculties", "Failed to fetch faculties"):
        faculty_id = await relationships.prl_faculty(db, current_user.id)
        faculty = await resolvers.get_faculty(db, faculty_id)
    return [FacultyResponse.model_validate(faculty)]


async def get_current_faculty(db: AsyncSession, current_user: CurrentUser) -> FacultyResponse:
    return (await list_my_faculties(db, current_user))[0]


async def select_faculty(
    db: AsyncSession, current_user: CurrentUser, payload: FacultySelectRequest
) -> FacultySelected:
    async with audit_trail(db, current_user.id, "Select Faculty", "Failed to select faculty"):
        if not payload.faculty_id:
            raise InvalidInputError("Faculty ID is required", audit_details="Missing faculty_id")
        faculty = await resolvers.get_faculty(
            db,
            payload.faculty_id,
            error=InvalidInputError("Invalid faculty ID", audit_details=f"Invalid faculty ID: {payload.faculty_id}"),
        )
        current = await relationships.find_prl_faculty_id(db, current_user.id)
        already = InvalidRelationshipError(
            "You are already assigned to a faculty",
            audit_details=f"PRL already assigned to faculty {current}",
        )
        if current is not None:
            raise already
        db.add(PrincipalLecturerFaculty(prl_id=current_user.id, faculty_id=faculty.id))
        response = FacultySelected(
            message="Faculty selected successfully",
            faculty=FacultyResponse(id=faculty.id, name=faculty.name),
        )
        try:
            await db.commit()
        except IntegrityError:
            raise already

    await log_action(
        db, current_user.id, "Select Faculty", f"PRL {current_user.id} assigned to faculty {response.faculty.id}"
    )
    return response


async def list_stream_lecturers(db: AsyncSession, current_user: CurrentUser) -> List[StreamLecturer]:
    """Lecturers who selected this PRL and teach at least one course in the PRL's faculty."""
    async with audit_trail(db, current_user.id, "Fetch Lecturers", "Failed to fetch lecturers"):
        faculty_id = await relationships.prl_faculty(db, current_user.id)
    result = await db.execute(
        select(
            User.id,
            User.full_name,
            User.email,
            Course.name.label("course_name"),
            Faculty.name.label("faculty_name"),
        )
        .distinct()
        .join(LecturerPRL, LecturerPRL.lecturer_id == User.id)
        .join(LecturerCourse, LecturerCourse.lecturer_id == User.id)
        .join(Course, Course.id == LecturerCourse.course_id)
        .join(Faculty, Faculty.id == Course.faculty_id)
        .where(LecturerPRL.prl_id == current_user.id, Faculty.id == faculty_id)
        .order_by(User.id, Course.name)
    )
    return [StreamLecturer(**row) for row in result.mappings().all()]


async def list_faculty_classes(db: AsyncSession, current_user: CurrentUser) -> List[FacultyClass]:
    """Classes with a course in the PRL's faculty, plus classes with no courses yet."""
    async with audit_trail(db, current_user.id, "Fetch Classes", "Failed to fetch classes"):
        faculty_id = await relationships.prl_faculty(db, current_user.id)
    in_faculty = (
        select(ClassCourse.class_id)
        .join(Course, Course.id == ClassCourse.course_id)
        .where(Course.faculty_id == faculty_id)
    )
    has_courses = exists().where(ClassCourse.class_id == SchoolClass.id)
    result = await db.execute(
        select(SchoolClass)
        .where(or_(SchoolClass.id.in_(in_faculty), ~has_courses))
        .order_by(SchoolClass.id)
    )
    classes = result.scalars().all()
    courses = await courses_by_class(db, [c.id for c in classes], faculty_id=faculty_id)
    return [
        FacultyClass(
            id=c.id,
            class_name=c.name,
            course_ids=[x[0] for x in courses.get(c.id, [])],
            course_names=[x[1] for x in courses.get(c.id, [])],
        )
        for c in classes
    ]


async def list_faculty_courses(db: AsyncSession, current_user: CurrentUser) -> List[FacultyCourse]:
    async with audit_trail(db, current_user.id, "Fetch Courses", "Failed to fetch courses"):
        faculty_id = await relationships.prl_faculty(db, current_user.id)
    result = await db.execute(
        select(Course.id, Course.name, Course.total_registered_students)
        .where(Course.faculty_id == faculty_id)
        .order_by(Course.id)
    )
    return [
        FacultyCourse(id=row.id, name=row.name, total_registered_students=row.total_registered_students or 0)
        for row in result.all()
    ]
