"""
Student enrollment: a student first joins one class (chosen through a faculty),
then enrolls in courses offered to that class.
"""

from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.auth.schemas import CurrentUser
from academic_reporting.core import relationships, resolvers
from academic_reporting.core.audit import audit_trail, log_action
from academic_reporting.core.exceptions import (
    ConflictError,
    InvalidInputError,
    InvalidRelationshipError,
    NotFoundError,
)
from academic_reporting.core.models import ClassCourse, Course, Enrollment, Faculty, SchoolClass, StudentClass

from .schemas import (
    ClassEnrolled,
    ClassEnrollRequest,
    ClassOption,
    CourseEnrolled,
    CourseEnrollRequest,
    CourseOption,
    EnrolledClass,
)


async def get_enrolled_class(db: AsyncSession, current_user: CurrentUser) -> EnrolledClass:
    result = await db.execute(
        select(
            StudentClass.class_id,
            SchoolClass.name.label("class_name"),
            Faculty.name.label("faculty_name"),
        )
        .join(SchoolClass, SchoolClass.id == StudentClass.class_id)
        .outerjoin(Faculty, Faculty.id == StudentClass.faculty_id)
        .where(StudentClass.student_id == current_user.id)
    )
    row = result.mappings().one_or_none()
    if row is None:
        raise NotFoundError("You are not enrolled in any class")
    return EnrolledClass(**row)


async def list_faculty_classes(
    db: AsyncSession, current_user: CurrentUser, faculty_name: Optional[str]
) -> List[ClassOption]:
    """Classes taking at least one course of the named faculty."""
    async with audit_trail(db, current_user.id, "Fetch Classes", "Failed to fetch classes"):
        if not faculty_name:
            raise InvalidInputError("Faculty name is required", audit_details="Missing faculty_name")
        faculty = await resolvers.get_faculty_by_name(db, faculty_name)
    in_faculty = (
        select(ClassCourse.class_id)
        .join(Course, Course.id == ClassCourse.course_id)
        .where(Course.faculty_id == faculty.id)
    )
    result = await db.execute(select(SchoolClass).where(SchoolClass.id.in_(in_faculty)).order_by(SchoolClass.name))
    return [ClassOption.model_validate(c) for c in result.scalars().all()]


async def list_class_courses(
    db: AsyncSession, current_user: CurrentUser, class_name: Optional[str]
) -> List[CourseOption]:
    async with audit_trail(db, current_user.id, "Fetch Courses", "Failed to fetch courses"):
        if not class_name:
            raise InvalidInputError("Class name is required", audit_details="Missing class_name")
        cl = await resolvers.get_class_by_name(db, class_name)
    result = await db.execute(
        select(Course)
        .join(ClassCourse, ClassCourse.course_id == Course.id)
        .where(ClassCourse.class_id == cl.id)
        .order_by(Course.name)
    )
    return [CourseOption.model_validate(c) for c in result.scalars().all()]


async def list_enrolled_courses(db: AsyncSession, current_user: CurrentUser) -> List[CourseOption]:
    result = await db.execute(
        select(Course)
        .join(Enrollment, Enrollment.course_id == Course.id)
        .where(Enrollment.student_id == current_user.id)
        .order_by(Course.name)
    )
    return [CourseOption.model_validate(c) for c in result.scalars().all()]


async def enroll_in_class(db: AsyncSession, current_user: CurrentUser, payload: ClassEnrollRequest) -> ClassEnrolled:
    async with audit_trail(db, current_user.id, "Enroll Class", "Failed to enroll in class"):
        if not payload.faculty_name or not payload.class_name:
            raise InvalidInputError(
                "Faculty name and class name are required", audit_details="Missing faculty_name or class_name"
            )
        faculty = await resolvers.get_faculty_by_name(db, payload.faculty_name)
        cl = await resolvers.get_class_by_name(db, payload.class_name)
        if not await relationships.check_class_in_faculty(db, cl.id, faculty.id):
            raise InvalidRelationshipError(
                "Class is not associated with the selected faculty",
                audit_details=f"Class {cl.name} has no course in faculty {faculty.name}",
            )
        current_class = await relationships.find_student_class_id(db, current_user.id)
        already = ConflictError(
            "You are already enrolled in a class",
            audit_details=f"Student already in class {current_class}",
        )
        if current_class is not None:
            raise already
        response = ClassEnrolled(
            message="Enrolled in class successfully",
            class_id=cl.id,
            class_name=cl.name,
            faculty_name=faculty.name,
        )
        db.add(StudentClass(student_id=current_user.id, class_id=cl.id, faculty_id=faculty.id))
        try:
            await db.commit()
        except IntegrityError:
            raise already

    await log_action(
        db, current_user.id, "Enroll Class", f"Student {current_user.id} enrolled in class {response.class_name}"
    )
    return response


async def enroll_in_course(
    db: AsyncSession, current_user: CurrentUser, payload: CourseEnrollRequest
) -> CourseEnrolled:
    """Enroll in a course offered to the student's class and bump the course's registration counter."""
    async with audit_trail(db, current_user.id, "Enroll Course", "Failed to enroll in course"):
        if not payload.course_name:
            raise InvalidInputError("Course name is required", audit_details="Missing course_name")
        course = await resolvers.get_course_by_name(db, payload.course_name)
        class_id = await relationships.find_student_class_id(db, current_user.id)
        if class_id is None:
            raise InvalidRelationshipError(
                "You must be enrolled in a class first", audit_details="Student not enrolled in any class"
            )
        if not await relationships.check_class_course(db, class_id, course.id):
            raise InvalidRelationshipError(
                "Course is not offered to your class",
                audit_details=f"Course {course.name} not assigned to class {class_id}",
            )
        duplicate = ConflictError(
            "You are already enrolled in this course",
            audit_details=f"Already enrolled in course: {course.name}",
        )
        if await relationships.check_enrollment(db, current_user.id, course.id):
            raise duplicate
        db.add(Enrollment(student_id=current_user.id, course_id=course.id))
        await db.execute(
            update(Course)
            .where(Course.id == course.id)
            .values(total_registered_students=Course.total_registered_students + 1)
        )
        total = await db.scalar(select(Course.total_registered_students).where(Course.id == course.id))
        response = CourseEnrolled(
            message="Enrolled in course successfully",
            course_id=course.id,
            course_name=course.name,
            total_registered_students=total,
        )
        try:
            await db.commit()
        except IntegrityError:
            raise duplicate

    await log_action(
        db, current_user.id, "Enroll Course", f"Student {current_user.id} enrolled in course {response.course_name}"
    )
    return response
