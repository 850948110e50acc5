"""
Ratings. Students rate a lecturer once per course; a PRL keeps one rating per
lecturer in their stream and re-rating overwrites it.
"""

from datetime import datetime, timezone
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from academic_reporting.auth.models import User
from academic_reporting.auth.schemas import CurrentUser
from academic_reporting.core import relationships, resolvers
from academic_reporting.core.audit import audit_trail, log_action
from academic_reporting.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    InvalidRelationshipError,
)
from academic_reporting.core.models import (
    Course,
    LecturerCourse,
    LecturerPRL,
    LecturerPRLRating,
    Rating,
    SchoolClass,
)
from academic_reporting.core.schemas import MessageResponse

from .schemas import (
    FacultyRatingItem,
    LecturerRatingItem,
    PRLRatingRequest,
    StreamRatingItem,
    StudentRatingRequest,
)

Student = aliased(User, name="student")
Lecturer = aliased(User, name="lecturer")


def _rating_query():
    return (
        select(
            Rating.id,
            Rating.rating.label("rating_value"),
            Rating.created_at.label("rating_date"),
            Rating.comments,
            Course.name.label("course_name"),
            SchoolClass.name.label("class_name"),
            Student.full_name.label("student_name"),
        )
        .join(Course, Course.id == Rating.course_id)
        .join(SchoolClass, SchoolClass.id == Rating.class_id)
        .outerjoin(Student, Student.id == Rating.student_id)
        .order_by(Rating.created_at.desc(), Rating.id.desc())
    )


async def rate_lecturer(db: AsyncSession, current_user: CurrentUser, payload: StudentRatingRequest) -> MessageResponse:
    async with audit_trail(db, current_user.id, "Rate", "Failed to submit rating"):
        if not payload.course_name or not payload.lecturer_name or payload.rating is None:
            raise InvalidInputError(
                "Course name, Lecturer name, and rating are required",
                audit_details="Missing course_name, lecturer_name, or rating",
            )
        if not 1 <= payload.rating <= 5:
            raise InvalidInputError(
                "Rating must be an integer between 1 and 5", audit_details=f"Invalid rating: {payload.rating}"
            )
        course = await resolvers.get_course_by_name(db, payload.course_name)
        lecturer = await resolvers.get_lecturer_by_name(db, payload.lecturer_name)
        if not await relationships.check_enrollment(db, current_user.id, course.id):
            raise ForbiddenError(
                "You are not enrolled in this course", audit_details=f"Not enrolled in course: {course.name}"
            )
        class_id = await relationships.find_student_class_id(db, current_user.id)
        if class_id is None:
            raise ForbiddenError(
                "You must be enrolled in a class to submit ratings", audit_details="Student not enrolled in any class"
            )
        if not await relationships.check_lecturer_class(db, lecturer.id, class_id):
            raise InvalidRelationshipError(
                "Lecturer is not assigned to this class",
                audit_details=f"Lecturer {lecturer.full_name} not assigned to class",
            )
        duplicate = ConflictError(
            "You have already rated this lecturer for this course",
            audit_details=f"Already rated lecturer {lecturer.full_name} for course {course.name}",
        )
        existing = await db.execute(
            select(Rating.id).where(
                Rating.student_id == current_user.id,
                Rating.lecturer_id == lecturer.id,
                Rating.course_id == course.id,
            )
        )
        if existing.scalar_one_or_none() is not None:
            raise duplicate
        details = (
            f"Student {current_user.id} rated lecturer {lecturer.full_name} "
            f"for course {course.name} with {payload.rating} stars"
        )
        db.add(
            Rating(
                student_id=current_user.id,
                lecturer_id=lecturer.id,
                course_id=course.id,
                class_id=class_id,
                rating=payload.rating,
                comments=payload.comments or None,
            )
        )
        try:
            await db.commit()
        except IntegrityError:
            raise duplicate

    await log_action(db, current_user.id, "Rate", details)
    return MessageResponse(message="Rating submitted successfully")


async def list_lecturer_ratings(db: AsyncSession, current_user: CurrentUser) -> List[LecturerRatingItem]:
    result = await db.execute(_rating_query().where(Rating.lecturer_id == current_user.id))
    return [LecturerRatingItem(**row) for row in result.mappings().all()]


async def list_faculty_ratings(db: AsyncSession, current_user: CurrentUser) -> List[FacultyRatingItem]:
    """Student ratings for every course in the PRL's faculty."""
    async with audit_trail(db, current_user.id, "Fetch PRL Ratings", "Failed to fetch ratings"):
        faculty_id = await relationships.prl_faculty(db, current_user.id)
    stmt = (
        _rating_query()
        .add_columns(Lecturer.full_name.label("lecturer_name"))
        .join(Lecturer, Lecturer.id == Rating.lecturer_id)
        .where(Course.faculty_id == faculty_id)
    )
    result = await db.execute(stmt)
    return [FacultyRatingItem(**row) for row in result.mappings().all()]


async def list_stream_ratings(db: AsyncSession, current_user: CurrentUser) -> List[StreamRatingItem]:
    """The PRL's own ratings of lecturers still in their stream."""
    async with audit_trail(db, current_user.id, "Fetch Ratings", "Failed to fetch ratings"):
        faculty_id = await relationships.prl_faculty(db, current_user.id)
    stream = (
        select(LecturerPRL.lecturer_id)
        .join(LecturerCourse, LecturerCourse.lecturer_id == LecturerPRL.lecturer_id)
        .join(Course, Course.id == LecturerCourse.course_id)
        .where(LecturerPRL.prl_id == current_user.id, Course.faculty_id == faculty_id)
    )
    result = await db.execute(
        select(
            LecturerPRLRating.lecturer_id,
            User.full_name.label("lecturer_name"),
            LecturerPRLRating.rating,
            LecturerPRLRating.comments,
            LecturerPRLRating.created_at,
        )
        .join(User, User.id == LecturerPRLRating.lecturer_id)
        .where(LecturerPRLRating.prl_id == current_user.id, LecturerPRLRating.lecturer_id.in_(stream))
        .order_by(LecturerPRLRating.lecturer_id)
    )
    return [StreamRatingItem(**row) for row in result.mappings().all()]


async def submit_prl_rating(db: AsyncSession, current_user: CurrentUser, payload: PRLRatingRequest) -> MessageResponse:
    async with audit_trail(db, current_user.id, "Submit Rating", "Failed to submit rating"):
        if not payload.lecturer_id or payload.rating is None:
            raise InvalidInputError(
                "Lecturer ID and rating are required", audit_details="Missing lecturer_id or rating"
            )
        if not 1 <= payload.rating <= 5:
            raise InvalidInputError("Rating must be between 1 and 5", audit_details=f"Invalid rating: {payload.rating}")
        faculty_id = await relationships.prl_faculty(db, current_user.id)
        lecturer_id = payload.lecturer_id
        if not await relationships.check_lecturer_in_prl_stream(db, lecturer_id, current_user.id, faculty_id):
            raise InvalidRelationshipError(
                "Lecturer not assigned to your stream",
                audit_details=f"Lecturer {lecturer_id} not in PRL's stream",
            )
        result = await db.execute(
            select(LecturerPRLRating).where(
                LecturerPRLRating.lecturer_id == lecturer_id,
                LecturerPRLRating.prl_id == current_user.id,
            )
        )
        rating = result.scalar_one_or_none()
        if rating is None:
            db.add(
                LecturerPRLRating(
                    lecturer_id=lecturer_id,
                    prl_id=current_user.id,
                    rating=payload.rating,
                    comments=payload.comments or None,
                )
            )
        else:
            rating.rating = payload.rating
            rating.comments = payload.comments or None
            rating.created_at = datetime.now(timezone.utc)
        try:
            await db.commit()
        except IntegrityError:
            raise ConflictError(
                "Rating was submitted concurrently, please retry",
                audit_details=f"Concurrent rating of lecturer {lecturer_id}",
            )

    await log_action(
        db, current_user.id, "Submit Rating", f"PRL {current_user.id} rated lecturer {lecturer_id} with {payload.rating}"
    )
    return MessageResponse(message="Rating submitted successfully")
