import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.core.enums import UserRole
from academic_reporting.core.models import Course


async def _catalogue(seed):
    science = await seed.faculty("Science")
    physics = await seed.course("Physics101", science, code="PHY101", total=3)
    maths = await seed.course("Maths101", science)
    bsc = await seed.school_class("BSc-Y1")
    await seed.class_course(bsc, physics)
    other = await seed.school_class("BSc-Y2")
    await seed.class_course(other, maths)
    return science, physics, maths, bsc


@pytest.mark.asyncio
async def test_enroll_in_class_then_course(client: AsyncClient, seed, db_session: AsyncSession) -> None:
    _, physics, _, bsc = await _catalogue(seed)
    student = await seed.user(UserRole.STUDENT)
    headers = seed.headers(student)

    none_yet = await client.get("/student/enrolled-class", headers=headers)
    assert none_yet.status_code == 404

    classes = await client.get("/student/classes", params={"faculty_name": "Science"}, headers=headers)
    assert [c["name"] for c in classes.json()] == ["BSc-Y1", "BSc-Y2"]

    joined = await client.post(
        "/student/enroll-class", json={"faculty_name": "Science", "class_name": "BSc-Y1"}, headers=headers
    )
    assert joined.status_code == 201
    assert joined.json() == {
        "message": "Enrolled in class successfully",
        "class_id": bsc.id,
        "class_name": "BSc-Y1",
        "faculty_name": "Science",
    }

    enrolled_class = await client.get("/student/enrolled-class", headers=headers)
    assert enrolled_class.json() == {"class_id": bsc.id, "class_name": "BSc-Y1", "faculty_name": "Science"}

    offered = await client.get("/student/courses", params={"class_name": "BSc-Y1"}, headers=headers)
    assert [c["name"] for c in offered.json()] == ["Physics101"]

    enrolled = await client.post("/student/enroll", json={"course_name": "Physics101"}, headers=headers)
    assert enrolled.status_code == 201
    assert enrolled.json() == {
        "message": "Enrolled in course successfully",
        "course_id": physics.id,
        "course_name": "Physics101",
        "total_registered_students": 4,
    }
    total = await db_session.scalar(select(Course.total_registered_students).where(Course.id == physics.id))
    assert total == 4

    again = await client.post("/student/enroll", json={"course_name": "Physics101"}, headers=headers)
    assert again.status_code == 400
    assert again.json() == {"error": "You are already enrolled in this course"}
    total = await db_session.scalar(select(Course.total_registered_students).where(Course.id == physics.id))
    assert total == 4

    mine = await client.get("/student/enrolled-courses", headers=headers)
    assert [c["name"] for c in mine.json()] == ["Physics101"]


@pytest.mark.asyncio
async def test_course_must_be_offered_to_class(client: AsyncClient, seed) -> None:
    science, _, _, bsc = await _catalogue(seed)
    student = await seed.user(UserRole.STUDENT)
    headers = seed.headers(student)

    no_class = await client.post("/student/enroll", json={"course_name": "Maths101"}, headers=headers)
    assert no_class.status_code == 400
    assert no_class.json() == {"error": "You must be enrolled in a class first"}

    await seed.student_class(student, bsc, science)
    response = await client.post("/student/enroll", json={"course_name": "Maths101"}, headers=headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Course is not offered to your class"}


@pytest.mark.asyncio
async def test_enroll_class_validation(client: AsyncClient, seed) -> None:
    science, _, _, bsc = await _catalogue(seed)
    await seed.faculty("Arts")
    student = await seed.user(UserRole.STUDENT)
    headers = seed.headers(student)

    missing = await client.post("/student/enroll-class", json={"faculty_name": "Science"}, headers=headers)
    assert missing.status_code == 400
    assert missing.json() == {"error": "Faculty name and class name are required"}

    wrong_faculty = await client.post(
        "/student/enroll-class", json={"faculty_name": "Arts", "class_name": "BSc-Y1"}, headers=headers
    )
    assert wrong_faculty.status_code == 400
    assert wrong_faculty.json() == {"error": "Class is not associated with the selected faculty"}

    unknown = await client.post(
        "/student/enroll-class", json={"faculty_name": "Science", "class_name": "Nope"}, headers=headers
    )
    assert unknown.status_code == 404
    assert unknown.json() == {"error": "Class not found"}

    await seed.student_class(student, bsc, science)
    twice = await client.post(
        "/student/enroll-class", json={"faculty_name": "Science", "class_name": "BSc-Y1"}, headers=headers
    )
    assert twice.status_code == 400
    assert twice.json() == {"error": "You are already enrolled in a class"}
