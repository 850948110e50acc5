import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.core.enums import UserRole
from academic_reporting.core.models import AuditLog, ClassCourse


@pytest.mark.asyncio
async def test_prl_without_faculty_cannot_assign(client: AsyncClient, seed) -> None:
    leader = await seed.user(UserRole.PROGRAM_LEADER)
    prl = await seed.user(UserRole.PRINCIPAL_LECTURER)

    created = await client.post("/faculties", json={"name": "Science"}, headers=seed.headers(leader))
    assert created.status_code == 201

    # Class and course ids do not exist: the faculty check comes first.
    response = await client.post(
        "/class-courses", json={"class_id": 999, "course_id": 999}, headers=seed.headers(prl)
    )
    assert response.status_code == 400
    assert response.json() == {"error": "No faculty assigned to this PRL"}


@pytest.mark.asyncio
async def test_assign_then_repeat_is_conflict(client: AsyncClient, seed, db_session: AsyncSession) -> None:
    prl = await seed.user(UserRole.PRINCIPAL_LECTURER)
    science = await seed.faculty("Science")
    await seed.prl_faculty(prl, science)
    cl = await seed.school_class("BSc-Y1")
    physics = await seed.course("Physics101", science)
    payload = {"class_id": cl.id, "course_id": physics.id}

    first = await client.post("/class-courses", json=payload, headers=seed.headers(prl))
    assert first.status_code == 201
    assert first.json() == {
        "class_id": cl.id,
        "course_id": physics.id,
        "message": "Course assigned to class successfully",
    }

    second = await client.post("/class-courses", json=payload, headers=seed.headers(prl))
    assert second.status_code == 400
    assert second.json() == {"error": "Class is already assigned to this course"}

    count = await db_session.scalar(
        select(func.count()).select_from(ClassCourse).where(ClassCourse.class_id == cl.id)
    )
    assert count == 1

    failures = (
        await db_session.execute(select(AuditLog.details).where(AuditLog.action == "Assign Class Course Failed"))
    ).scalars().all()
    assert failures == [f"Assignment already exists: {cl.id}, {physics.id}"]


@pytest.mark.asyncio
async def test_course_outside_prl_faculty_is_not_found(client: AsyncClient, seed) -> None:
    prl = await seed.user(UserRole.PRINCIPAL_LECTURER)
    science = await seed.faculty("Science")
    arts = await seed.faculty("Arts")
    await seed.prl_faculty(prl, science)
    cl = await seed.school_class("BSc-Y1")
    painting = await seed.course("Painting", arts)

    response = await client.post(
        "/class-courses", json={"class_id": cl.id, "course_id": painting.id}, headers=seed.headers(prl)
    )
    assert response.status_code == 404
    assert response.json() == {"error": "Course not found or not in your faculty"}


@pytest.mark.asyncio
async def test_missing_class_is_not_found(client: AsyncClient, seed) -> None:
    prl = await seed.user(UserRole.PRINCIPAL_LECTURER)
    science = await seed.faculty("Science")
    await seed.prl_faculty(prl, science)
    physics = await seed.course("Physics101", science)

    response = await client.post(
        "/class-courses", json={"class_id": 4242, "course_id": physics.id}, headers=seed.headers(prl)
    )
    assert response.status_code == 404
    assert response.json() == {"error": "Class not found"}


@pytest.mark.asyncio
async def test_missing_ids(client: AsyncClient, seed) -> None:
    prl = await seed.user(UserRole.PRINCIPAL_LECTURER)

    response = await client.post("/class-courses", json={"class_id": 1}, headers=seed.headers(prl))
    assert response.status_code == 400
    assert response.json() == {"error": "Class ID and Course ID are required"}


@pytest.mark.asyncio
async def test_unassign(client: AsyncClient, seed, db_session: AsyncSession) -> None:
    prl = await seed.user(UserRole.PRINCIPAL_LECTURER)
    science = await seed.faculty("Science")
    await seed.prl_faculty(prl, science)
    cl = await seed.school_class("BSc-Y1")
    physics = await seed.course("Physics101", science)
    await seed.class_course(cl, physics)
    payload = {"class_id": cl.id, "course_id": physics.id}

    response = await client.request("DELETE", "/class-courses", json=payload, headers=seed.headers(prl))
    assert response.status_code == 200
    assert response.json() == {"message": "Course unassigned from class successfully"}

    again = await client.request("DELETE", "/class-courses", json=payload, headers=seed.headers(prl))
    assert again.status_code == 404
    assert again.json() == {"error": "Assignment not found"}
