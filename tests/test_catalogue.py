import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from academic_reporting.core.enums import UserRole
from academic_reporting.core.models import Report, User


@pytest.mark.asyncio
async def test_faculty_crud(client: AsyncClient, seed) -> None:
    leader = await seed.user(UserRole.PROGRAM_LEADER)
    student = await seed.user(UserRole.STUDENT)
    headers = seed.headers(leader)

    created = await client.post("/faculties", json={"name": "Science"}, headers=headers)
    assert created.status_code == 201
    faculty_id = created.json()["id"]

    duplicate = await client.post("/faculties", json={"name": "Science"}, headers=headers)
    assert duplicate.status_code == 400
    assert duplicate.json() == {"error": "Faculty name already exists"}

    too_long = await client.post("/faculties", json={"name": "x" * 101}, headers=headers)
    assert too_long.status_code == 400
    assert too_long.json() == {"error": "Faculty name is required and must be 100 characters or less"}

    # Any authenticated role may read
    listed = await client.get("/faculties", headers=seed.headers(student))
    assert listed.json() == [{"id": faculty_id, "name": "Science"}]

    renamed = await client.put(f"/faculties/{faculty_id}", json={"name": "Sciences"}, headers=headers)
    assert renamed.json() == {"id": faculty_id, "name": "Sciences"}

    missing = await client.get("/faculties/999", headers=headers)
    assert missing.status_code == 404
    assert missing.json() == {"error": "Faculty not found"}

    deleted = await client.delete(f"/faculties/{faculty_id}", headers=headers)
    assert deleted.json() == {"message": "Faculty deleted successfully"}


@pytest.mark.asyncio
async def test_faculty_with_courses_cannot_be_deleted(client: AsyncClient, seed) -> None:
    leader = await seed.user(UserRole.PROGRAM_LEADER)
    science = await seed.faculty("Science")
    await seed.course("Physics101", science)

    response = await client.delete(f"/faculties/{science.id}", headers=seed.headers(leader))
    assert response.status_code == 400
    assert response.json() == {"error": "Cannot delete faculty with associated courses"}


@pytest.mark.asyncio
async def test_course_crud(client: AsyncClient, seed) -> None:
    leader = await seed.user(UserRole.PROGRAM_LEADER)
    science = await seed.faculty("Science")
    headers = seed.headers(leader)

    bad_faculty = await client.post("/courses", json={"name": "Physics101", "faculty_id": 999}, headers=headers)
    assert bad_faculty.status_code == 400
    assert bad_faculty.json() == {"error": "Invalid faculty ID"}

    long_code = await client.post(
        "/courses", json={"name": "Physics101", "faculty_id": science.id, "code": "X" * 11}, headers=headers
    )
    assert long_code.json() == {"error": "Course code must be 10 characters or less"}

    created = await client.post(
        "/courses", json={"name": "Physics101", "faculty_id": science.id, "code": "PHY101"}, headers=headers
    )
    assert created.status_code == 201
    course = created.json()
    assert course["total_registered_students"] == 0

    fetched = await client.get(f"/courses/{course['id']}", headers=headers)
    assert fetched.json()["facultyName"] == "Science"

    deleted = await client.delete(f"/courses/{course['id']}", headers=headers)
    assert deleted.json() == {"message": "Course deleted successfully"}

    gone = await client.get(f"/courses/{course['id']}", headers=headers)
    assert gone.status_code == 404
    assert gone.json() == {"error": "Course not found"}


@pytest.mark.asyncio
async def test_referenced_course_cannot_be_deleted(client: AsyncClient, seed) -> None:
    leader = await seed.user(UserRole.PROGRAM_LEADER)
    science = await seed.faculty("Science")
    physics = await seed.course("Physics101", science)
    await seed.class_course(await seed.school_class("BSc-Y1"), physics)

    response = await client.delete(f"/courses/{physics.id}", headers=seed.headers(leader))
    assert response.status_code == 400
    assert response.json() == {"error": "Cannot delete course with associated records"}


@pytest.mark.asyncio
async def test_venues_and_classes(client: AsyncClient, seed) -> None:
    prl = await seed.user(UserRole.PRINCIPAL_LECTURER)
    lecturer = await seed.user(UserRole.LECTURER)
    headers = seed.headers(prl)

    venue = await client.post("/venues", json={"name": "Hall 1", "capacity": 120}, headers=headers)
    assert venue.status_code == 201
    assert venue.json()["capacity"] == 120

    unnamed = await client.post("/venues", json={"capacity": 10}, headers=headers)
    assert unnamed.status_code == 400
    assert unnamed.json() == {"error": "Venue name is required and must be 100 characters or less"}

    venues = await client.get("/venues", headers=seed.headers(lecturer))
    assert [v["name"] for v in venues.json()] == ["Hall 1"]

    cl = await client.post("/classes", json={"name": "BSc-Y1"}, headers=headers)
    assert cl.status_code == 201
    assert cl.json()["course_ids"] == []

    duplicate = await client.post("/classes", json={"name": "BSc-Y1"}, headers=headers)
    assert duplicate.status_code == 400
    assert duplicate.json() == {"error": "Class name already exists"}

    too_long = await client.post("/classes", json={"name": "C" * 51}, headers=headers)
    assert too_long.json() == {"error": "Class name must be 50 characters or less"}


@pytest.mark.asyncio
async def test_admin_user_management(client: AsyncClient, seed) -> None:
    leader = await seed.user(UserRole.PROGRAM_LEADER)
    headers = seed.headers(leader)

    weak = await client.post(
        "/admin/users",
        json={"full_name": "Lee", "email": "lee@example.com", "password": "weak", "role": "Lecturer"},
        headers=headers,
    )
    assert weak.status_code == 400

    created = await client.post(
        "/admin/users",
        json={"full_name": "Lee", "email": "lee@example.com", "password": "Str0ng!Pass", "role": "Lecturer"},
        headers=headers,
    )
    assert created.status_code == 201
    user_id = created.json()["id"]

    updated = await client.put(
        f"/users/{user_id}",
        json={"full_name": "Lee Smith", "email": "lee@example.com", "role": "Lecturer"},
        headers=headers,
    )
    assert updated.json() == {"id": user_id, "full_name": "Lee Smith", "email": "lee@example.com", "role": "Lecturer"}

    missing_fields = await client.put(f"/users/{user_id}", json={"full_name": "Lee"}, headers=headers)
    assert missing_fields.json() == {"error": "Full name, email, and role are required"}

    deleted = await client.delete(f"/users/{user_id}", headers=headers)
    assert deleted.json() == {"message": "User deleted"}

    gone = await client.get(f"/users/{user_id}", headers=headers)
    assert gone.status_code == 404
    assert gone.json() == {"error": "User not found"}


@pytest.mark.asyncio
async def test_prl_lists_lecturers_by_faculty(client: AsyncClient, seed) -> None:
    prl = await seed.user(UserRole.PRINCIPAL_LECTURER)
    science = await seed.faculty("Science")
    arts = await seed.faculty("Arts")
    teaching = await seed.user(UserRole.LECTURER)
    await seed.lecturer_course(teaching, await seed.course("Physics101", science))
    elsewhere = await seed.user(UserRole.LECTURER)
    await seed.lecturer_course(elsewhere, await seed.course("Painting", arts))

    response = await client.get(
        "/users", params={"role": "Lecturer", "faculty_id": science.id}, headers=seed.headers(prl)
    )
    assert response.status_code == 200
    assert [u["id"] for u in response.json()] == [teaching.id]


@pytest.mark.asyncio
async def test_lecturer_course_assignments(client: AsyncClient, seed) -> None:
    leader = await seed.user(UserRole.PROGRAM_LEADER)
    science = await seed.faculty("Science")
    physics = await seed.course("Physics101", science)
    lecturer = await seed.user(UserRole.LECTURER, full_name="Lena Lecturer")
    headers = seed.headers(leader)
    payload = {"lecturer_id": lecturer.id, "course_id": physics.id}

    created = await client.post("/pl/lecturer-courses", json=payload, headers=headers)
    assert created.status_code == 201
    assert created.json() == {
        "lecturer_id": lecturer.id,
        "course_id": physics.id,
        "lecturer_name": "Lena Lecturer",
        "course_name": "Physics101",
        "faculty_name": "Science",
    }

    duplicate = await client.post("/pl/lecturer-courses", json=payload, headers=headers)
    assert duplicate.json() == {"error": "Assignment already exists"}

    listed = await client.get("/admin/lecturer-courses", headers=headers)
    assert len(listed.json()) == 1

    deleted = await client.request("DELETE", "/admin/lecturer-courses", json=payload, headers=headers)
    assert deleted.json() == {"message": "Assignment deleted successfully"}


@pytest.mark.asyncio
async def test_faculty_chosen_by_prl_cannot_be_deleted(client: AsyncClient, seed) -> None:
    leader = await seed.user(UserRole.PROGRAM_LEADER)
    prl = await seed.user(UserRole.PRINCIPAL_LECTURER)
    science = await seed.faculty("Science")
    science_id = science.id
    await seed.prl_faculty(prl, science)

    response = await client.delete(f"/faculties/{science_id}", headers=seed.headers(leader))
    assert response.status_code == 400
    assert response.json() == {"error": "Cannot delete faculty that is still referenced"}

    current = await client.get("/prl/current-faculty", headers=seed.headers(prl))
    assert current.json() == {"id": science_id, "name": "Science"}


@pytest.mark.asyncio
async def test_faculty_students_enrolled_through_cannot_be_deleted(client: AsyncClient, seed) -> None:
    leader = await seed.user(UserRole.PROGRAM_LEADER)
    science = await seed.faculty("Science")
    student = await seed.user(UserRole.STUDENT)
    await seed.student_class(student, await seed.school_class("BSc-Y1"), science)

    response = await client.delete(f"/faculties/{science.id}", headers=seed.headers(leader))
    assert response.status_code == 400
    assert response.json() == {"error": "Cannot delete faculty that is still referenced"}


@pytest.mark.asyncio
async def test_lecturer_with_reports_cannot_be_deleted(client: AsyncClient, db_session, seed) -> None:
    leader = await seed.user(UserRole.PROGRAM_LEADER)
    science = await seed.faculty("Science")
    physics = await seed.course("Physics101", science)
    lecturer = await seed.user(UserRole.LECTURER)
    lecturer_id = lecturer.id
    await seed.report(lecturer, await seed.school_class("BSc-Y1"), physics, await seed.venue())

    response = await client.delete(f"/users/{lecturer_id}", headers=seed.headers(leader))
    assert response.status_code == 400
    assert response.json() == {"error": "Cannot delete user with associated records"}

    assert await db_session.scalar(select(User.id).where(User.id == lecturer_id)) == lecturer_id
    reports = await db_session.scalar(select(func.count()).select_from(Report).where(Report.lecturer_id == lecturer_id))
    assert reports == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("link", ["prl_faculty", "lecturer_prl", "enrollment"])
async def test_linked_users_cannot_be_deleted(client: AsyncClient, seed, link: str) -> None:
    leader = await seed.user(UserRole.PROGRAM_LEADER)
    science = await seed.faculty("Science")
    prl = await seed.user(UserRole.PRINCIPAL_LECTURER)
    if link == "prl_faculty":
        await seed.prl_faculty(prl, science)
        target = prl
    elif link == "lecturer_prl":
        # The PRL side of the link blocks deletion too
        await seed.lecturer_prl(await seed.user(UserRole.LECTURER), prl)
        target = prl
    else:
        target = await seed.user(UserRole.STUDENT)
        await seed.enrollment(target, await seed.course("Physics101", science))

    response = await client.delete(f"/users/{target.id}", headers=seed.headers(leader))
    assert response.status_code == 400
    assert response.json() == {"error": "Cannot delete user with associated records"}
