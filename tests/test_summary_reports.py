import os

import pytest
from httpx import AsyncClient
from openpyxl import load_workbook

from academic_reporting.core.config import settings
from academic_reporting.core.enums import UserRole


def _local(file_path: str) -> str:
    return os.path.join(settings.reports_dir, os.path.basename(file_path))


@pytest.mark.asyncio
async def test_student_registration_workbook(client: AsyncClient, seed) -> None:
    leader = await seed.user(UserRole.PROGRAM_LEADER)
    science = await seed.faculty("Science")
    physics = await seed.course("Physics101", science)
    student = await seed.user(UserRole.STUDENT, full_name="Sam Student", email="sam@example.com")
    await seed.enrollment(student, physics)

    response = await client.post(
        "/pl/reports", json={"type": "student_registration"}, headers=seed.headers(leader)
    )
    assert response.status_code == 201
    body = response.json()
    assert body["type"] == "student_registration"
    assert body["file_path"].startswith("/reports/student_registration_")
    assert body["file_path"].endswith(".xlsx")

    ws = load_workbook(_local(body["file_path"])).active
    rows = list(ws.iter_rows(values_only=True))
    assert rows[0] == ("Student Name", "Email", "Course", "Faculty")
    assert rows[1] == ("Sam Student", "sam@example.com", "Physics101", "Science")


@pytest.mark.asyncio
async def test_workload_counts_lecturers_without_courses(client: AsyncClient, seed) -> None:
    leader = await seed.user(UserRole.PROGRAM_LEADER)
    science = await seed.faculty("Science")
    busy = await seed.user(UserRole.LECTURER, full_name="Ann Busy")
    await seed.lecturer_course(busy, await seed.course("Physics101", science))
    await seed.lecturer_course(busy, await seed.course("Chemistry101", science))
    await seed.user(UserRole.LECTURER, full_name="Bob Idle")

    response = await client.post("/pl/reports", json={"type": "lecturer_workload"}, headers=seed.headers(leader))
    ws = load_workbook(_local(response.json()["file_path"])).active
    rows = list(ws.iter_rows(values_only=True))
    assert rows[1:] == [("Ann Busy", 2), ("Bob Idle", 0)]


@pytest.mark.asyncio
async def test_invalid_report_type(client: AsyncClient, seed) -> None:
    leader = await seed.user(UserRole.PROGRAM_LEADER)

    response = await client.post("/pl/reports", json={"type": "payroll"}, headers=seed.headers(leader))
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid report type"}


@pytest.mark.asyncio
async def test_delete_report_removes_file(client: AsyncClient, seed) -> None:
    leader = await seed.user(UserRole.PROGRAM_LEADER)
    headers = seed.headers(leader)
    created = await client.post("/pl/reports", json={"type": "course_completion"}, headers=headers)
    report = created.json()
    path = _local(report["file_path"])
    assert os.path.exists(path)

    listed = await client.get("/pl/reports", headers=headers)
    assert [r["id"] for r in listed.json()] == [report["id"]]

    deleted = await client.delete(f"/admin/reports/{report['id']}", headers=headers)
    assert deleted.json() == {"message": "Report deleted successfully"}
    assert not os.path.exists(path)

    again = await client.delete(f"/admin/reports/{report['id']}", headers=headers)
    assert again.status_code == 404
    assert again.json() == {"error": "Report not found"}
