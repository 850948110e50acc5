import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.auth.rbac import role_allowed
from academic_reporting.auth.security import create_access_token
from academic_reporting.core.enums import UserRole
from academic_reporting.core.models import AuditLog


def test_role_allowed_accepts_scalar_and_collections() -> None:
    assert role_allowed(UserRole.STUDENT, UserRole.STUDENT)
    assert role_allowed(UserRole.LECTURER, [UserRole.PROGRAM_LEADER, UserRole.LECTURER])
    assert role_allowed(UserRole.LECTURER, {UserRole.LECTURER})
    assert not role_allowed(UserRole.STUDENT, (UserRole.PROGRAM_LEADER, UserRole.PRINCIPAL_LECTURER))


@pytest.mark.asyncio
async def test_missing_token_is_rejected(client: AsyncClient) -> None:
    response = await client.get("/venues")
    assert response.status_code == 401
    assert response.json() == {"error": "Access denied: No token provided"}


@pytest.mark.asyncio
async def test_garbage_token_is_rejected(client: AsyncClient) -> None:
    response = await client.get("/venues", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 403
    assert response.json() == {"error": "Invalid or expired token"}


@pytest.mark.asyncio
async def test_expired_token_is_rejected(client: AsyncClient) -> None:
    token = create_access_token(subject={"id": 1, "role": "PL", "fullName": "Lee"}, expires_minutes=-5)
    response = await client.get("/venues", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 403
    assert response.json() == {"error": "Invalid or expired token"}


@pytest.mark.asyncio
async def test_token_with_unknown_role_is_rejected(client: AsyncClient) -> None:
    token = create_access_token(subject={"id": 1, "role": "Janitor", "fullName": "Lee"})
    response = await client.get("/venues", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 403
    assert response.json() == {"error": "Invalid or expired token"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "role, method, path",
    [
        (UserRole.STUDENT, "GET", "/prl/reports"),
        (UserRole.LECTURER, "POST", "/class-courses"),
        (UserRole.PROGRAM_LEADER, "POST", "/lecturer/reports"),
        (UserRole.PRINCIPAL_LECTURER, "POST", "/student/rate"),
        (UserRole.STUDENT, "POST", "/faculties"),
        (UserRole.LECTURER, "GET", "/pl/reports"),
    ],
)
async def test_role_outside_allow_list_gets_403_regardless_of_input(
    client: AsyncClient, seed, db_session: AsyncSession, role, method, path
) -> None:
    user = await seed.user(role)

    response = await client.request(method, path, json={"anything": "goes"}, headers=seed.headers(user))
    assert response.status_code == 403
    assert response.json() == {"error": "Access denied"}

    details = (
        await db_session.execute(
            select(AuditLog.details).where(AuditLog.user_id == user.id, AuditLog.action == "Unauthorized Access")
        )
    ).scalars().all()
    assert details == [f"{role.value} accessed {path}"]


@pytest.mark.asyncio
async def test_users_listing_for_prl_is_limited_to_lecturers(client: AsyncClient, seed) -> None:
    prl = await seed.user(UserRole.PRINCIPAL_LECTURER)

    response = await client.get("/users", params={"role": "Student"}, headers=seed.headers(prl))
    assert response.status_code == 403
    assert response.json() == {"error": "Access denied"}
