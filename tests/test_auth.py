import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.auth.models import User
from academic_reporting.auth.security import verify_password
from academic_reporting.core.enums import UserRole
from academic_reporting.core.models import AuditLog


def _register_payload(**overrides):
    payload = {
        "fullName": "Jane Doe",
        "email": "jane@example.com",
        "password": "Str0ng!Pass",
        "confirmPassword": "Str0ng!Pass",
        "role": "Lecturer",
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_register_success(client: AsyncClient, db_session: AsyncSession) -> None:
    response = await client.post("/auth/register", json=_register_payload())
    assert response.status_code == 200
    assert response.json() == {"message": "Registration successful, please log in"}

    user = (await db_session.execute(select(User).where(User.email == "jane@example.com"))).scalar_one()
    assert user.role == "Lecturer"
    assert user.full_name == "Jane Doe"
    assert verify_password("Str0ng!Pass", user.password_hash)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"fullName": ""}, "All fields are required"),
        ({"confirmPassword": "Other1!Pass"}, "Passwords do not match"),
        ({"password": "weak", "confirmPassword": "weak"}, "Password must be at least 8 characters"),
        ({"role": "Admin"}, "Invalid role"),
    ],
)
async def test_register_rejects_invalid_payload(client: AsyncClient, overrides, message) -> None:
    response = await client.post("/auth/register", json=_register_payload(**overrides))
    assert response.status_code == 400
    assert response.json()["error"].startswith(message)


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient, seed) -> None:
    await seed.user(UserRole.STUDENT, email="jane@example.com")

    response = await client.post("/auth/register", json=_register_payload())
    assert response.status_code == 400
    assert response.json() == {"error": "Email already exists"}


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, seed, db_session: AsyncSession) -> None:
    user = await seed.user(UserRole.PRINCIPAL_LECTURER, full_name="Pat Rowe", email="pat@example.com")

    response = await client.post("/auth/login", json={"email": "pat@example.com", "password": "Passw0rd!"})
    assert response.status_code == 200
    data = response.json()
    assert data["role"] == "PRL"
    assert data["fullName"] == "Pat Rowe"
    assert data["token"]

    me = await client.get("/prl/courses", headers={"Authorization": f"Bearer {data['token']}"})
    # Valid token, PRL role: the only failure left is the missing faculty.
    assert me.status_code == 400
    assert me.json() == {"error": "No faculty assigned to this PRL"}

    actions = (await db_session.execute(select(AuditLog.action).where(AuditLog.user_id == user.id))).scalars().all()
    assert "Login" in actions


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, seed) -> None:
    await seed.user(UserRole.STUDENT, email="sam@example.com")

    response = await client.post("/auth/login", json={"email": "sam@example.com", "password": "nope"})
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid email or password"}


@pytest.mark.asyncio
async def test_login_unknown_email(client: AsyncClient) -> None:
    response = await client.post("/auth/login", json={"email": "ghost@example.com", "password": "Passw0rd!"})
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid email or password"}


@pytest.mark.asyncio
async def test_login_missing_fields(client: AsyncClient) -> None:
    response = await client.post("/auth/login", json={"email": "sam@example.com"})
    assert response.status_code == 400
    assert response.json() == {"error": "Email and password are required"}


@pytest.mark.asyncio
async def test_login_oauth_form(client: AsyncClient, seed) -> None:
    await seed.user(UserRole.PROGRAM_LEADER, email="lead@example.com")

    response = await client.post(
        "/auth/login-oauth", data={"username": "lead@example.com", "password": "Passw0rd!"}
    )
    assert response.status_code == 200
    assert response.json()["token_type"] == "bearer"
