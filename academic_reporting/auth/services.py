from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.auth.models import User
from academic_reporting.auth.schemas import (
    PASSWORD_POLICY_MESSAGE,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    is_strong_password,
)
from academic_reporting.auth.security import create_access_token, hash_password, verify_password
from academic_reporting.core.audit import audit_trail, log_action
from academic_reporting.core.enums import UserRole
from academic_reporting.core.exceptions import ConflictError, InvalidInputError, UnauthenticatedError
from academic_reporting.core.logging_config import logger

VALID_ROLES = {r.value for r in UserRole}


async def register_user(db: AsyncSession, payload: RegisterRequest) -> RegisterResponse:
    async with audit_trail(db, None, "Registration", "Server error"):
        if not all([payload.full_name, payload.email, payload.password, payload.confirm_password, payload.role]):
            raise InvalidInputError("All fields are required", audit_details="Missing required fields")
        if payload.password != payload.confirm_password:
            raise InvalidInputError("Passwords do not match")
        if not is_strong_password(payload.password):
            raise InvalidInputError(PASSWORD_POLICY_MESSAGE, audit_details="Invalid password format")
        existing = await db.execute(select(User.id).where(User.email == payload.email))
        if existing.scalar_one_or_none() is not None:
            raise ConflictError("Email already exists", audit_details=f"Email already exists: {payload.email}")
        if payload.role not in VALID_ROLES:
            raise InvalidInputError("Invalid role", audit_details=f"Invalid role: {payload.role}")

        user = User(
            full_name=payload.full_name,
            email=payload.email,
            password_hash=hash_password(payload.password),
            role=payload.role,
        )
        db.add(user)
        try:
            await db.commit()
        except IntegrityError:
            raise ConflictError("Email already exists", audit_details=f"Email already exists: {payload.email}")
        user_id = user.id

    await log_action(db, user_id, "Registration", f"{payload.role} registered: {payload.email}")
    return RegisterResponse(message="Registration successful, please log in")


async def login_user(db: AsyncSession, payload: LoginRequest) -> LoginResponse:
    if not payload.email or not payload.password:
        await log_action(db, None, "Login Failed", "Missing email or password")
        raise InvalidInputError("Email and password are required")

    result = await db.execute(select(User).where(User.email == payload.email))
    user = result.scalar_one_or_none()
    if user is None:
        await log_action(db, None, "Login Failed", f"Invalid email: {payload.email}")
        logger.log_auth_event("login", False, user_email=payload.email, reason="unknown email")
        raise UnauthenticatedError("Invalid email or password")
    user_id, full_name, role = user.id, user.full_name, user.role
    if not verify_password(payload.password, user.password_hash):
        await log_action(db, user_id, "Login Failed", f"Invalid password for email: {payload.email}")
        logger.log_auth_event("login", False, user_email=payload.email, reason="bad password")
        raise UnauthenticatedError("Invalid email or password")

    token = create_access_token(subject={"id": user_id, "role": role, "fullName": full_name})
    await log_action(db, user_id, "Login", f"User logged in: {payload.email}")
    logger.log_auth_event("login", True, user_email=payload.email)
    return LoginResponse(token=token, role=role, full_name=full_name)
