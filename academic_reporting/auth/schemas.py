import re
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from academic_reporting.core.enums import UserRole

PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}$")
PASSWORD_POLICY_MESSAGE = (
    "Password must be at least 8 characters with uppercase, lowercase, number, and special character"
)


def is_strong_password(password: str) -> bool:
    return PASSWORD_PATTERN.match(password) is not None


class RegisterRequest(BaseModel):
    """All fields optional at the schema level so the service can report which check failed."""

    full_name: Optional[str] = Field(None, alias="fullName")
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    confirm_password: Optional[str] = Field(None, alias="confirmPassword")
    role: Optional[str] = None

    class Config:
        populate_by_name = True


class RegisterResponse(BaseModel):
    message: str


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class LoginResponse(BaseModel):
    token: str
    role: UserRole
    full_name: str = Field(..., serialization_alias="fullName")


class CurrentUser(BaseModel):
    """Identity decoded from the bearer token. Passed explicitly into services."""

    id: int
    role: UserRole
    full_name: str

    class Config:
        frozen = True

