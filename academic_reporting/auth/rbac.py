from typing import Iterable, Union

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.auth.dependencies import get_current_user
from academic_reporting.auth.schemas import CurrentUser
from academic_reporting.core.audit import log_action
from academic_reporting.core.enums import UserRole
from academic_reporting.db.session import get_db


def role_allowed(role: UserRole, allowed: Union[UserRole, Iterable[UserRole]]) -> bool:
    """Accepts a single role or any collection of roles."""
    if isinstance(allowed, UserRole):
        return role == allowed
    return role in set(allowed)


def require_roles(*roles: UserRole):
    """
    Dependency factory restricting an endpoint to the given roles.
    Rejections are audited as "Unauthorized Access" and answered with 403.

    Example:
        current_user: CurrentUser = Depends(require_roles(UserRole.PROGRAM_LEADER))
    """
    allowed = frozenset(roles)

    async def _checker(
        request: Request,
        current_user: CurrentUser = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
    ) -> CurrentUser:
        if not role_allowed(current_user.role, allowed):
            await log_action(
                db,
                current_user.id,
                "Unauthorized Access",
                f"{current_user.role.value} accessed {request.url.path}",
            )
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
        return current_user

    return _checker
