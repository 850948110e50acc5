"""
Audit trail. Every action and every failed attempt is appended to audit_logs.
Writing the trail is best-effort: a failure here is logged and never reaches the caller.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from academic_reporting.core.exceptions import ServiceError, UnexpectedError
from academic_reporting.core.logging_config import logger
from academic_reporting.core.models import AuditLog


async def log_action(
    db: AsyncSession,
    user_id: Optional[int],
    action: str,
    details: Optional[str] = None,
) -> None:
    """Append one audit entry and commit it on its own."""
    try:
        db.add(AuditLog(user_id=user_id, action=action, details=details, timestamp=datetime.now(timezone.utc)))
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.warning(
            f"Audit write failed for action '{action}': {exc}",
            extra={"audit_action": action, "audit_user_id": user_id},
        )


@asynccontextmanager
async def audit_trail(
    db: AsyncSession,
    user_id: Optional[int],
    action: str,
    error_message: str,
) -> AsyncIterator[None]:
    """Wrap a validate-then-write chain.

    Service errors roll back the transaction, are audited as "<action> Failed"
    and propagate unchanged. Store errors are audited as "<action> Error" and
    re-raised as UnexpectedError(error_message).
    """
    try:
        yield
    except ServiceError as exc:
        await db.rollback()
        await log_action(db, user_id, f"{action} Failed", exc.audit_details or exc.message)
        raise
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.log_error_with_context(exc, context=action)
        await log_action(db, user_id, f"{action} Error", str(exc))
        raise UnexpectedError(error_message, details=str(exc))
