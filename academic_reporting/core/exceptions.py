from typing import Optional

from fastapi import status


class ServiceError(Exception):
    """Base exception for service layer errors.

    ``details`` is returned to the client alongside ``message``; ``audit_details``
    only goes to the audit trail (e.g. the offending name or id).
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        *,
        details: Optional[str] = None,
        audit_details: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details
        self.audit_details = audit_details


class UnauthenticatedError(ServiceError):
    def __init__(self, message: str = "Access denied: No token provided", **kwargs) -> None:
        super().__init__(message, status.HTTP_401_UNAUTHORIZED, **kwargs)


class ForbiddenError(ServiceError):
    def __init__(self, message: str = "Access denied", **kwargs) -> None:
        super().__init__(message, status.HTTP_403_FORBIDDEN, **kwargs)


class InvalidInputError(ServiceError):
    def __init__(self, message: str, **kwargs) -> None:
        super().__init__(message, status.HTTP_400_BAD_REQUEST, **kwargs)


class NotFoundError(ServiceError):
    def __init__(self, message: str, **kwargs) -> None:
        super().__init__(message, status.HTTP_404_NOT_FOUND, **kwargs)


class InvalidRelationshipError(ServiceError):
    """Both entities exist but the link the operation depends on does not."""

    def __init__(self, message: str, **kwargs) -> None:
        super().__init__(message, status.HTTP_400_BAD_REQUEST, **kwargs)


class NoFacultyAssignedError(InvalidRelationshipError):
    def __init__(self, message: str = "No faculty assigned to this PRL", **kwargs) -> None:
        super().__init__(message, **kwargs)


class ConflictError(ServiceError):
    # Duplicates are reported as 400 to match the existing API clients
    def __init__(self, message: str, **kwargs) -> None:
        super().__init__(message, status.HTTP_400_BAD_REQUEST, **kwargs)


class UnexpectedError(ServiceError):
    def __init__(self, message: str = "Internal server error", **kwargs) -> None:
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR, **kwargs)
