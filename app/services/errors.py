from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    validation = "validation"
    unauthenticated = "unauthenticated"
    permission_denied = "permission_denied"
    not_found = "not_found"
    conflict = "conflict"
    internal = "internal"


class TeamServiceError(Exception):
    """
    Base class for failures raised by the team and membership managers.

    The request handler only looks at ``kind`` to pick a status code and
    at ``message`` for the response body.
    """
    kind: ErrorKind = ErrorKind.internal

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TeamServiceError):
    kind = ErrorKind.validation


class UnauthenticatedError(TeamServiceError):
    kind = ErrorKind.unauthenticated


class PermissionDenied(TeamServiceError):
    kind = ErrorKind.permission_denied


class NotFoundError(TeamServiceError):
    kind = ErrorKind.not_found


class ConflictError(TeamServiceError):
    kind = ErrorKind.conflict


class InternalError(TeamServiceError):
    kind = ErrorKind.internal


class OrphanedTeamError(InternalError):
    """Memberships were deleted but the team row survived."""

    def __init__(self, team_id: str, message: Optional[str] = None):
        super().__init__(message or "Failed to delete team")
        self.team_id = team_id
