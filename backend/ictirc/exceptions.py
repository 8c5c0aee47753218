"""Application exception hierarchy.

Services raise these; the handlers registered in
``ictirc.middleware.error_handler`` turn them into the uniform
``{"success": false, "error": ...}`` response shape.
"""

from typing import Any, Optional


class BaseAPIException(Exception):
    """Base class for all errors surfaced to API callers."""

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details


# --- Authorization ---------------------------------------------------------


class MissingTokenError(BaseAPIException):
    status_code = 401
    error_code = "MISSING_TOKEN"

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class InvalidTokenError(BaseAPIException):
    status_code = 401
    error_code = "INVALID_TOKEN"


class AuthorizationError(BaseAPIException):
    """Actor missing, deactivated, or lacking the required role/permission."""

    status_code = 403
    error_code = "FORBIDDEN"


# --- Lookup ----------------------------------------------------------------


class ResourceNotFoundError(BaseAPIException):
    status_code = 404
    error_code = "NOT_FOUND"

    def __init__(self, resource_type: str, resource_id: Optional[str] = None):
        super().__init__(
            f"{resource_type} not found",
            details={"resource_type": resource_type, "resource_id": resource_id},
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


# --- Business rules --------------------------------------------------------


class InvalidTransitionError(BaseAPIException):
    status_code = 409
    error_code = "INVALID_TRANSITION"

    def __init__(self, current: str, target: str):
        super().__init__(
            f"Invalid status transition: {current} → {target}",
            details={"from": current, "to": target},
        )


class ConflictError(BaseAPIException):
    status_code = 409
    error_code = "CONFLICT"


class DoiAlreadyAssignedError(ConflictError):
    error_code = "DOI_ALREADY_ASSIGNED"

    def __init__(self, doi: str):
        super().__init__("Paper already has a DOI assigned", details={"doi": doi})
        self.doi = doi


class StaleStateError(ConflictError):
    """A conditional update matched no rows: the entity changed underneath us."""

    error_code = "STALE_STATE"


class InviteExpiredError(ConflictError):
    error_code = "INVITE_EXPIRED"

    def __init__(self, message: str = "Invite has expired"):
        super().__init__(message)


class ValidationError(BaseAPIException):
    status_code = 422
    error_code = "VALIDATION_ERROR"


# --- Collaborators / storage -----------------------------------------------


class StorageUploadError(BaseAPIException):
    status_code = 502
    error_code = "STORAGE_UPLOAD_FAILED"


class DatabaseError(BaseAPIException):
    status_code = 500
    error_code = "DATABASE_ERROR"

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(message)
