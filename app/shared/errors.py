from typing import Any, Optional

from fastapi import HTTPException, status


class MarketplaceError(HTTPException):
    """Base for domain errors; carries the HTTP status it maps to."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, headers: Optional[dict] = None):
        super().__init__(
            status_code=self.status_code,
            detail=message or self.default_message,
            headers=headers,
        )

    @property
    def message(self) -> Any:
        return self.detail


class InvalidPayload(MarketplaceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid payload"


class Unauthorized(MarketplaceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(MarketplaceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFound(MarketplaceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(MarketplaceError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"
