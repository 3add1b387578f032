"""HTTP errors with localized default messages."""
from typing import Optional

from fastapi import HTTPException, status

from timedesk.localization.helpers import get_translation


class AppError(HTTPException):
    """HTTPException whose default detail comes from the translation table."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message_key = "errors.internal_error"

    def __init__(self, detail: Optional[str] = None, locale: str = "en"):
        if detail is None:
            detail = get_translation(self.message_key, locale)
        super().__init__(status_code=type(self).status_code, detail=detail)


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message_key = "errors.resource_not_found"


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message_key = "errors.not_authenticated"


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message_key = "errors.permission_denied"


class ValidationError(AppError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    message_key = "errors.validation_error"


class ConflictError(AppError):
    """State conflicts: duplicates, unavailable tasks, bad transitions."""

    status_code = status.HTTP_409_CONFLICT
    message_key = "errors.resource_conflict"


class InvalidTransitionError(ConflictError):
    """Raised when a time record cannot move to the requested state."""

    def __init__(self, current: str, action: str, locale: str = "en"):
        self.current = current
        self.action = action
        super().__init__(
            get_translation("errors.invalid_transition", locale, action=action, status=current),
            locale=locale,
        )
