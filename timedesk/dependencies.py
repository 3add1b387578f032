"""FastAPI dependencies for authentication and authorization."""
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from timedesk.config import settings
from timedesk.core.context import ActorContext
from timedesk.database import get_db
from timedesk.models.user import User
from timedesk.utils.security import decode_token
from timedesk.utils.permissions import has_permission
from timedesk.core.security import Permission
from timedesk.core.exceptions import ForbiddenError, NotFoundError, UnauthorizedError, ValidationError
from timedesk.crud.employee import employee as employee_crud
from timedesk.crud.user import user as user_crud
from timedesk.localization.helpers import get_locale_from_request, get_translation

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_PREFIX}/auth/login")


def get_locale(request: Request) -> str:
    return get_locale_from_request(request)


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
    locale: str = Depends(get_locale),
) -> User:
    """Account behind a bearer access token."""
    try:
        payload = decode_token(token)
        if payload.get("type") != "access":
            raise ValueError("not an access token")
        user_id = UUID(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise UnauthorizedError(locale=locale)

    account = await user_crud.get(db, id=user_id)
    if account is None:
        raise UnauthorizedError(locale=locale)
    return account


async def get_current_active_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """Get current active user."""
    if not current_user.is_active:
        raise ForbiddenError("User is inactive")
    return current_user


def require_permission(permission: Permission):
    """Dependency factory for requiring a specific permission."""

    async def permission_checker(
        current_user: User = Depends(get_current_active_user),
    ) -> User:
        if not has_permission(current_user, permission):
            raise ForbiddenError(f"Permission required: {permission.value}")
        return current_user

    return permission_checker


async def get_actor_context(
    request: Request,
    current_user: User = Depends(require_permission(Permission.TRACKING_USE)),
    db: AsyncSession = Depends(get_db),
    locale: str = Depends(get_locale),
) -> ActorContext:
    """Resolve the employee the request acts for, honouring impersonation."""
    impersonated_id = request.headers.get(settings.IMPERSONATION_HEADER)
    if impersonated_id:
        if not has_permission(current_user, Permission.EMPLOYEE_IMPERSONATE):
            raise ForbiddenError(
                f"Permission required: {Permission.EMPLOYEE_IMPERSONATE.value}",
                locale=locale,
            )
        try:
            target_id = UUID(impersonated_id)
        except ValueError:
            raise ValidationError(f"Invalid {settings.IMPERSONATION_HEADER} header", locale=locale)
        target = await employee_crud.get(db, id=target_id)
        if target is None:
            raise NotFoundError(get_translation("errors.employee_not_found", locale), locale=locale)
        return ActorContext(user=current_user, employee=target, impersonating=True, locale=locale)

    own = await employee_crud.get_by_user(db, user_id=current_user.id)
    if own is None:
        raise ForbiddenError(get_translation("errors.no_employee_profile", locale), locale=locale)
    return ActorContext(user=current_user, employee=own, locale=locale)
