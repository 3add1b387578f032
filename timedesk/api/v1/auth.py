"""Authentication API endpoints."""
import logging

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from timedesk.core.exceptions import UnauthorizedError
from timedesk.database import get_db
from timedesk.dependencies import get_current_active_user, get_locale
from timedesk.models.user import User
from timedesk.schemas.auth import RefreshTokenRequest, RefreshTokenResponse, TokenResponse
from timedesk.schemas.user import CurrentUserResponse, UserResponse
from timedesk.services.auth_service import AuthService
from timedesk.utils.permissions import get_user_permissions

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
    locale: str = Depends(get_locale),
):
    """Exchange email and password for an access/refresh token pair.

    OAuth2 password flow: the form's ``username`` field carries the email.
    """
    user = await AuthService.authenticate_user(db, form_data.username, form_data.password)
    if not user:
        logger.warning(f"Failed login for {form_data.username}")
        raise UnauthorizedError(locale=locale)

    return TokenResponse(**await AuthService.create_tokens(user))


@router.post("/refresh", response_model=RefreshTokenResponse)
async def refresh_token(
    request: RefreshTokenRequest,
    db: AsyncSession = Depends(get_db),
):
    tokens = await AuthService.refresh_access_token(db, request.refresh_token)
    return RefreshTokenResponse(**tokens)


@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_active_user),
):
    """The caller's account, effective permissions and employee profile id."""
    profile = current_user.employee
    return CurrentUserResponse(
        **UserResponse.model_validate(current_user).model_dump(),
        permissions=get_user_permissions(current_user),
        employee_id=profile.id if profile is not None else None,
    )
