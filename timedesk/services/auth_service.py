"""Login, token issuing and refresh."""
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from timedesk.config import settings
from timedesk.core.exceptions import UnauthorizedError
from timedesk.crud.user import user as user_crud
from timedesk.models.user import User
from timedesk.utils.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    get_password_hash,
    verify_password,
)

logger = logging.getLogger(__name__)


def _access_claims(user: User) -> dict:
    claims = {"sub": str(user.id), "email": user.email}
    if user.employee is not None:
        claims["employee_id"] = str(user.employee.id)
    return claims


def _access_payload(user: User) -> dict:
    return {
        "access_token": create_access_token(_access_claims(user)),
        "token_type": "bearer",
        "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    }


class AuthService:
    """Authentication service."""

    @staticmethod
    async def authenticate_user(db: AsyncSession, email: str, password: str) -> Optional[User]:
        """Active user with matching credentials, else None."""
        account = await user_crud.get_by_email(db, email=email.strip().lower())
        if account is None or not account.is_active:
            return None
        if not verify_password(password, account.password_hash):
            return None
        return account

    @staticmethod
    async def create_tokens(user: User) -> dict:
        tokens = _access_payload(user)
        tokens["refresh_token"] = create_refresh_token({"sub": str(user.id)})
        logger.info(f"Issued tokens for {user.email}")
        return tokens

    @staticmethod
    async def refresh_access_token(db: AsyncSession, refresh_token: str) -> dict:
        """New access token for a valid refresh token of an active user."""
        try:
            payload = decode_token(refresh_token)
            if payload.get("type") != "refresh":
                raise ValueError("not a refresh token")
            user_id = UUID(payload["sub"])
        except (KeyError, TypeError, ValueError):
            raise UnauthorizedError("Invalid refresh token")

        account = await user_crud.get(db, id=user_id)
        if account is None or not account.is_active:
            raise UnauthorizedError("User not found or inactive")
        return _access_payload(account)

    @staticmethod
    def hash_password(password: str) -> str:
        return get_password_hash(password)
