"""Authentication schemas."""
from pydantic import BaseModel


class TokenResponse(BaseModel):
    """Access and refresh token pair."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class RefreshTokenRequest(BaseModel):
    """Refresh token request schema."""

    refresh_token: str


class RefreshTokenResponse(BaseModel):
    """Refreshed access token."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
