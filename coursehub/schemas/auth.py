# coursehub/schemas/auth.py
from pydantic import EmailStr, Field

from coursehub.schemas.base import CamelModel
from coursehub.schemas.user import UserResponse


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshTokenRequest(CamelModel):
    refresh_token: str = Field(..., min_length=1)


class TokenExchangeRequest(CamelModel):
    """ID token from the external identity provider."""

    id_token: str = Field(..., min_length=1)


class AuthResponse(CamelModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserResponse
