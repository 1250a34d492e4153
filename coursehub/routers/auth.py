from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from coursehub.core.auth_provider import AuthProvider, get_auth_provider
from coursehub.core.database import get_db
from coursehub.core.dependencies import get_current_user
from coursehub.core.limiter import limiter
from coursehub.models.user import User
from coursehub.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RefreshTokenRequest,
    TokenExchangeRequest,
)
from coursehub.schemas.user import UserCreate, UserResponse
from coursehub.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("10/minute")
def register(
    request: Request, data: UserCreate, db: Session = Depends(get_db)
) -> AuthResponse:
    """Create a local email/password account and sign it in"""
    return AuthService(db).register(data)


@router.post("/login", response_model=AuthResponse)
@limiter.limit("10/minute")
def login(
    request: Request, data: LoginRequest, db: Session = Depends(get_db)
) -> AuthResponse:
    return AuthService(db).login(data.email, data.password)


@router.post("/refresh", response_model=AuthResponse)
def refresh_token(
    data: RefreshTokenRequest, db: Session = Depends(get_db)
) -> AuthResponse:
    """Refresh access token using refresh token"""
    return AuthService(db).refresh(data.refresh_token)


@router.post("/token", response_model=AuthResponse)
@limiter.limit("20/minute")
def exchange_token(
    request: Request,
    data: TokenExchangeRequest,
    db: Session = Depends(get_db),
    provider: AuthProvider = Depends(get_auth_provider),
) -> AuthResponse:
    """
    Exchange an identity-provider ID token for CourseHub tokens.
    Creates the profile on first sign-in.
    """
    return AuthService(db).exchange_id_token(data.id_token, provider)


@router.get("/me", response_model=UserResponse)
def get_current_user_info(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Get current user information"""
    return current_user
