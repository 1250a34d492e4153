# coursehub/services/auth.py
import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from coursehub.core.auth_provider import AuthProvider
from coursehub.core.config import settings
from coursehub.core.exceptions import ConflictError, ForbiddenError, UnauthorizedError
from coursehub.core.hasher import PasswordHelper
from coursehub.core.security import jwt_manager
from coursehub.models.user import User
from coursehub.schemas.auth import AuthResponse
from coursehub.schemas.user import UserCreate, UserResponse
from coursehub.services.profile_store import ProfileStore, SQLProfileStore

logger = logging.getLogger(__name__)


def role_for_email(email: str, current_role: str = "student") -> str:
    """Configured admin emails always map to the admin role."""
    return "admin" if settings.is_admin_email(email) else current_role


class AuthService:
    def __init__(self, db: Session, profiles: ProfileStore = None):
        self.db = db
        self.profiles = profiles or SQLProfileStore(db)

    def _issue_tokens(self, user: User) -> AuthResponse:
        access_token, refresh_token = jwt_manager.create_token_pair(user)
        return AuthResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            user=UserResponse.model_validate(user),
        )

    def _touch_login(self, user: User) -> User:
        return self.profiles.update(user, last_login=datetime.now(timezone.utc))

    # ==================== Local accounts ====================

    def register(self, data: UserCreate) -> AuthResponse:
        email = data.email.lower()
        if self.profiles.get_by_email(email):
            raise ConflictError("User with this email already exists")

        user = self.profiles.create(
            uid=f"local:{uuid.uuid4().hex}",
            email=email,
            hashed_password=PasswordHelper.hash_password(data.password),
            full_name=data.full_name,
            phone_number=data.phone_number,
            provider="local",
            role=role_for_email(email),
            is_active=True,
            last_login=datetime.now(timezone.utc),
        )
        logger.info(f"User registered: {user.id} ({user.role})")
        return self._issue_tokens(user)

    def login(self, email: str, password: str) -> AuthResponse:
        user = self.profiles.get_by_email(email)
        if not user or not PasswordHelper.check_password(password, user.hashed_password):
            logger.warning(f"Failed login attempt for {email}")
            raise UnauthorizedError("Invalid email or password")

        if not user.is_active:
            raise ForbiddenError("Account is disabled")

        user = self._touch_login(user)
        logger.info(f"User logged in: {user.id}")
        return self._issue_tokens(user)

    def refresh(self, refresh_token: str) -> AuthResponse:
        payload = jwt_manager.verify_token(refresh_token, "refresh")
        user = self.profiles.get_by_id(payload.get("user_id"))
        if not user:
            raise UnauthorizedError("User not found")
        if not user.is_active:
            raise ForbiddenError("Account is disabled")
        return self._issue_tokens(user)

    # ==================== External identity ====================

    def exchange_id_token(self, id_token: str, provider: AuthProvider) -> AuthResponse:
        """
        Sign in with an identity-provider token, creating or refreshing the
        local profile on the way.
        """
        identity = provider.verify_id_token(id_token)
        user = self.profiles.get_by_uid(identity.uid)

        if user:
            if not user.is_active:
                raise ForbiddenError("Account is disabled")
            # Keep stored values where the provider sent nothing
            user = self.profiles.update(
                user,
                full_name=identity.full_name or user.full_name,
                photo_url=identity.photo_url or user.photo_url,
                phone_number=identity.phone_number or user.phone_number,
                email_verified=identity.email_verified or user.email_verified,
                role=role_for_email(user.email, user.role),
                last_login=datetime.now(timezone.utc),
            )
            logger.info(f"External login: user {user.id} via {identity.provider}")
            return self._issue_tokens(user)

        if self.profiles.get_by_email(identity.email):
            raise ConflictError("An account with this email already exists")

        user = self.profiles.create(
            uid=identity.uid,
            email=identity.email,
            full_name=identity.full_name,
            photo_url=identity.photo_url,
            phone_number=identity.phone_number,
            email_verified=identity.email_verified,
            provider=identity.provider,
            role=role_for_email(identity.email),
            is_active=True,
            last_login=datetime.now(timezone.utc),
        )
        logger.info(f"User created from {identity.provider} identity: {user.id}")
        return self._issue_tokens(user)
