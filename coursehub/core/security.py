# core/security.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

from fastapi import HTTPException, status
from jose import JWTError, jwt

from coursehub.core.config import settings
from coursehub.models.user import User

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JWTManager:
    """JWT token management for authentication"""

    def __init__(self):
        self.secret_key = settings.jwt_secret
        self.algorithm = settings.jwt_algorithm
        self.user_token_expire = timedelta(days=settings.jwt_user_expiration)
        self.refresh_token_expire = timedelta(days=settings.jwt_refresh_expiration)
        self.issuer = settings.jwt_issuer

    def create_access_token(
        self,
        user: User,
        custom_expiration: Optional[timedelta] = None,
    ) -> str:
        """
        Create JWT access token for user

        Args:
            user: User model instance
            custom_expiration: Override default expiration

        Returns:
            JWT access token string
        """
        current_time = _utcnow()
        expire = current_time + (custom_expiration or self.user_token_expire)

        payload = {
            "sub": str(user.id),  # Subject (user ID)
            "user_id": user.id,
            "uid": user.uid,
            "role": user.role,
            "email": user.email,
            "exp": int(expire.timestamp()),
            "iat": int(current_time.timestamp()),
            "iss": self.issuer,
            "type": "access",
        }

        token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        logger.info(f"Access token created for user: {user.id}")
        return token

    def create_refresh_token(
        self,
        user: User,
        custom_expiration: Optional[timedelta] = None,
    ) -> str:
        """
        Create JWT refresh token for user (minimal claims)
        """
        current_time = _utcnow()
        expire = current_time + (custom_expiration or self.refresh_token_expire)

        payload = {
            "sub": str(user.id),
            "user_id": user.id,
            "exp": int(expire.timestamp()),
            "iat": int(current_time.timestamp()),
            "iss": self.issuer,
            "type": "refresh",
        }

        token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        logger.info(f"Refresh token created for user: {user.id}")
        return token

    def create_token_pair(self, user: User) -> Tuple[str, str]:
        """
        Create both access and refresh tokens

        Returns:
            Tuple of (access_token, refresh_token)
        """
        return self.create_access_token(user), self.create_refresh_token(user)

    def verify_token(self, token: str, token_type: str = "access") -> Dict[str, Any]:
        """
        Verify and decode JWT token
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options={"verify_exp": True},
            )
        except JWTError as e:
            logger.warning(f"JWT verification failed: {e}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or expired token",
                headers={"WWW-Authenticate": "Bearer"},
            )

        # Verify token type (check 'type' field, not 'role')
        if payload.get("type") != token_type:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=f"Invalid token type. Expected {token_type}",
                headers={"WWW-Authenticate": "Bearer"},
            )

        return payload


# Global instance
jwt_manager = JWTManager()
