"""
External identity providers.

The marketplace never talks to an identity SDK directly: a provider turns a
client-supplied ID token into an ``ExternalIdentity`` and the auth service
maps that onto a local ``User`` through the profile store.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from jose import JWTError, jwt

from coursehub.core.config import settings
from coursehub.core.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExternalIdentity:
    uid: str
    email: str
    provider: str
    full_name: str = ""
    photo_url: Optional[str] = None
    phone_number: Optional[str] = None
    email_verified: bool = False


class AuthProvider(ABC):
    name: str = "external"

    @abstractmethod
    def verify_id_token(self, id_token: str) -> ExternalIdentity:
        """Return the identity behind ``id_token`` or raise ``UnauthorizedError``."""


class JWTIdentityProvider(AuthProvider):
    """
    Verifies HS/RS-signed ID tokens issued by a federated identity service.

    Expected claims: ``sub`` (or ``uid``), ``email``, optionally ``name``,
    ``picture``, ``phone_number`` and ``email_verified``.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        issuer: Optional[str] = None,
        audience: Optional[str] = None,
        name: str = "firebase",
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.issuer = issuer
        self.audience = audience
        self.name = name

    def verify_id_token(self, id_token: str) -> ExternalIdentity:
        if not self.secret:
            logger.error("Identity token secret is not configured")
            raise UnauthorizedError("External sign-in is not configured")

        try:
            claims = jwt.decode(
                id_token,
                self.secret,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                audience=self.audience,
                options={"verify_aud": self.audience is not None},
            )
        except JWTError as e:
            logger.warning(f"ID token rejected: {e}")
            raise UnauthorizedError("Invalid identity token")

        uid = claims.get("uid") or claims.get("sub")
        email = claims.get("email")
        if not uid or not email:
            raise UnauthorizedError("Identity token is missing uid or email")

        return ExternalIdentity(
            uid=str(uid),
            email=email.lower(),
            provider=self.name,
            full_name=claims.get("name") or "",
            photo_url=claims.get("picture"),
            phone_number=claims.get("phone_number"),
            email_verified=bool(claims.get("email_verified", False)),
        )


def get_auth_provider() -> AuthProvider:
    """FastAPI dependency; override in tests or to plug another provider."""
    return JWTIdentityProvider(
        secret=settings.identity_token_secret,
        algorithm=settings.identity_token_algorithm,
        issuer=settings.identity_token_issuer,
        audience=settings.identity_token_audience,
        name=settings.identity_provider_name,
    )
