"""
Identity provider integration.

Tokens are issued by the external identity provider; this module only
verifies them and turns the verified claims into a Principal. Requests
without credentials act as the anonymous principal.
"""

import logging
from typing import Any, Dict, Optional
from uuid import UUID
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt, JWTError

from lms_backend.api.exceptions import UnauthorizedException
from lms_backend.permissions.principal import Principal, anonymous_principal
from lms_backend.settings import settings

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


class PrincipalBuilder:
    """Builds principals from verified identity provider claims"""

    @staticmethod
    def decode_token(token: str) -> Dict[str, Any]:
        if not settings.AUTH_JWT_SECRET:
            logger.error("AUTH_JWT_SECRET is not configured, rejecting bearer token")
            raise UnauthorizedException("Authentication is not configured")

        audience = settings.AUTH_JWT_AUDIENCE or None

        try:
            return jwt.decode(
                token,
                settings.AUTH_JWT_SECRET,
                algorithms=[settings.AUTH_JWT_ALGORITHM],
                audience=audience,
                options={"verify_aud": audience is not None},
            )
        except JWTError as e:
            logger.info(f"Token verification failed: {e}")
            raise UnauthorizedException("Invalid token")

    @staticmethod
    def from_claims(claims: Dict[str, Any]) -> Principal:
        subject = claims.get("sub")

        try:
            user_id = UUID(str(subject))
        except (TypeError, ValueError):
            raise UnauthorizedException("Token subject is not a principal id")

        return Principal(user_id=user_id, email=claims.get("email"), claims=claims)

    @classmethod
    def from_token(cls, token: str) -> Principal:
        return cls.from_claims(cls.decode_token(token))


def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> Principal:
    """FastAPI dependency resolving the acting principal of a request"""
    if credentials is None:
        return anonymous_principal()

    return PrincipalBuilder.from_token(credentials.credentials)
