"""
Authentication dependency for FastAPI route protection.

A request moves from unauthenticated to verified or rejected:
no bearer credentials raise MissingTokenError, a token the token service
refuses raises InvalidTokenError or ExpiredTokenError, and a verified token
yields an AuthenticatedUser that routes take as an explicit parameter.
"""

from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.dependencies.services import get_token_service
from app.exceptions import MissingTokenError
from app.services.tokens import TokenService

# auto_error is off so a missing header maps to MissingTokenError, not a bare 403
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity established from a verified token for the current request."""

    user_id: UUID


async def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    token_service: TokenService = Depends(get_token_service),
) -> AuthenticatedUser:
    if credentials is None or not credentials.credentials:
        raise MissingTokenError()

    user_id = token_service.verify(credentials.credentials)
    return AuthenticatedUser(user_id=user_id)
