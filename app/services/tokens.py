"""
Signed, time-limited identity tokens.

Tokens are HS256 JWTs carrying the user id in ``sub`` plus ``iat`` and
``exp`` claims. The server keeps no session state, so a token stays valid
until it expires or the signing secret changes.
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from uuid import UUID

from jose import JWTError, jwt

from app.config import Settings
from app.exceptions import ExpiredTokenError, InvalidTokenError

DEFAULT_TOKEN_LIFETIME = timedelta(days=7)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TokenService:
    def __init__(
        self,
        secret_key: str,
        *,
        algorithm: str = "HS256",
        lifetime: timedelta = DEFAULT_TOKEN_LIFETIME,
        clock: Callable[[], datetime] = _utcnow,
    ):
        if not secret_key:
            raise ValueError("Token signing secret must not be empty")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.lifetime = lifetime
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "TokenService":
        return cls(
            settings.secret_key,
            algorithm=settings.jwt_algorithm,
            lifetime=timedelta(days=settings.access_token_expire_days),
            **kwargs,
        )

    def issue(self, subject_id: UUID) -> str:
        """Create a token for ``subject_id`` that expires ``lifetime`` from now."""
        issued_at = self._clock()
        claims = {
            "sub": str(subject_id),
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self.lifetime).timestamp()),
        }
        return jwt.encode(claims, self._secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> UUID:
        """
        Return the subject id of a valid token.

        Raises InvalidTokenError for a bad signature or malformed claims and
        ExpiredTokenError once ``exp`` has passed. Expiry is checked against
        the service clock rather than python-jose's wall clock.
        """
        try:
            claims = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
        except JWTError as e:
            raise InvalidTokenError() from e

        expires_at = claims.get("exp")
        if not isinstance(expires_at, int | float):
            raise InvalidTokenError()
        if self._clock().timestamp() >= expires_at:
            raise ExpiredTokenError()

        try:
            return UUID(str(claims["sub"]))
        except (KeyError, ValueError) as e:
            raise InvalidTokenError() from e
