"""
Error taxonomy for the city weather API.

Every error carries a machine-stable ``reason``, the HTTP status it maps to
and a human-readable message. The application factory registers a single
handler that renders them as ``{"reason": ..., "message": ...}``.
"""

from fastapi import status


class AppError(Exception):
    """Base class for errors that surface to the client as 4xx responses."""

    reason: str = "AppError"
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def headers(self) -> dict[str, str] | None:
        if self.status_code == status.HTTP_401_UNAUTHORIZED:
            return {"WWW-Authenticate": "Bearer"}
        return None

    def to_dict(self) -> dict[str, str]:
        return {"reason": self.reason, "message": self.message}


class DuplicateEmailError(AppError):
    reason = "DuplicateEmail"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Email already registered"


class InvalidCredentialsError(AppError):
    reason = "InvalidCredentials"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid email or password"


class MissingTokenError(AppError):
    reason = "MissingToken"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "No token, authorization denied"


class InvalidTokenError(AppError):
    reason = "InvalidToken"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Token is not valid"


class ExpiredTokenError(AppError):
    reason = "ExpiredToken"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Token has expired"


class DuplicateCityError(AppError):
    reason = "DuplicateCity"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "City already added"


class NotFoundError(AppError):
    reason = "NotFound"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ProviderUnavailableError(Exception):
    """
    Raised by the weather gateway for any provider failure.

    Never reaches the client: the city read aggregator converts it into a
    degraded weather record.
    """

    def __init__(self, city_name: str, cause: str):
        self.city_name = city_name
        self.cause = cause
        super().__init__(f"Weather provider unavailable for '{city_name}': {cause}")


__all__ = [
    "AppError",
    "DuplicateEmailError",
    "InvalidCredentialsError",
    "MissingTokenError",
    "InvalidTokenError",
    "ExpiredTokenError",
    "DuplicateCityError",
    "NotFoundError",
    "ProviderUnavailableError",
]
