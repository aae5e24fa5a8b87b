"""
Common utilities package for the city weather API: password hashing and
logging.
"""

from app.utils.auth import get_password_hash, verify_password
from app.utils.logger import SensitiveDataFilter, sanitize_message, setup_logger

__all__ = [
    # Authentication utilities
    "get_password_hash",
    "verify_password",
    # Logging utilities
    "setup_logger",
    "sanitize_message",
    "SensitiveDataFilter",
]
