"""
Password hashing utilities built on bcrypt.

bcrypt only reads the first 72 bytes of a password; input is truncated to
that length for both hashing and verification so long passwords behave
consistently across bcrypt releases.
"""

import bcrypt

BCRYPT_MAX_PASSWORD_BYTES = 72
DEFAULT_BCRYPT_ROUNDS = 10


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]


def get_password_hash(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """Hash a plain text password using bcrypt with a fresh salt."""
    salt = bcrypt.gensalt(rounds=rounds)
    hashed_password = bcrypt.hashpw(password=_password_bytes(password), salt=salt)
    return hashed_password.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain text password against a hashed password."""
    try:
        return bcrypt.checkpw(
            _password_bytes(plain_password), hashed_password.encode("utf-8")
        )
    except ValueError:
        # Malformed stored hash
        return False
