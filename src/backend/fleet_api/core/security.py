"""Password hashing utilities."""

import bcrypt

from fleet_api.core.config import settings

# bcrypt input limit
MAX_PASSWORD_BYTES = 72


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return bcrypt.checkpw(
        plain_password.encode('utf-8'),
        hashed_password.encode('utf-8')
    )


def get_password_hash(password: str, rounds: int | None = None) -> str:
    """Generate password hash.

    Raises ValueError for passwords longer than MAX_PASSWORD_BYTES.
    """
    encoded = password.encode('utf-8')
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(
        encoded,
        bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    ).decode('utf-8')
