"""bcrypt password hashing and reset-token helpers."""

import hashlib
import secrets

import bcrypt

from cleanconnect.config import get_settings


def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash a password with a fresh bcrypt salt.

    Args:
        password: Plain-text password (at most 72 bytes once encoded)
        rounds: bcrypt cost factor (defaults to the BCRYPT_ROUNDS setting)

    Returns:
        The bcrypt hash as text
    """
    salt = bcrypt.gensalt(rounds=rounds or get_settings().bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    """Check a password against a stored bcrypt hash."""
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash or over-long password
        return False


def generate_reset_token() -> tuple[str, str]:
    """Create a password reset token.

    Returns:
        ``(raw_token, token_digest)``: the raw token is emailed to the user,
        only the sha256 digest is stored.
    """
    raw_token = secrets.token_hex(32)
    return raw_token, digest_reset_token(raw_token)


def digest_reset_token(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()
