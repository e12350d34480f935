"""
Password authentication utilities for admin access.
Uses bcrypt for secure password hashing.
"""
import hmac
import logging

import bcrypt

from transfer_site.config import settings, DEV_ADMIN_PASSWORD

logger = logging.getLogger(__name__)


def hash_password(password: str, rounds: int = 12) -> str:
    """
    Hash a password using bcrypt.
    Used for generating the ADMIN_PASSWORD_HASH value.

    Args:
        password: Plain text password
        rounds: bcrypt cost factor

    Returns:
        Hashed password string
    """
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """
    Verify a password against a bcrypt hash.

    Args:
        password: Plain text password to verify
        hashed_password: Hashed password to compare against

    Returns:
        True if password matches, False otherwise (including malformed hashes)
    """
    try:
        return bcrypt.checkpw(
            password.encode("utf-8"),
            hashed_password.encode("utf-8")
        )
    except ValueError:
        logger.warning("Stored admin password hash is malformed")
        return False


def verify_admin_credentials(username: str, password: str) -> bool:
    """
    Check a username/password pair against the configured admin account.

    In development, when no hash is configured, the DEV_ADMIN_* pair is accepted.

    Args:
        username: Submitted username
        password: Submitted plain text password

    Returns:
        True if the pair matches

    Raises:
        ValueError: If admin credentials are not configured outside development
    """
    expected_username = settings.admin_username
    if not expected_username:
        raise ValueError("ADMIN_USERNAME not configured")

    if not hmac.compare_digest(username.encode("utf-8"), expected_username.encode("utf-8")):
        return False

    if settings.ADMIN_PASSWORD_HASH:
        return verify_password(password, settings.ADMIN_PASSWORD_HASH)

    if settings.is_development:
        return hmac.compare_digest(password.encode("utf-8"), DEV_ADMIN_PASSWORD.encode("utf-8"))

    raise ValueError("ADMIN_PASSWORD_HASH not configured")
