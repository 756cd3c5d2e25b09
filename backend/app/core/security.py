# app/core/security.py
"""
Security module for password handling.
Wraps passlib's bcrypt scheme: salted one-way hashing and constant-time verification.
No tokens are issued by this service, so there is no JWT handling here.
"""
from passlib.context import CryptContext
from passlib.exc import PasswordTruncateError
from starlette.concurrency import run_in_threadpool

from app.config import settings

# Work factor used for new hashes (BCRYPT_SALT_ROUNDS, default 12)
BCRYPT_ROUNDS = settings.bcrypt_rounds

# bcrypt only reads the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72

# Password hashing context
# bcrypt embeds its own random salt and cost into every hash string
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=BCRYPT_ROUNDS,
    bcrypt__truncate_error=True,  # refuse to hash passwords bcrypt would silently cut
)


def hash_password(plain: str) -> str:
    """
    Hash a plain text password using bcrypt.

    Args:
        plain: Plain text password to hash

    Returns:
        Hashed password string (safe to store in database)

    Raises:
        PasswordTruncateError: password longer than MAX_PASSWORD_BYTES
        PasswordValueError: password bcrypt cannot represent (NUL bytes)
    """
    if len(plain.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise PasswordTruncateError(pwd_context.handler("bcrypt"))
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """
    Verify a plain text password against a stored bcrypt hash.

    The comparison is delegated to passlib, which compares digests in constant time.
    Malformed hashes, passwords with NUL bytes and passwords longer than
    MAX_PASSWORD_BYTES are treated as a failed verification.
    """
    if len(plain.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        return False


def dummy_verify() -> None:
    """Spend one verification's worth of time without a stored hash."""
    pwd_context.dummy_verify()


async def hash_password_async(plain: str) -> str:
    # bcrypt is CPU bound; keep the event loop free for other requests
    return await run_in_threadpool(hash_password, plain)


async def verify_password_async(plain: str, hashed: str | None) -> bool:
    """
    Async variant of verify_password.
    With hashed=None (unknown user) a dummy verification runs and False is returned,
    so both failure paths take comparable time.
    """
    if hashed is None:
        await run_in_threadpool(dummy_verify)
        return False
    return await run_in_threadpool(verify_password, plain, hashed)
