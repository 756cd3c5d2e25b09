# app/services/credentials.py
"""
Credential service: registration, login verification and user listing.

All functions take an AsyncSession and raise app.core.errors types on expected
failures. Anything else propagates to the route, which reports it as a 500.
"""
import logging

from passlib.exc import PasswordTruncateError, PasswordValueError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import AuthError, ConflictError, ValidationError
from app.core.security import MAX_PASSWORD_BYTES, hash_password_async, verify_password_async
from app.models.user import User

logger = logging.getLogger("uvicorn.error")


def _require_credentials(username: str | None, password: str | None) -> None:
    if not username or not password:
        raise ValidationError("Username and password are required")


async def get_user_by_username(session: AsyncSession, username: str) -> User | None:
    result = await session.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


async def register(session: AsyncSession, username: str | None, password: str | None) -> User:
    """
    Create a new user with a bcrypt-hashed password.

    Raises:
        ValidationError: username or password missing/empty, password over
            MAX_PASSWORD_BYTES or containing NUL characters
        ConflictError: username already taken (pre-check, or the UNIQUE constraint
            when a concurrent registration wins the race)
    """
    _require_credentials(username, password)

    # Best-effort pre-check; the UNIQUE constraint is the real guarantee
    if await get_user_by_username(session, username) is not None:
        raise ConflictError("Username already exists")

    try:
        password_hash = await hash_password_async(password)
    except PasswordTruncateError:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    except PasswordValueError:
        raise ValidationError("Password contains unsupported characters")

    user = User(username=username, password_hash=password_hash)
    session.add(user)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        logger.info("Concurrent registration lost the race for username=%s", username)
        raise ConflictError("Username already exists")
    await session.refresh(user)
    logger.info("Registered user id=%s username=%s", user.id, user.username)
    return user


async def verify(session: AsyncSession, username: str | None, password: str | None) -> User:
    """
    Check a username/password pair.

    Raises:
        ValidationError: username or password missing/empty
        AuthError: unknown username or wrong password (same message for both)
    """
    _require_credentials(username, password)

    user = await get_user_by_username(session, username)
    stored_hash = user.password_hash if user is not None else None
    if not await verify_password_async(password, stored_hash):
        raise AuthError("Invalid username or password")
    return user


async def list_users(session: AsyncSession) -> list[dict]:
    """All users as {id, username}, ordered by id. Unfiltered and unpaginated."""
    result = await session.execute(select(User.id, User.username).order_by(User.id))
    return [{"id": row.id, "username": row.username} for row in result]
