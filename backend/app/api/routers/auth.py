# app/api/routers/auth.py
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import read_credentials
from app.core.db import get_session
from app.core.errors import AppError, InternalError
from app.schemas.auth import CredentialsIn, LoginResponse, RegisterResponse
from app.services import credentials

logger = logging.getLogger("uvicorn.error")

router = APIRouter(tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=RegisterResponse)
async def register(
    body: CredentialsIn = Depends(read_credentials),
    session: AsyncSession = Depends(get_session),
):
    """
    Register a new user account.

    Creates a user with the provided username and password. The password is
    hashed with bcrypt before storage. Usernames must be unique.

    Returns:
        201: {"message": "User registered successfully", "user": {"id", "username"}}

    Errors:
        400: missing username or password
        400: username already exists
        500: unexpected failure (details only in the server log)
    """
    try:
        user = await credentials.register(session, body.username, body.password)
    except AppError:
        raise
    except Exception:
        logger.exception("Registration error")
        raise InternalError()
    return {"message": "User registered successfully", "user": user.to_public()}


@router.post("/login", response_model=LoginResponse)
async def login(
    body: CredentialsIn = Depends(read_credentials),
    session: AsyncSession = Depends(get_session),
):
    """
    Check user credentials.

    No session or token is created; a successful response only confirms that
    the username/password pair is valid. "token" is always null.

    Returns:
        200: {"message": "Login successful", "user": {"id", "username"}, "token": null}

    Errors:
        400: missing username or password
        401: unknown username or wrong password (same message for both)
        500: unexpected failure
    """
    try:
        user = await credentials.verify(session, body.username, body.password)
    except AppError:
        raise
    except Exception:
        logger.exception("Login error")
        raise InternalError()
    return {"message": "Login successful", "user": user.to_public(), "token": None}
