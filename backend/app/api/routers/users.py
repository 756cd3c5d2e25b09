# app/api/routers/users.py
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_session
from app.core.errors import InternalError
from app.schemas.auth import UserOut
from app.services import credentials

logger = logging.getLogger("uvicorn.error")

router = APIRouter(tags=["users"])


@router.api_route("/users", methods=["GET", "HEAD"], response_model=list[UserOut])
async def list_users(session: AsyncSession = Depends(get_session)):
    """
    List every registered user as {id, username}.
    Open endpoint: no authentication, no filtering, no pagination.
    """
    try:
        return await credentials.list_users(session)
    except Exception:
        logger.exception("Error fetching users")
        raise InternalError()
