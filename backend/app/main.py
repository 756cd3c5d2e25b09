# app/main.py
"""
FastAPI application entry point.

Middleware stack (outermost to innermost):
  1. SecurityHeadersMiddleware -- nosniff / frame / XSS headers on every response
  2. OriginFilterMiddleware    -- CORS allow-list, 403 for unknown origins, answers preflights

The lifespan runs the one-time database startup phase (engine + users table)
before traffic is accepted, and disposes of the pool on shutdown.
"""
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Your configuration and DB
from app.config import settings
from app.core.cors import OriginFilterMiddleware, OriginPolicy, SecurityHeadersMiddleware
from app.core.db import close_db, init_db, init_schema
from app.core.errors import AppError, NotFoundError, ValidationError

from app.api.routers import auth, status as status_router, users

logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Database problems are logged, never fatal: requests report 500 until the DB is reachable
    try:
        await init_db()
        await init_schema()
    except Exception:
        logger.exception("Error initializing database")
    yield
    await close_db()


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

app.add_middleware(OriginFilterMiddleware, policy=OriginPolicy(settings.cors_origins))
app.add_middleware(SecurityHeadersMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # Unknown path and known path with the wrong verb are both "not found"
    if exc.status_code in (404, 405):
        return await app_error_handler(request, NotFoundError())
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return await app_error_handler(request, ValidationError("Invalid request"))


# REST (no version prefix)
app.include_router(status_router.router)
app.include_router(auth.router)
app.include_router(users.router)


def run() -> None:
    """Console entry point: serve the app with uvicorn on HOST:PORT."""
    uvicorn.run("app.main:app", host=settings.host, port=settings.port)
