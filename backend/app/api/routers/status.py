# app/api/routers/status.py
import datetime as dt

from fastapi import APIRouter

from app.config import settings
from app.schemas.status import BannerResponse, HealthResponse, UnityTestResponse

router = APIRouter(tags=["status"])

ENDPOINTS = ["/register", "/login", "/users", "/health", "/unity-test"]


@router.api_route("/", methods=["GET", "HEAD"], response_model=BannerResponse)
async def banner():
    return {"message": settings.APP_NAME, "endpoints": ENDPOINTS, "cors": "configured"}


@router.api_route("/health", methods=["GET", "HEAD"], response_model=HealthResponse)
async def health():
    # Static payload: the database is not probed here
    return {"status": "OK", "database": "Connected", "cors": "configured", "unityCompatible": True}


@router.api_route("/unity-test", methods=["GET", "HEAD"], response_model=UnityTestResponse)
async def unity_test():
    """Diagnostic endpoint for Unity clients checking CORS and reachability."""
    return {
        "unityCompatible": True,
        "timestamp": dt.datetime.now(dt.timezone.utc).isoformat().replace("+00:00", "Z"),
        "cors": "enabled",
        "instructions": "Use UnityWebRequest or WWW class to call this API",
    }
