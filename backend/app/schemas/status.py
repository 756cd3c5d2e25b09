# app/schemas/status.py
"""
Pydantic schemas for the banner, health and Unity diagnostic endpoints.
"""
from pydantic import BaseModel


class BannerResponse(BaseModel):
    message: str
    endpoints: list[str]
    cors: str = "configured"


class HealthResponse(BaseModel):
    status: str = "OK"
    database: str = "Connected"
    cors: str = "configured"
    unityCompatible: bool = True


class UnityTestResponse(BaseModel):
    unityCompatible: bool = True
    timestamp: str  # ISO-8601 UTC
    cors: str = "enabled"
    instructions: str
