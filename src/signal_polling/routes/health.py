"""
Health route
"""

from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel

from .. import __version__


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    timestamp: str
    version: str


health_router = APIRouter()


@health_router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint"""
    return HealthResponse(
        status="ok",
        timestamp=datetime.now().isoformat(),
        version=__version__
    )
