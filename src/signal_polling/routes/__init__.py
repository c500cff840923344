"""
Routes module for the EA signal poller

Provides FastAPI routers for all REST endpoints.
"""

from .health import health_router
from .polling import polling_router

__all__ = [
    "health_router",
    "polling_router",
]
