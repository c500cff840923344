"""
Signal polling control routes
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from ..services.signal_inbox import SignalInbox, signal_inbox
from ..services.signal_poller import SignalPoller, signal_poller
from ..utils.logging_config import get_logger

logger = get_logger("signal_polling.routes")

polling_router = APIRouter()


class StartPollingRequest(BaseModel):
    """Start polling request body"""
    license_key: str = Field(..., min_length=1, description="License key to poll signals for")
    backfill: bool = Field(default=False, description="Fetch the initial lookback window on the first poll")


class PollingStatusResponse(BaseModel):
    """Polling status"""
    is_running: bool
    state: str
    license_key: Optional[str] = None
    ea: Optional[str] = None
    last_poll_time: Optional[str] = None
    is_enabled: bool
    consecutive_errors: int
    poll_count: int
    suspended_until: Optional[str] = None
    last_error: Optional[str] = None
    cached_licenses: int


class PollingActionResponse(BaseModel):
    """Result of a polling control action"""
    success: bool
    message: str
    status: PollingStatusResponse


def get_signal_poller() -> SignalPoller:
    return signal_poller


def get_signal_inbox() -> SignalInbox:
    return signal_inbox


def _action_response(poller: SignalPoller, message: str, success: bool = True) -> PollingActionResponse:
    return PollingActionResponse(
        success=success,
        message=message,
        status=PollingStatusResponse(**poller.get_status())
    )


@polling_router.get("/api/polling/status", response_model=PollingStatusResponse)
async def get_polling_status(poller: SignalPoller = Depends(get_signal_poller)):
    """Current polling session status"""
    return PollingStatusResponse(**poller.get_status())


@polling_router.post("/api/polling/start", response_model=PollingActionResponse)
async def start_polling(
    request: StartPollingRequest,
    poller: SignalPoller = Depends(get_signal_poller),
    inbox: SignalInbox = Depends(get_signal_inbox)
):
    """Start polling signals for a license"""
    started = poller.start_polling(
        request.license_key,
        on_signal_found=inbox.on_signal_found,
        on_error=inbox.on_error,
        backfill=request.backfill
    )
    if not started:
        status = poller.get_status()
        if status["license_key"] != request.license_key:
            raise HTTPException(
                status_code=409,
                detail="Polling already active for another license; stop it first"
            )
        return _action_response(poller, "Signal polling already running", success=False)

    logger.info("Polling started via API", license_key=request.license_key)
    return _action_response(poller, "Signal polling started")


@polling_router.post("/api/polling/stop", response_model=PollingActionResponse)
async def stop_polling(poller: SignalPoller = Depends(get_signal_poller)):
    """Stop polling"""
    poller.stop_polling()
    return _action_response(poller, "Signal polling stopped")


@polling_router.post("/api/polling/enable", response_model=PollingActionResponse)
async def enable_remote_calls(poller: SignalPoller = Depends(get_signal_poller)):
    """Use the signals API for new polling sessions"""
    poller.enable()
    return _action_response(poller, "Remote calls enabled")


@polling_router.post("/api/polling/disable", response_model=PollingActionResponse)
async def disable_remote_calls(poller: SignalPoller = Depends(get_signal_poller)):
    """Stop polling and switch new sessions to mock data"""
    poller.disable()
    return _action_response(poller, "Remote calls disabled; polling stopped")


@polling_router.get("/api/signals")
async def get_recent_signals(
    limit: int = Query(default=50, ge=1, le=500),
    inbox: SignalInbox = Depends(get_signal_inbox)
) -> Dict[str, Any]:
    """Most recently delivered signals"""
    signals: List[Dict[str, Any]] = inbox.recent_signals(limit)
    return {
        "success": True,
        "count": len(signals),
        "total": inbox.total_signals,
        "signals": signals
    }


@polling_router.get("/api/signals/errors")
async def get_recent_errors(
    limit: int = Query(default=50, ge=1, le=500),
    inbox: SignalInbox = Depends(get_signal_inbox)
) -> Dict[str, Any]:
    """Most recent polling errors"""
    errors = inbox.recent_errors(limit)
    return {
        "success": True,
        "count": len(errors),
        "total": inbox.total_errors,
        "errors": errors
    }
