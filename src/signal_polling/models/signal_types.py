"""
Signal and polling type definitions
"""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class DatabaseSignal(BaseModel):
    """Trade signal record published for an EA"""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str = Field(..., description="Signal ID")
    ea: Optional[str] = Field(default=None, description="EA name")
    asset: Optional[str] = Field(default=None, description="Traded asset (e.g., XAUUSD)")
    latestupdate: Optional[str] = Field(default=None, description="Last update time")
    type: Optional[str] = Field(default=None, description="Signal type")
    action: Optional[str] = Field(default=None, description="Trade action (BUY/SELL)")
    price: Optional[str] = Field(default=None, description="Entry price")
    tp: Optional[str] = Field(default=None, description="Take profit")
    sl: Optional[str] = Field(default=None, description="Stop loss")
    time: Optional[str] = Field(default=None, description="Signal time")
    results: Optional[str] = Field(default=None, description="Result status")


class LicenseLookupResponse(BaseModel):
    """Response of the license to EA lookup endpoint"""
    ea_id: Optional[str] = Field(default=None, alias="eaId", description="Resolved EA ID, null if none")


class NewSignalsResponse(BaseModel):
    """Response of the new signals endpoint"""
    signals: List[DatabaseSignal] = Field(default_factory=list, description="Signals since the requested time")


class PollingState(str, Enum):
    """Polling session state"""
    IDLE = "idle"
    RUNNING = "running"
    SUSPENDED = "suspended"
