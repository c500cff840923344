"""
Data models for the EA signal poller
"""

from .signal_types import DatabaseSignal, LicenseLookupResponse, NewSignalsResponse, PollingState

__all__ = [
    "DatabaseSignal",
    "LicenseLookupResponse",
    "NewSignalsResponse",
    "PollingState",
]
