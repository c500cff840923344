"""
Services module for the EA signal poller

Provides the poller, its scheduler, the signals API client and the mock source.
"""

from .polling_errors import (
    SignalPollingError,
    ResolutionFailure,
    FetchFailure,
    SuspendedAfterThreshold
)
from .scheduler import Scheduler, ScheduledJob, AsyncioScheduler
from .signal_source import SignalSource, format_since
from .signals_api_client import SignalsApiClient
from .mock_signal_source import MockSignalSource
from .signal_poller import SignalPoller, PollingSession, signal_poller
from .signal_inbox import SignalInbox, signal_inbox

__all__ = [
    "SignalPollingError",
    "ResolutionFailure",
    "FetchFailure",
    "SuspendedAfterThreshold",
    "Scheduler",
    "ScheduledJob",
    "AsyncioScheduler",
    "SignalSource",
    "format_since",
    "SignalsApiClient",
    "MockSignalSource",
    "SignalPoller",
    "PollingSession",
    "signal_poller",
    "SignalInbox",
    "signal_inbox",
]
