"""
Signal polling error classes
"""

from typing import Optional


class SignalPollingError(Exception):
    """Base signal polling error class"""

    def __init__(
        self,
        message: str,
        license_key: Optional[str] = None,
        error_code: str = "SIGNAL_POLLING_FAILED"
    ):
        super().__init__(message)
        self.license_key = license_key
        self.error_code = error_code


class ResolutionFailure(SignalPollingError):
    """License to EA lookup failed"""

    def __init__(self, license_key: str, reason: str):
        super().__init__(
            f"Failed to fetch EA from license: {reason}",
            license_key,
            "RESOLUTION_FAILED"
        )
        self.reason = reason


class FetchFailure(SignalPollingError):
    """New signals lookup failed or timed out"""

    def __init__(self, ea_id: str, reason: str, timed_out: bool = False, license_key: Optional[str] = None):
        super().__init__(
            f"Failed to fetch new signals for EA {ea_id}: {reason}",
            license_key,
            "FETCH_FAILED"
        )
        self.ea_id = ea_id
        self.reason = reason
        self.timed_out = timed_out


class SuspendedAfterThreshold(SignalPollingError):
    """Polling paused after too many consecutive failures"""

    def __init__(self, license_key: str, error_count: int, cooldown_seconds: float):
        super().__init__(
            f"Polling suspended after {error_count} consecutive errors, resuming in {cooldown_seconds:g}s",
            license_key,
            "POLLING_SUSPENDED"
        )
        self.error_count = error_count
        self.cooldown_seconds = cooldown_seconds
