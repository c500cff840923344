"""
Signal inbox

Keeps the most recent delivered signals and polling errors in memory so the
control API can show them. Its methods are used as the poller callbacks.
"""

from collections import deque
from datetime import datetime
from typing import Any, Deque, Dict, List, Optional

from ..config import settings
from ..models.signal_types import DatabaseSignal


class SignalInbox:
    """Bounded buffer of received signals and error messages"""

    def __init__(self, max_size: Optional[int] = None):
        size = settings.inbox_max_size if max_size is None else max_size
        self._signals: Deque[Dict[str, Any]] = deque(maxlen=size)
        self._errors: Deque[Dict[str, Any]] = deque(maxlen=size)
        self.total_signals = 0
        self.total_errors = 0

    def on_signal_found(self, signal: DatabaseSignal) -> None:
        self._signals.append({
            "received_at": datetime.now().isoformat(),
            "signal": signal.model_dump()
        })
        self.total_signals += 1

    def on_error(self, message: str) -> None:
        self._errors.append({
            "received_at": datetime.now().isoformat(),
            "message": message
        })
        self.total_errors += 1

    def recent_signals(self, limit: int = 50) -> List[Dict[str, Any]]:
        """Newest signals, oldest first"""
        return list(self._signals)[-limit:] if limit > 0 else []

    def recent_errors(self, limit: int = 50) -> List[Dict[str, Any]]:
        """Newest errors, oldest first"""
        return list(self._errors)[-limit:] if limit > 0 else []

    def clear(self) -> None:
        self._signals.clear()
        self._errors.clear()


# Global inbox receiving signals from the global poller
signal_inbox = SignalInbox()
