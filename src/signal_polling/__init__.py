"""
EA Signal Poller

Polls the signals API for the EA attached to a license key and delivers new
trading signals to callbacks, suspending itself after repeated failures.
"""

__version__ = "1.0.0"

from .config.settings import settings  # noqa: E402,F401

__all__ = [
    "__version__",
    "settings",
]
