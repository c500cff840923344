"""
Configuration module for the EA signal poller

Provides environment-driven settings.
"""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
