"""
SignalSource protocol - the two remote lookups a polling cycle performs.
"""

from datetime import datetime, timezone
from typing import List, Optional, Protocol

from ..models.signal_types import DatabaseSignal


class SignalSource(Protocol):
    """Resolves license keys to EAs and fetches an EA's new signals."""

    async def get_ea_from_license(self, license_key: str) -> Optional[str]:
        """Return the EA ID for a license, or None if the license has none.

        Raises ResolutionFailure if the lookup itself fails.
        """
        ...

    async def get_new_signals(self, ea_id: str, since: datetime) -> List[DatabaseSignal]:
        """Return signals published for ea_id after since, in source order.

        Raises FetchFailure on transport errors, bad responses or timeout.
        """
        ...

    async def close(self) -> None:
        ...


def format_since(moment: datetime) -> str:
    """Format a timestamp as UTC ISO-8601 with milliseconds and a Z suffix"""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
