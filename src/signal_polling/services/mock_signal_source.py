"""
Mock signal source for offline use and development

Provides simulated signals without making real API calls.
"""

import random
import time
from datetime import datetime, timezone
from typing import List, Optional

from ..models.signal_types import DatabaseSignal
from ..utils.logging_config import get_logger

logger = get_logger("signal_polling.mock")


class MockSignalSource:
    """Mock signal source producing one random signal per poll"""

    MOCK_EA = "MockEA"

    def __init__(self, asset: str = "XAUUSD", rng: Optional[random.Random] = None):
        self.asset = asset
        self._rng = rng or random.Random()

    async def close(self):
        """Mock close method"""
        pass

    async def get_ea_from_license(self, license_key: str) -> Optional[str]:
        """Every license maps to the mock EA"""
        return self.MOCK_EA

    async def get_new_signals(self, ea_id: str, since: datetime) -> List[DatabaseSignal]:
        """Generate a single random BUY/SELL signal"""
        signal = self._generate_mock_signal(ea_id)
        logger.info("🎭 Mock signal generated", signal_id=signal.id, action=signal.action)
        return [signal]

    def _generate_mock_signal(self, ea_id: str) -> DatabaseSignal:
        now = datetime.now(timezone.utc).isoformat()
        return DatabaseSignal(
            id=f"mock-{int(time.time() * 1000)}",
            ea=ea_id,
            asset=self.asset,
            latestupdate=now,
            type="TRADE",
            action="BUY" if self._rng.random() > 0.5 else "SELL",
            price=f"{self._rng.random() * 1000 + 2000:.2f}",
            tp=f"{self._rng.random() * 50 + 10:.2f}",
            sl=f"{self._rng.random() * 30 + 5:.2f}",
            time=now,
            results="PENDING"
        )
