"""
Test configuration and fixtures for the EA signal poller.
"""

import asyncio
import sys
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / 'src'
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from signal_polling.models.signal_types import DatabaseSignal
from signal_polling.services.polling_errors import FetchFailure, ResolutionFailure
from signal_polling.services.scheduler import JobCallback, ScheduledJob, Scheduler
from signal_polling.services.signal_poller import SignalPoller
from signal_polling.services.signal_inbox import SignalInbox

START_TIME = 1_700_000_000.0


class ManualJob(ScheduledJob):
    """Job driven by ManualScheduler.advance"""

    def __init__(self, name: str, callback: JobCallback, due: float, interval: Optional[float] = None):
        super().__init__(name)
        self.callback = callback
        self.due = due
        self.interval = interval
        self.done = False


class ManualScheduler(Scheduler):
    """Fake clock; jobs only run when the test advances time"""

    def __init__(self, start: float = START_TIME):
        self.now = start
        self.jobs: List[ManualJob] = []

    def time(self) -> float:
        return self.now

    def call_every(self, interval, callback, immediate=True, name="recurring"):
        job = ManualJob(name, callback, self.now if immediate else self.now + interval, interval)
        self.jobs.append(job)
        return job

    def call_later(self, delay, callback, name="one-shot"):
        job = ManualJob(name, callback, self.now + delay)
        self.jobs.append(job)
        return job

    def pending(self) -> List[ManualJob]:
        return [job for job in self.jobs if not job.cancelled and not job.done]

    def tick(self, seconds: float) -> None:
        """Move the clock without running jobs"""
        self.now += seconds

    async def advance(self, seconds: float = 0.0) -> None:
        """Move the clock forward, running every job that falls due"""
        target = self.now + seconds
        while True:
            due = [job for job in self.pending() if job.due <= target]
            if not due:
                break
            job = min(due, key=lambda j: j.due)
            self.now = max(self.now, job.due)
            if job.interval is None:
                job.done = True
            else:
                job.due += job.interval
            await job.callback()
        self.now = max(self.now, target)


class FakeSignalSource:
    """In-memory SignalSource recording every call"""

    def __init__(self, ea_by_license: Optional[Dict[str, Optional[str]]] = None):
        self.ea_by_license: Dict[str, Optional[str]] = dict(ea_by_license or {})
        self.signals_by_ea: Dict[str, List[DatabaseSignal]] = {}
        self.fail_resolution = False
        self.fail_fetch = False
        self.fetch_exception: Optional[Exception] = None
        self.gate: Optional[asyncio.Event] = None
        self.on_fetch: Optional[Callable[[], None]] = None
        self.resolve_calls: List[str] = []
        self.fetch_calls: List[Tuple[str, datetime]] = []
        self.closed = False

    async def get_ea_from_license(self, license_key: str) -> Optional[str]:
        self.resolve_calls.append(license_key)
        if self.fail_resolution:
            raise ResolutionFailure(license_key, "API call failed: 500")
        return self.ea_by_license.get(license_key)

    async def get_new_signals(self, ea_id: str, since: datetime) -> List[DatabaseSignal]:
        self.fetch_calls.append((ea_id, since))
        if self.gate is not None:
            await self.gate.wait()
        if self.on_fetch is not None:
            self.on_fetch()
        if self.fetch_exception is not None:
            raise self.fetch_exception
        if self.fail_fetch:
            raise FetchFailure(ea_id, "API call failed: 503")
        return list(self.signals_by_ea.get(ea_id, []))

    async def close(self) -> None:
        self.closed = True


def make_signal(signal_id: str, action: str, ea: str = "MockEA", **extra) -> DatabaseSignal:
    fields = {
        "id": signal_id,
        "ea": ea,
        "asset": "XAUUSD",
        "latestupdate": "2024-01-01T12:00:00.000Z",
        "type": "TRADE",
        "action": action,
        "price": "2350.10",
        "tp": "2360.00",
        "sl": "2340.00",
        "time": "2024-01-01T12:00:00.000Z",
        "results": "PENDING",
    }
    fields.update(extra)
    return DatabaseSignal(**fields)


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def source() -> FakeSignalSource:
    return FakeSignalSource({"ABC123": "MockEA", "XYZ789": "OtherEA"})


@pytest.fixture
def poller(scheduler: ManualScheduler, source: FakeSignalSource) -> SignalPoller:
    """Poller with fake timing and source, using the documented defaults"""
    return SignalPoller(
        source=source,
        scheduler=scheduler,
        polling_interval=30,
        max_consecutive_errors=3,
        error_cooldown=300,
        initial_lookback=3600,
        enabled=True
    )


@pytest.fixture
def inbox() -> SignalInbox:
    return SignalInbox(max_size=100)


def pytest_collection_modifyitems(config, items):
    """Add markers based on test location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
