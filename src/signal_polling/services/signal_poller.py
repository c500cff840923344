"""
Signal poller

Periodically resolves the EA attached to a license key, fetches the signals
published for it since the last successful poll and hands each one to the
caller's callbacks. Repeated failures suspend polling; it resumes by itself
after a cooldown.
"""

import inspect
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import partial
from itertools import count
from typing import Any, Callable, Dict, Optional

from ..config import settings
from ..models.signal_types import DatabaseSignal, PollingState
from ..utils.logging_config import get_logger
from ..utils.ttl_cache import TTLCache
from .mock_signal_source import MockSignalSource
from .polling_errors import SignalPollingError, SuspendedAfterThreshold
from .scheduler import AsyncioScheduler, ScheduledJob, Scheduler
from .signal_source import SignalSource, format_since
from .signals_api_client import SignalsApiClient

logger = get_logger("signal_polling.poller")

SignalCallback = Callable[[DatabaseSignal], Any]
ErrorCallback = Callable[[str], Any]

_NOT_CACHED = object()


@dataclass
class PollingSession:
    """State of one start_polling .. stop_polling lifetime"""
    license_key: str
    generation: int
    source: SignalSource
    started_at: datetime
    on_signal_found: Optional[SignalCallback] = None
    on_error: Optional[ErrorCallback] = None
    state: PollingState = PollingState.RUNNING
    ea_id: Optional[str] = None
    last_poll_time: Optional[datetime] = None
    consecutive_errors: int = 0
    poll_count: int = 0
    suspended_until: Optional[datetime] = None
    last_error: Optional[str] = None


class SignalPoller:
    """Polls the signals API for one license at a time"""

    def __init__(
        self,
        source: Optional[SignalSource] = None,
        mock_source: Optional[SignalSource] = None,
        scheduler: Optional[Scheduler] = None,
        ea_cache: Optional[TTLCache] = None,
        polling_interval: Optional[float] = None,
        max_consecutive_errors: Optional[int] = None,
        error_cooldown: Optional[float] = None,
        initial_lookback: Optional[float] = None,
        enabled: Optional[bool] = None
    ):
        self._scheduler = scheduler or AsyncioScheduler()
        self._source = source
        self._mock_source = mock_source

        self.polling_interval = settings.polling_interval_seconds if polling_interval is None else polling_interval
        self.max_consecutive_errors = settings.max_consecutive_errors if max_consecutive_errors is None else max_consecutive_errors
        self.error_cooldown = settings.error_cooldown_seconds if error_cooldown is None else error_cooldown
        self.initial_lookback = settings.initial_lookback_seconds if initial_lookback is None else initial_lookback
        self.is_enabled = settings.enable_remote_calls if enabled is None else enabled

        # EA lookups are cached per license key; EAs rarely change
        self._ea_cache = ea_cache or TTLCache(
            settings.ea_cache_ttl_seconds,
            settings.ea_cache_max_size,
            clock=self._scheduler.time
        )

        self._session: Optional[PollingSession] = None
        self._timer: Optional[ScheduledJob] = None
        self._resume_job: Optional[ScheduledJob] = None
        self._cycle_generation: Optional[int] = None
        self._generations = count(1)

    @property
    def ea_cache(self) -> TTLCache:
        return self._ea_cache

    def _get_api_client(self) -> SignalSource:
        """Get signals API client"""
        if self._source is None:
            self._source = SignalsApiClient()
        return self._source

    def _get_mock_source(self) -> SignalSource:
        """Get mock signal source"""
        if self._mock_source is None:
            self._mock_source = MockSignalSource()
        return self._mock_source

    def _now(self) -> datetime:
        return datetime.fromtimestamp(self._scheduler.time(), tz=timezone.utc)

    def _is_current(self, session: PollingSession) -> bool:
        return self._session is not None and self._session.generation == session.generation

    def enable(self):
        """Use the signals API for new sessions"""
        if not self.is_enabled:
            self.is_enabled = True
            self._ea_cache.clear()
        logger.info("Remote calls enabled for signals polling service")

    def disable(self):
        """Stop polling and use mock data for new sessions"""
        if self.is_enabled:
            self.is_enabled = False
            self._ea_cache.clear()
        self.stop_polling()
        logger.info("Remote calls disabled for signals polling service")

    def start_polling(
        self,
        license_key: str,
        on_signal_found: Optional[SignalCallback] = None,
        on_error: Optional[ErrorCallback] = None,
        backfill: bool = False
    ) -> bool:
        """
        Start polling signals for a license

        Args:
            license_key: License key to resolve the EA from
            on_signal_found: Called once per new signal
            on_error: Called with a message whenever a cycle fails
            backfill: Leave the watermark unset so the first fetch covers
                the initial lookback window instead of starting from now

        Returns:
            True if a new session was started, False if one already exists
        """
        if self._session is not None:
            logger.info(
                "Signal polling already running",
                license_key=self._session.license_key,
                state=self._session.state.value
            )
            return False

        if not license_key:
            raise ValueError("license_key is required")

        if self.is_enabled:
            source = self._get_api_client()
        else:
            logger.info("Remote calls disabled - using mock data", license_key=license_key)
            source = self._get_mock_source()

        now = self._now()
        session = PollingSession(
            license_key=license_key,
            generation=next(self._generations),
            source=source,
            started_at=now,
            on_signal_found=on_signal_found,
            on_error=on_error,
            last_poll_time=None if backfill else now
        )
        self._session = session

        logger.info(
            "🟢 Starting signal polling",
            license_key=license_key,
            interval_seconds=self.polling_interval,
            mock_mode=not self.is_enabled
        )
        try:
            self._schedule_cycles(session)
        except Exception:
            self._session = None
            raise
        return True

    def stop_polling(self):
        """Stop polling and clear all session state"""
        self._cancel_timer()
        if self._resume_job is not None:
            self._resume_job.cancel()
            self._resume_job = None

        session = self._session
        self._session = None
        if session is not None:
            session.state = PollingState.IDLE
            logger.info("Signal polling stopped", license_key=session.license_key)

    async def close(self):
        """Stop polling and release the HTTP client"""
        jobs = [job for job in (self._timer, self._resume_job) if job is not None]
        self.stop_polling()
        for job in jobs:
            await job.wait()

        for source in (self._source, self._mock_source):
            if source is not None:
                await source.close()

    def is_running(self) -> bool:
        """Whether the recurring poll is currently scheduled"""
        return self._timer is not None and not self._timer.cancelled

    def get_status(self) -> Dict[str, Any]:
        """Get current polling status"""
        session = self._session
        return {
            "is_running": self.is_running(),
            "state": session.state.value if session else PollingState.IDLE.value,
            "license_key": session.license_key if session else None,
            "ea": session.ea_id if session else None,
            "last_poll_time": format_since(session.last_poll_time) if session and session.last_poll_time else None,
            "is_enabled": self.is_enabled,
            "consecutive_errors": session.consecutive_errors if session else 0,
            "poll_count": session.poll_count if session else 0,
            "suspended_until": format_since(session.suspended_until) if session and session.suspended_until else None,
            "last_error": session.last_error if session else None,
            "cached_licenses": len(self._ea_cache),
        }

    def _schedule_cycles(self, session: PollingSession):
        self._timer = self._scheduler.call_every(
            self.polling_interval,
            self.run_cycle,
            immediate=True,
            name=f"signal-polling-{session.generation}"
        )

    def _cancel_timer(self):
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def run_cycle(self) -> None:
        """Run one poll for the current session; failures never propagate"""
        session = self._session
        if session is None or session.state is not PollingState.RUNNING:
            return

        if self._cycle_generation == session.generation:
            logger.warning("Previous signal check still in progress, skipping", license_key=session.license_key)
            return

        self._cycle_generation = session.generation
        try:
            await self._check_for_new_signals(session)
        except Exception as error:
            if self._is_current(session):
                await self._handle_failure(session, error)
            else:
                logger.info("Discarding failure from stopped session", license_key=session.license_key, error=str(error))
        finally:
            if self._cycle_generation == session.generation:
                self._cycle_generation = None

    async def _check_for_new_signals(self, session: PollingSession):
        logger.debug("Checking for new signals", license_key=session.license_key)
        self._ea_cache.evict_expired()

        ea_id = await self._resolve_ea(session)
        if not self._is_current(session):
            logger.info("Discarding EA lookup from stopped session", license_key=session.license_key)
            return

        if ea_id is None:
            logger.warning("Could not find EA for license", license_key=session.license_key)
            return
        session.ea_id = ea_id

        since = session.last_poll_time
        if since is None:
            since = session.started_at - timedelta(seconds=self.initial_lookback)

        signals = await session.source.get_new_signals(ea_id, since)
        if not self._is_current(session):
            logger.info("Discarding signals from stopped session", license_key=session.license_key, count=len(signals))
            return

        completed_at = self._now()
        logger.info("Found new signals", ea=ea_id, count=len(signals), since=format_since(since))

        for signal in signals:
            await self._emit_signal(session, signal)
            if not self._is_current(session):
                return

        session.consecutive_errors = 0
        session.poll_count += 1
        if session.last_poll_time is None or completed_at > session.last_poll_time:
            session.last_poll_time = completed_at

    async def _resolve_ea(self, session: PollingSession) -> Optional[str]:
        cached = self._ea_cache.get(session.license_key, _NOT_CACHED)
        if cached is not _NOT_CACHED:
            return cached

        ea_id = await session.source.get_ea_from_license(session.license_key)
        self._ea_cache.set(session.license_key, ea_id)
        logger.info("Resolved EA for license", license_key=session.license_key, ea=ea_id)
        return ea_id

    async def _handle_failure(self, session: PollingSession, error: Exception):
        session.consecutive_errors += 1
        session.last_error = str(error)

        if isinstance(error, SignalPollingError):
            if error.license_key is None:
                error.license_key = session.license_key
            logger.error(
                "Signal polling cycle failed",
                license_key=session.license_key,
                attempt=session.consecutive_errors,
                error_code=error.error_code,
                error=str(error)
            )
        else:
            logger.exception(
                "Unexpected error in signal polling cycle",
                license_key=session.license_key,
                attempt=session.consecutive_errors,
                error=str(error)
            )

        await self._emit_error(session, str(error))

        if self._is_current(session) and session.consecutive_errors >= self.max_consecutive_errors:
            self._suspend(session)

    def _suspend(self, session: PollingSession):
        self._cancel_timer()
        session.state = PollingState.SUSPENDED
        session.suspended_until = self._now() + timedelta(seconds=self.error_cooldown)

        notice = SuspendedAfterThreshold(session.license_key, session.consecutive_errors, self.error_cooldown)
        logger.warning(
            "⏸️ Too many consecutive errors, temporarily pausing polling",
            license_key=session.license_key,
            error_code=notice.error_code,
            error=str(notice),
            resume_at=format_since(session.suspended_until)
        )

        self._resume_job = self._scheduler.call_later(
            self.error_cooldown,
            partial(self._resume, session.generation),
            name=f"signal-polling-resume-{session.generation}"
        )

    async def _resume(self, generation: int):
        session = self._session
        if session is None or session.generation != generation or session.state is not PollingState.SUSPENDED:
            return

        self._resume_job = None
        session.consecutive_errors = 0
        session.suspended_until = None
        session.state = PollingState.RUNNING
        logger.info("▶️ Restarting polling after error cooldown", license_key=session.license_key)
        self._schedule_cycles(session)

    async def _emit_signal(self, session: PollingSession, signal: DatabaseSignal):
        if session.on_signal_found is None:
            return
        try:
            result = session.on_signal_found(signal)
            if inspect.isawaitable(result):
                await result
        except Exception as error:
            logger.exception("Signal callback failed", signal_id=signal.id, error=str(error))

    async def _emit_error(self, session: PollingSession, message: str):
        if session.on_error is None:
            return
        try:
            result = session.on_error(message)
            if inspect.isawaitable(result):
                await result
        except Exception as error:
            logger.exception("Error callback failed", error=str(error))


# Global signal poller instance
signal_poller = SignalPoller()
