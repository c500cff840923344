"""
Signals API client

HTTP client for the license lookup and new signals endpoints.
"""

from datetime import datetime
from typing import List, Optional

import httpx
from pydantic import ValidationError

from ..config import settings
from ..models.signal_types import DatabaseSignal, LicenseLookupResponse, NewSignalsResponse
from ..utils.logging_config import get_logger
from .polling_errors import FetchFailure, ResolutionFailure
from .signal_source import format_since

logger = get_logger("signal_polling.api")


class SignalsApiClient:
    """Signals API client class"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = base_url or settings.signals_api_url
        self.timeout = timeout if timeout is not None else settings.request_timeout_seconds
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
                headers={
                    "Accept": "application/json",
                    "User-Agent": "EA-Signal-Poller-Python/1.0.0"
                }
            )
        return self._client

    async def close(self):
        """Close HTTP client"""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def get_ea_from_license(self, license_key: str) -> Optional[str]:
        """
        Resolve the EA attached to a license
        GET /api/get-ea-from-license

        Args:
            license_key: License key

        Returns:
            EA ID, or None if the license has no EA
        """
        try:
            response = await self.client.get(
                "/api/get-ea-from-license",
                params={"licenseKey": license_key}
            )
            response.raise_for_status()
            data = LicenseLookupResponse.model_validate(response.json())
        except httpx.HTTPStatusError as error:
            raise ResolutionFailure(license_key, f"API call failed: {error.response.status_code}") from error
        except httpx.HTTPError as error:
            raise ResolutionFailure(license_key, f"{type(error).__name__}: {error}") from error
        except (ValueError, ValidationError) as error:
            raise ResolutionFailure(license_key, f"invalid response: {error}") from error

        return data.ea_id

    async def get_new_signals(self, ea_id: str, since: datetime) -> List[DatabaseSignal]:
        """
        Get signals for an EA newer than a timestamp
        GET /api/get-new-signals

        Args:
            ea_id: EA ID
            since: Lower time bound

        Returns:
            Signals in the order the API returned them
        """
        params = {"eaId": ea_id, "since": format_since(since)}
        try:
            response = await self.client.get(
                "/api/get-new-signals",
                params=params,
                timeout=self.timeout
            )
            response.raise_for_status()
            data = NewSignalsResponse.model_validate(response.json())
        except httpx.TimeoutException as error:
            raise FetchFailure(ea_id, f"request timed out after {self.timeout:g}s", timed_out=True) from error
        except httpx.HTTPStatusError as error:
            raise FetchFailure(ea_id, f"API call failed: {error.response.status_code}") from error
        except httpx.HTTPError as error:
            raise FetchFailure(ea_id, f"{type(error).__name__}: {error}") from error
        except (ValueError, ValidationError) as error:
            raise FetchFailure(ea_id, f"invalid response: {error}") from error

        logger.debug("Fetched new signals", ea=ea_id, since=params["since"], count=len(data.signals))
        return data.signals
