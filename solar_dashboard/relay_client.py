"""Client for the FusionSolar relay's /api/huawei endpoints."""

import aiohttp
import asyncio
import logging
from typing import Any, Dict, Iterable, Optional

logger = logging.getLogger(__name__)


class RelayConnectionError(Exception):
    """The relay could not be reached or returned an unreadable body."""
    pass


class RelayClient:
    """Async client for the relay.

    The relay reports failures inside the JSON body (``success: false``),
    so every call returns the decoded body whatever the HTTP status.
    """

    API_PREFIX = "/api/huawei"

    def __init__(self, base_url: str, timeout: int = 30):
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self.timeout,
                headers={"Content-Type": "application/json"},
            )
        return self._session

    async def close(self):
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def _post(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST to a relay endpoint and return its JSON body.

        Raises:
            RelayConnectionError: on timeout, connection failure or a body
                that is not a JSON object
        """
        url = f"{self.base_url}{self.API_PREFIX}/{endpoint}"
        try:
            session = await self._get_session()
            async with session.post(url, json=payload) as response:
                if response.status != 200:
                    logger.warning(f"Relay: HTTP {response.status} from {endpoint}")
                data = await response.json(content_type=None)
        except asyncio.TimeoutError as e:
            logger.error(f"Relay: Timeout calling {endpoint}")
            raise RelayConnectionError(f"Timeout calling {endpoint}") from e
        except aiohttp.ClientError as e:
            logger.error(f"Relay: Error calling {endpoint}: {e}")
            raise RelayConnectionError(str(e)) from e
        except ValueError as e:
            logger.error(f"Relay: Invalid JSON from {endpoint}: {e}")
            raise RelayConnectionError(f"Invalid JSON from {endpoint}") from e

        if not isinstance(data, dict):
            raise RelayConnectionError(f"Unexpected response from {endpoint}")
        return data

    async def login(self, user_name: str, system_code: str) -> Dict[str, Any]:
        """Log in through the relay. A successful body carries ``xsrfToken``."""
        return await self._post("login", {"userName": user_name, "systemCode": system_code})

    async def get_station_list(self, xsrf_token: str) -> Dict[str, Any]:
        """Fetch the plants visible to the account."""
        return await self._post("getStationList", {"xsrfToken": xsrf_token})

    async def get_station_real_kpi(
        self, xsrf_token: str, station_codes: Iterable[str]
    ) -> Dict[str, Any]:
        """Fetch real-time KPIs for the given plants."""
        return await self._post(
            "getStationRealKpi",
            {"xsrfToken": xsrf_token, "stationCodes": ",".join(station_codes)},
        )
