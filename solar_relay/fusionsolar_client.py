"""FusionSolar northbound (thirdData) API forwarder.

The relay does not interpret vendor payloads. It re-issues the caller's JSON
body against the fixed upstream host and hands back status, headers and the
decoded body so the route handlers can mirror them.
"""

import aiohttp
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .config import settings

logger = logging.getLogger(__name__)

USER_AGENT = "Solar-Monitor-App/1.0"

# Header variants the vendor has been seen to use for the session token
XSRF_HEADER_NAMES = ("xsrf-token", "XSRF-TOKEN", "X-XSRF-TOKEN")


@dataclass
class UpstreamResponse:
    """Status, headers and JSON body of one upstream call."""

    status: int
    reason: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    data: Optional[Any] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def extract_xsrf_token(self) -> Optional[str]:
        """Return the session token from the first matching header variant."""
        for name in XSRF_HEADER_NAMES:
            value = self.headers.get(name)
            if value:
                return value
        return None


class FusionSolarClient:
    """Async client for the FusionSolar thirdData API."""

    BASE_URL = "https://intl.fusionsolar.huawei.com/thirdData"

    def __init__(self, base_url: Optional[str] = None, timeout: int = 30):
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def close(self):
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    def url_for(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint}"

    async def post(
        self,
        endpoint: str,
        body: Dict[str, Any],
        xsrf_token: Optional[str] = None,
    ) -> UpstreamResponse:
        """POST a JSON body to an upstream endpoint.

        Args:
            endpoint: thirdData endpoint name (e.g. "login", "getStationList")
            body: JSON payload forwarded as-is
            xsrf_token: Session token, sent as the XSRF-TOKEN header when given

        Returns:
            UpstreamResponse. The body is only decoded for 2xx responses.

        Raises:
            aiohttp.ClientError, asyncio.TimeoutError, ValueError: transport
            failures and undecodable bodies are left to the caller.
        """
        headers = {
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }
        if xsrf_token:
            headers["XSRF-TOKEN"] = xsrf_token

        url = self.url_for(endpoint)
        logger.info(f"Making request to: {url}")

        session = await self._get_session()
        async with session.post(url, json=body, headers=headers) as response:
            logger.info(f"API Response status: {response.status}")
            upstream = UpstreamResponse(
                status=response.status,
                reason=response.reason or "",
                headers=response.headers,
            )
            if upstream.ok:
                upstream.data = await response.json(content_type=None)
            return upstream


# Shared client, created lazily so tests can swap it out
_client: Optional[FusionSolarClient] = None


def get_fusionsolar_client() -> FusionSolarClient:
    """FastAPI dependency returning the process-wide upstream client."""
    global _client
    if _client is None:
        _client = FusionSolarClient(
            base_url=settings.fusionsolar_base_url,
            timeout=settings.fusionsolar_timeout,
        )
    return _client


async def close_fusionsolar_client():
    """Close the shared client, if one was created."""
    global _client
    if _client is not None:
        await _client.close()
        _client = None
