"""In-memory dashboard session.

Holds the FusionSolar session token between calls, the plant list and the
latest KPI snapshot. Nothing is persisted; logging out discards it all.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import ValidationError

from .aggregation import calculate_totals
from .models import DashboardTotals, Plant, PlantSnapshot
from .relay_client import RelayClient, RelayConnectionError

logger = logging.getLogger(__name__)

FAIL_CODE_RATE_LIMIT = 407
FAIL_CODE_INVALID_STATION_CODES = 20010

MSG_NO_TOKEN = "XSRF token not received. Please check API response."
MSG_LOGIN_FAILED = "Login failed. Please check your credentials."
MSG_LOGIN_NETWORK = "Network error. Please check your connection and try again."
MSG_LOGIN_NETWORK_DEV = "Network error. Please check if the proxy server is running on port {port}."
MSG_RATE_LIMIT = "API rate limit exceeded. Please wait before refreshing."
MSG_INVALID_STATIONS = "Invalid station codes. Please check your plant selection."
MSG_FETCH_FAILED = "Failed to fetch data. Please try again later."
MSG_FETCH_NETWORK = "Network error. Please check your connection."


class DashboardSession:
    """Session state for one logged-in FusionSolar account."""

    def __init__(self, client: RelayClient, development: bool = False, relay_port: int = 3001):
        self.client = client
        self.development = development
        self.relay_port = relay_port

        self.xsrf_token: Optional[str] = None
        self.is_authenticated: bool = False
        self.available_plants: List[Plant] = []
        self.selected_plants: List[str] = []
        self.snapshots: List[PlantSnapshot] = []
        self.last_update: Optional[datetime] = None
        self.error: str = ""

    async def login(self, user_name: str, system_code: str) -> bool:
        """Log in and load the plant list.

        Returns:
            True when the session is authenticated; otherwise ``error`` holds
            the reason.
        """
        self.error = ""
        try:
            data = await self.client.login(user_name, system_code)
        except RelayConnectionError as e:
            logger.error(f"Login error: {e}")
            if self.development:
                self.error = MSG_LOGIN_NETWORK_DEV.format(port=self.relay_port)
            else:
                self.error = MSG_LOGIN_NETWORK
            return False

        if data.get("success") is not True:
            self.error = data.get("message") or MSG_LOGIN_FAILED
            return False

        token = data.get("xsrfToken")
        if not token:
            self.error = MSG_NO_TOKEN
            return False

        self.xsrf_token = token
        await self.fetch_station_list()
        self.is_authenticated = True
        logger.info(f"Logged in as {user_name}")
        return True

    async def fetch_station_list(self) -> None:
        """Load available plants and select all of them."""
        if not self.xsrf_token:
            return
        try:
            data = await self.client.get_station_list(self.xsrf_token)
        except RelayConnectionError as e:
            logger.error(f"Error fetching station list: {e}")
            return

        if data.get("success") is True and data.get("data"):
            plants = []
            for station in data["data"]:
                try:
                    plants.append(Plant.from_station(station))
                except (KeyError, TypeError, ValidationError) as e:
                    logger.warning(f"Skipping malformed station entry: {e}")
            self.available_plants = plants
            self.selected_plants = [plant.code for plant in plants]
            logger.info(f"Plants loaded: {[plant.code for plant in plants]}")
        else:
            logger.warning(f"Station list unavailable (failCode={data.get('failCode')})")

    async def fetch_real_time_data(self) -> bool:
        """Refresh the KPI snapshot for the selected plants.

        Returns:
            True when the snapshot was replaced.
        """
        if not self.xsrf_token or not self.selected_plants:
            logger.info("Skipping fetch - no token or no plants selected")
            return False

        logger.info(f"Fetching data for plants: {self.selected_plants}")
        try:
            data = await self.client.get_station_real_kpi(self.xsrf_token, self.selected_plants)
        except RelayConnectionError as e:
            logger.error(f"Fetch error: {e}")
            self.error = MSG_FETCH_NETWORK
            return False

        if data.get("success") is True:
            snapshots = []
            for item in data.get("data") or []:
                try:
                    snapshots.append(PlantSnapshot.from_api_response(item))
                except (AttributeError, ValidationError) as e:
                    logger.warning(f"Skipping malformed KPI entry: {e}")
            self.snapshots = snapshots
            self.last_update = datetime.now(timezone.utc)
            self.error = ""
            return True

        fail_code = data.get("failCode")
        logger.error(f"API Error: {data.get('message') or fail_code}")
        if fail_code == FAIL_CODE_RATE_LIMIT:
            self.error = MSG_RATE_LIMIT
        elif fail_code == FAIL_CODE_INVALID_STATION_CODES:
            self.error = MSG_INVALID_STATIONS
        else:
            self.error = MSG_FETCH_FAILED

        if fail_code != FAIL_CODE_RATE_LIMIT:
            logger.info("Session may have expired, but not logging out automatically")
        return False

    def select_plants(self, codes: List[str]) -> None:
        """Restrict the selection to known plant codes."""
        known = {plant.code for plant in self.available_plants}
        unknown = [code for code in codes if code not in known]
        if unknown:
            logger.warning(f"Ignoring unknown station codes: {unknown}")
        self.selected_plants = [code for code in codes if code in known]

    def toggle_plant(self, code: str) -> None:
        """Add or remove a plant from the selection."""
        if code in self.selected_plants:
            self.selected_plants = [c for c in self.selected_plants if c != code]
        else:
            self.selected_plants = self.selected_plants + [code]

    def plant(self, code: str) -> Optional[Plant]:
        for plant in self.available_plants:
            if plant.code == code:
                return plant
        return None

    def totals(self) -> DashboardTotals:
        return calculate_totals(self.snapshots)

    def logout(self) -> None:
        """Discard the token and all plant data."""
        self.is_authenticated = False
        self.xsrf_token = None
        self.available_plants = []
        self.selected_plants = []
        self.snapshots = []
        self.error = ""
        logger.info("Logged out")
