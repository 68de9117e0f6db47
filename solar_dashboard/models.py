"""Data models for FusionSolar plant and telemetry data."""

import logging
import math
import re
from pydantic import BaseModel, Field
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# Leading number, as accepted by a lenient float parse ("12.5kWh" -> 12.5, "Infinity" -> inf)
_LEADING_NUMBER = re.compile(r"^[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_number(value: Any) -> float:
    """Parse a KPI value, treating missing or unparseable values as zero."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return 0.0 if math.isnan(value) else float(value)

    match = _LEADING_NUMBER.match(str(value).strip())
    if not match:
        if value != "":
            logger.debug(f"Treating unparseable KPI value {value!r} as 0")
        return 0.0
    return float(match.group(0))


class Plant(BaseModel):
    """A monitored plant from getStationList."""

    code: str
    name: str = ""
    capacity_mw: float = 0.0

    @property
    def capacity_kw(self) -> float:
        """Rated capacity in kW (the API reports MW)."""
        return self.capacity_mw * 1000

    @property
    def capacity_label(self) -> str:
        return f"{self.capacity_kw:.1f} kW"

    @classmethod
    def from_station(cls, station: Dict[str, Any]) -> "Plant":
        """Create from a getStationList entry."""
        return cls(
            code=str(station["stationCode"]),
            name=station.get("stationName") or "",
            capacity_mw=parse_number(station.get("capacity")),
        )


class PlantSnapshot(BaseModel):
    """Latest real-time KPIs for one plant from getStationRealKpi.

    Values are kept as the API returns them (numbers or numeric strings);
    use the accessors for parsed floats.
    """

    station_code: str = ""
    data_item_map: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> "PlantSnapshot":
        return cls(
            station_code=str(data.get("stationCode") or ""),
            data_item_map=data.get("dataItemMap") or {},
        )

    def number(self, key: str) -> float:
        """Parsed numeric KPI, 0.0 when missing."""
        return parse_number(self.data_item_map.get(key))

    @property
    def day_power_kwh(self) -> float:
        return self.number("day_power")

    @property
    def day_income(self) -> float:
        return self.number("day_income")

    @property
    def day_on_grid_energy_kwh(self) -> float:
        return self.number("day_on_grid_energy")

    @property
    def day_use_energy_kwh(self) -> float:
        return self.number("day_use_energy")

    @property
    def month_power_kwh(self) -> float:
        return self.number("month_power")

    @property
    def total_power_kwh(self) -> float:
        return self.number("total_power")

    @property
    def total_power_mwh(self) -> float:
        return self.total_power_kwh / 1000.0

    @property
    def total_income(self) -> float:
        return self.number("total_income")

    @property
    def health_state(self) -> Optional[str]:
        state = self.data_item_map.get("real_health_state")
        return None if state is None else str(state)


class HealthStatus(BaseModel):
    """Display state for a plant's real_health_state code."""

    code: Optional[str] = None
    text: str = "Unknown"
    level: str = "unknown"  # ok, warning, error, unknown


HEALTH_STATES = {
    "1": ("Disconnected", "error"),
    "2": ("Faulty", "warning"),
    "3": ("Healthy", "ok"),
}


def health_status(state: Optional[str]) -> HealthStatus:
    """Map a real_health_state code to its display state."""
    text, level = HEALTH_STATES.get(state, ("Unknown", "unknown"))
    return HealthStatus(code=state, text=text, level=level)


class DashboardTotals(BaseModel):
    """Totals across the current snapshots."""

    total_day_power: float = 0.0
    total_revenue: float = 0.0
    total_month_power: float = 0.0
    total_lifetime_power: float = 0.0
    total_on_grid_energy: float = 0.0
