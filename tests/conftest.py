"""Shared fixtures."""

from __future__ import annotations

import pytest


@pytest.fixture
def kpi_payload() -> dict:
    """A getStationRealKpi body for two plants."""
    return {
        "success": True,
        "failCode": 0,
        "data": [
            {
                "stationCode": "NE=1001",
                "dataItemMap": {
                    "day_power": "120.5",
                    "day_income": "30.25",
                    "month_power": "2500",
                    "total_power": "150000",
                    "day_on_grid_energy": "80",
                    "day_use_energy": "40.5",
                    "total_income": "9000",
                    "real_health_state": "3",
                },
            },
            {
                "stationCode": "NE=1002",
                "dataItemMap": {
                    "day_power": 79.5,
                    "day_income": 19.75,
                    "real_health_state": "2",
                },
            },
        ],
    }


@pytest.fixture
def station_list_payload() -> dict:
    """A getStationList body for two plants."""
    return {
        "success": True,
        "failCode": 0,
        "data": [
            {"stationCode": "NE=1001", "stationName": "Barn Roof", "capacity": 0.0495},
            {"stationCode": "NE=1002", "stationName": "Carport", "capacity": 0.012},
        ],
    }
