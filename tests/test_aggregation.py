"""Tests for KPI parsing and totals."""

from __future__ import annotations

import math

import pytest

from solar_dashboard.aggregation import calculate_totals, parse_number
from solar_dashboard.models import DashboardTotals, PlantSnapshot


def snapshot(code: str, **items) -> PlantSnapshot:
    return PlantSnapshot(station_code=code, data_item_map=items)


class TestParseNumber:
    """Lenient KPI value parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, 0.0),
            ("", 0.0),
            (0, 0.0),
            (12, 12.0),
            (3.5, 3.5),
            ("42.75", 42.75),
            ("  7.5 ", 7.5),
            ("-3", -3.0),
            ("1e3", 1000.0),
            ("12.5kWh", 12.5),
            (".5", 0.5),
            ("N/A", 0.0),
            ("abc", 0.0),
            ("Infinity", math.inf),
            ("-Infinity", -math.inf),
            ("Infinity kWh", math.inf),
            (True, 0.0),
        ],
    )
    def test_values(self, value, expected: float) -> None:
        assert parse_number(value) == expected

    def test_nan_is_zero(self) -> None:
        assert parse_number(math.nan) == 0.0


class TestCalculateTotals:
    """Summing snapshots."""

    def test_empty(self) -> None:
        assert calculate_totals([]) == DashboardTotals()

    def test_sums_each_field(self) -> None:
        snapshots = [
            snapshot("A", day_power="10.5", day_income="2.25", month_power="300",
                     total_power="12000", day_on_grid_energy="8"),
            snapshot("B", day_power=4.5, day_income=0.75, month_power=100,
                     total_power=3000, day_on_grid_energy=2),
            snapshot("C", day_power="5", day_income="1"),
        ]

        totals = calculate_totals(snapshots)

        assert totals.total_day_power == pytest.approx(20.0)
        assert totals.total_revenue == pytest.approx(4.0)
        assert totals.total_month_power == pytest.approx(400.0)
        assert totals.total_lifetime_power == pytest.approx(15000.0)
        assert totals.total_on_grid_energy == pytest.approx(10.0)

    def test_missing_fields_are_zero(self) -> None:
        snapshots = [snapshot("A"), snapshot("B", day_power=None, day_income="")]

        assert calculate_totals(snapshots) == DashboardTotals()

    def test_matches_arithmetic_sum(self, kpi_payload: dict) -> None:
        snapshots = [PlantSnapshot.from_api_response(item) for item in kpi_payload["data"]]

        totals = calculate_totals(snapshots)

        assert totals.total_day_power == pytest.approx(120.5 + 79.5)
        assert totals.total_revenue == pytest.approx(30.25 + 19.75)
        assert totals.total_month_power == pytest.approx(2500)
        assert totals.total_lifetime_power == pytest.approx(150000)
        assert totals.total_on_grid_energy == pytest.approx(80)

    def test_accepts_generator(self) -> None:
        totals = calculate_totals(snapshot(str(i), day_power=i) for i in range(5))

        assert totals.total_day_power == 10.0
