"""Folding per-plant KPIs into dashboard totals."""

from typing import Iterable

from .models import DashboardTotals, PlantSnapshot, parse_number

__all__ = ["TOTAL_FIELDS", "calculate_totals", "parse_number"]

# dataItemMap key for each total
TOTAL_FIELDS = {
    "total_day_power": "day_power",
    "total_revenue": "day_income",
    "total_month_power": "month_power",
    "total_lifetime_power": "total_power",
    "total_on_grid_energy": "day_on_grid_energy",
}


def calculate_totals(snapshots: Iterable[PlantSnapshot]) -> DashboardTotals:
    """Sum the headline KPIs across all snapshots."""
    sums = dict.fromkeys(TOTAL_FIELDS, 0.0)
    for snapshot in snapshots:
        for total_name, key in TOTAL_FIELDS.items():
            sums[total_name] += snapshot.number(key)
    return DashboardTotals(**sums)
