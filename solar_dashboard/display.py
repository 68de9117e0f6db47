"""Plain-text rendering of the dashboard."""

from datetime import datetime, timezone
from typing import List, Optional

from .models import health_status
from .session import DashboardSession


def _fmt(value: float) -> str:
    return f"{value:,.2f}"


def render_dashboard(session: DashboardSession, now: Optional[datetime] = None) -> str:
    """Render totals and per-plant rows for the current snapshot."""
    now = now or datetime.now(timezone.utc)
    lines: List[str] = []

    lines.append("=" * 60)
    lines.append("FusionSolar Dashboard")
    if session.last_update:
        lines.append(f"Last update: {session.last_update.strftime('%Y-%m-%d %H:%M:%S %Z')}")
    else:
        lines.append("Last update: never")
    lines.append(f"Plants: {len(session.selected_plants)} selected of {len(session.available_plants)}")
    if session.error:
        lines.append(f"! {session.error}")
    lines.append("-" * 60)

    totals = session.totals()
    lines.append(f"Today's energy:     {_fmt(totals.total_day_power)} kWh")
    lines.append(f"Today's revenue:    ${_fmt(totals.total_revenue)}")
    lines.append(f"This month:         {_fmt(totals.total_month_power)} kWh")
    lines.append(f"Lifetime energy:    {totals.total_lifetime_power / 1000:,.1f} MWh")
    lines.append(f"Today's on-grid:    {_fmt(totals.total_on_grid_energy)} kWh")

    if not session.snapshots:
        lines.append("-" * 60)
        lines.append("No plant data yet")

    for snapshot in session.snapshots:
        plant = session.plant(snapshot.station_code)
        name = plant.name if plant and plant.name else snapshot.station_code
        capacity = plant.capacity_label if plant else ""
        health = health_status(snapshot.health_state)

        lines.append("-" * 60)
        header = [name, capacity, f"[{health.text}]"]
        lines.append("  ".join(part for part in header if part))
        lines.append(
            f"  energy {_fmt(snapshot.day_power_kwh)} kWh"
            f" | revenue ${_fmt(snapshot.day_income)}"
            f" | on-grid {_fmt(snapshot.day_on_grid_energy_kwh)} kWh"
            f" | used {_fmt(snapshot.day_use_energy_kwh)} kWh"
        )
        lines.append(
            f"  lifetime {snapshot.total_power_mwh:,.1f} MWh"
            f" | lifetime income ${_fmt(snapshot.total_income)}"
        )

    lines.append("=" * 60)
    lines.append(f"Rendered {now.strftime('%Y-%m-%d %H:%M:%S')}")
    return "\n".join(lines)
