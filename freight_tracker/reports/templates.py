"""
REPORT TEMPLATES

Purpose:
- Pre-configured titles and column sets for the stock reports
- One place to change a report's layout

Requirements:
• Immutable templates
• Column keys match the row builders in reports.datasets
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence

from freight_tracker.reports.report_engine import DateRange, ReportColumn, ReportSpec
from freight_tracker.reports.report_types import ALIGN_RIGHT


class ReportTemplate:
    """Base report template."""

    def __init__(self, title: str, subtitle: str, columns: List[ReportColumn]):
        """
        Initialize report template.

        Args:
            title: Report title
            subtitle: Report subtitle
            columns: Ordered column definitions
        """
        self.title = title
        self.subtitle = subtitle
        self.columns = tuple(columns)

    def build_spec(
        self,
        rows: Sequence[Mapping[str, Any]],
        date_range: Optional[DateRange] = None,
    ) -> ReportSpec:
        """
        Bind rows to this template.

        Args:
            rows: Row dataset keyed by column key
            date_range: Optional reporting period

        Returns:
            ReportSpec: Ready to render
        """
        return ReportSpec(
            title=self.title,
            subtitle=self.subtitle,
            columns=list(self.columns),
            rows=rows,
            date_range=date_range,
        )


# ────────────────────────────────────────────────────────────
# SHIPMENT ACTIVITY
# ────────────────────────────────────────────────────────────

SHIPMENT_ACTIVITY = ReportTemplate(
    title="Shipment Activity Report",
    subtitle="Comprehensive shipment tracking data",
    columns=[
        ReportColumn("tracking_number", "Tracking #", width=15),
        ReportColumn("origin", "Origin", width=20),
        ReportColumn("destination", "Destination", width=20),
        ReportColumn("status", "Status", width=12),
        ReportColumn("cargo_type", "Cargo Type", width=15),
        ReportColumn("weight_kg", "Weight (kg)", width=12, align=ALIGN_RIGHT),
        ReportColumn("created_at", "Created Date", width=18),
        ReportColumn("estimated_arrival", "Est. Arrival", width=18),
    ],
)


# ────────────────────────────────────────────────────────────
# WEATHER IMPACT
# ────────────────────────────────────────────────────────────

WEATHER_IMPACT = ReportTemplate(
    title="Weather Impact Analysis Report",
    subtitle="Weather conditions affecting shipments",
    columns=[
        ReportColumn("tracking_number", "Tracking #", width=15),
        ReportColumn("location", "Location", width=20),
        ReportColumn("weather_condition", "Weather", width=15),
        ReportColumn("impact_level", "Impact Level", width=12),
        ReportColumn("delay_risk", "Delay Risk %", width=12, align=ALIGN_RIGHT),
        ReportColumn("temperature", "Temp (°C)", width=10, align=ALIGN_RIGHT),
        ReportColumn("wind_speed", "Wind (m/s)", width=10, align=ALIGN_RIGHT),
        ReportColumn("recorded_at", "Recorded At", width=18),
    ],
)


# ────────────────────────────────────────────────────────────
# ROUTE PERFORMANCE
# ────────────────────────────────────────────────────────────

ROUTE_PERFORMANCE = ReportTemplate(
    title="Route Performance Report",
    subtitle="Performance metrics by route",
    columns=[
        ReportColumn("route", "Route", width=25),
        ReportColumn("total_shipments", "Total Shipments", width=15, align=ALIGN_RIGHT),
        ReportColumn("on_time_percentage", "On-Time %", width=12, align=ALIGN_RIGHT),
        ReportColumn("avg_delay_hours", "Avg Delay (hrs)", width=15, align=ALIGN_RIGHT),
        ReportColumn("weather_delays", "Weather Delays", width=15, align=ALIGN_RIGHT),
        ReportColumn("total_weight_kg", "Total Weight (kg)", width=15, align=ALIGN_RIGHT),
        ReportColumn("period_start", "Period Start", width=15),
        ReportColumn("period_end", "Period End", width=15),
    ],
)


TEMPLATES: Dict[str, ReportTemplate] = {
    "shipment_activity": SHIPMENT_ACTIVITY,
    "weather_impact": WEATHER_IMPACT,
    "route_performance": ROUTE_PERFORMANCE,
}
