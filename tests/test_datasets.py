"""
Tests for report row builders and route aggregation.
"""

from datetime import datetime, timezone

from freight_tracker.intelligence.weather_engine import impact_record, storm_weather
from freight_tracker.reports.datasets import (
    route_performance_rows,
    shipment_activity_rows,
    weather_impact_rows,
)
from freight_tracker.reports.report_engine import generate_report
from freight_tracker.reports.templates import ROUTE_PERFORMANCE, SHIPMENT_ACTIVITY, TEMPLATES, WEATHER_IMPACT


def shipment(tracking, origin="ORD", destination="JFK", status="in_transit", **extra):
    data = {
        "tracking_number": tracking,
        "origin": origin,
        "destination": destination,
        "status": status,
        "weight_kg": 100,
    }
    data.update(extra)
    return data


def arrived(tracking, hours_late, **extra):
    return shipment(
        tracking,
        status="arrived",
        estimated_arrival="2025-03-01T12:00:00Z",
        tracking_events=[
            {"status": "departed", "timestamp": "2025-03-01T08:00:00Z"},
            {"status": "arrived", "timestamp": f"2025-03-01T{12 + hours_late:02d}:00:00Z"},
        ],
        **extra,
    )


class TestShipmentActivityRows:

    def test_defaults(self):
        rows = shipment_activity_rows([{"tracking_number": "FT-1", "origin": "ORD", "destination": "LAX"}])
        row = rows[0]

        assert row["cargo_type"] == "N/A"
        assert row["weight_kg"] == 0
        assert row["estimated_arrival"] == "TBD"
        assert row["created_at"] is None

    def test_timestamps_parsed(self):
        rows = shipment_activity_rows([shipment("FT-2", created_at="2025-03-01T10:00:00Z")])
        assert rows[0]["created_at"] == datetime(2025, 3, 1, 10, tzinfo=timezone.utc)

    def test_columns_line_up_with_template(self):
        rows = shipment_activity_rows([shipment("FT-3")])
        assert set(rows[0]) == {col.key for col in SHIPMENT_ACTIVITY.columns}


class TestWeatherImpactRows:

    def test_parses_impact_description(self):
        record = impact_record(storm_weather(-2.5, 14, 80, "moderate"), "Destination")
        record.update({
            "impact_type": "destination_weather",
            "recorded_at": "2025-03-01T09:00:00Z",
            "shipment": {"tracking_number": "FT-7", "origin": "ORD", "destination": "DEN"},
        })

        row = weather_impact_rows([record])[0]

        assert row["tracking_number"] == "FT-7"
        assert row["location"] == "DEN"
        assert row["weather_condition"] == "storm"
        assert row["impact_level"] == "high"
        assert row["delay_risk"] == 30
        assert row["temperature"] == "-2.5°C"
        assert row["wind_speed"] == "14 m/s"
        assert set(row) == {col.key for col in WEATHER_IMPACT.columns}

    def test_origin_location_and_missing_values(self):
        row = weather_impact_rows([{"impact_type": "origin_weather", "shipment": {"origin": "SEA"}}])[0]

        assert row["location"] == "SEA"
        assert row["tracking_number"] == "N/A"
        assert row["delay_risk"] == 0
        assert row["temperature"] == "N/A"
        assert row["wind_speed"] == "N/A"


class TestRoutePerformanceRows:

    def test_empty(self):
        assert route_performance_rows([]) == []

    def test_aggregates_per_route(self):
        shipments = [
            arrived("A", 0),
            arrived("B", 2, weather_impacts=[{"severity": "high"}]),
            arrived("C", 4),
            shipment("D", status="delayed", weather_impacts=[{"severity": "critical"}]),
            shipment("E", status="delayed", weather_impacts=[{"severity": "low"}]),
            shipment("F", origin="SFO", destination="SEA", weight_kg=None),
        ]

        rows = route_performance_rows(shipments, date_from="2025-03-01")
        ord_jfk, sfo_sea = rows

        assert ord_jfk["route"] == "ORD → JFK"
        assert ord_jfk["total_shipments"] == 5
        assert ord_jfk["on_time_percentage"] == 33
        assert ord_jfk["avg_delay_hours"] == 3.0
        assert ord_jfk["weather_delays"] == 2
        assert ord_jfk["total_weight_kg"] == 500
        assert ord_jfk["period_start"] == "2025-03-01"
        assert ord_jfk["period_end"] == "Present"

        # Nothing completed yet
        assert sfo_sea["on_time_percentage"] == 100
        assert sfo_sea["avg_delay_hours"] == 0
        assert sfo_sea["total_weight_kg"] == 0
        assert sfo_sea["period_start"] == "All time"

    def test_percentages_round_half_up(self):
        """One on-time arrival out of eight is 12.5%, shown as 13."""
        shipments = [arrived("A", 0)] + [arrived(f"L{i}", 1) for i in range(7)]
        assert route_performance_rows(shipments)[0]["on_time_percentage"] == 13

    def test_weight_rounds_half_up(self):
        rows = route_performance_rows([shipment("W", weight_kg=1.005)])
        assert rows[0]["total_weight_kg"] == 1.01

    def test_arrived_without_events_is_on_time(self):
        rows = route_performance_rows([shipment("X", status="arrived")])
        assert rows[0]["on_time_percentage"] == 100

    def test_renders_with_template(self):
        rows = route_performance_rows([arrived("A", 1)])
        report = generate_report(ROUTE_PERFORMANCE.build_spec(rows), "csv")
        assert report.title == "Route Performance Report"
        assert '"ORD → JFK","1","0","1.0","0","100.0","All time","Present"' in report.body


class TestTemplates:

    def test_registry(self):
        assert set(TEMPLATES) == {"shipment_activity", "weather_impact", "route_performance"}

    def test_build_spec(self):
        spec = SHIPMENT_ACTIVITY.build_spec([shipment("FT-1")])
        assert spec.title == "Shipment Activity Report"
        assert spec.subtitle == "Comprehensive shipment tracking data"
        assert spec.column_count == 8
        assert spec.headers[0] == "Tracking #"
