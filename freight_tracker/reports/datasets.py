"""
REPORT DATASETS

Purpose:
- Turn plain shipment / weather-impact records into report rows
- Per-route performance aggregation (on-time %, delays, weight)

Rules:
- Input records are plain dicts as stored by the API layer
- Never mutates input records
- Row keys match the columns in reports.templates
"""

import re
import logging
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Dict, Any, Iterable, List, Optional

from freight_tracker.core.geo import round_half_up, round_half_up_places

logger = logging.getLogger(__name__)

SIGNIFICANT_WEATHER = {"medium", "high", "critical"}

_TEMP_PATTERN = re.compile(r"(-?\d+(?:\.\d+)?)°C")
_WIND_PATTERN = re.compile(r"Wind:\s*(\d+(?:\.\d+)?)\s*m/s")
_DELAY_PATTERN = re.compile(r"Delay factor:\s*(\d+)%")


def _parse_timestamp(ts) -> Optional[datetime]:
    """
    Parse timestamp, handling ISO strings, Unix timestamps and datetimes.
    Naive values are assumed UTC.
    """
    if ts is None or ts == "":
        return None
    if isinstance(ts, datetime):
        dt = ts
    elif isinstance(ts, (int, float)):
        return datetime.fromtimestamp(ts, tz=timezone.utc)
    else:
        dt = datetime.fromisoformat(str(ts).replace("Z", "+00:00"))

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


# ==================================================
# SHIPMENT ACTIVITY
# ==================================================

def shipment_activity_rows(shipments: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    One row per shipment.

    Args:
        shipments: Shipment records

    Returns:
        list: Rows for the shipment activity template
    """
    rows = []
    for shipment in shipments:
        rows.append({
            "tracking_number": shipment.get("tracking_number"),
            "origin": shipment.get("origin"),
            "destination": shipment.get("destination"),
            "status": shipment.get("status"),
            "cargo_type": shipment.get("cargo_type") or "N/A",
            "weight_kg": shipment.get("weight_kg") or 0,
            "created_at": _parse_timestamp(shipment.get("created_at")),
            "estimated_arrival": _parse_timestamp(shipment.get("estimated_arrival")) or "TBD",
        })
    return rows


# ==================================================
# WEATHER IMPACT
# ==================================================

def weather_impact_rows(impacts: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    One row per recorded weather impact.

    Temperature, wind and delay are recovered from the impact description
    written by weather_engine.impact_record.

    Args:
        impacts: Impact records with an embedded `shipment` dict

    Returns:
        list: Rows for the weather impact template
    """
    rows = []
    for impact in impacts:
        shipment = impact.get("shipment") or {}
        description = impact.get("description") or ""

        if impact.get("impact_type") == "destination_weather":
            location = shipment.get("destination")
        else:
            location = shipment.get("origin")

        temp_match = _TEMP_PATTERN.search(description)
        wind_match = _WIND_PATTERN.search(description)
        delay_match = _DELAY_PATTERN.search(description)

        rows.append({
            "tracking_number": shipment.get("tracking_number") or "N/A",
            "location": location or "Unknown",
            "weather_condition": impact.get("weather_condition") or "Unknown",
            "impact_level": impact.get("severity") or "none",
            "delay_risk": int(delay_match.group(1)) if delay_match else 0,
            "temperature": f"{temp_match.group(1)}°C" if temp_match else "N/A",
            "wind_speed": f"{wind_match.group(1)} m/s" if wind_match else "N/A",
            "recorded_at": _parse_timestamp(impact.get("recorded_at")),
        })
    return rows


# ==================================================
# ROUTE PERFORMANCE
# ==================================================

def _arrival_delay_hours(shipment: Dict[str, Any]) -> Optional[float]:
    """
    Hours late for an arrived shipment (<= 0 means on time).

    None when the shipment has not arrived. Arrived shipments without an
    arrival event or estimate count as on time.
    """
    if shipment.get("status") != "arrived":
        return None

    arrived_event = next(
        (e for e in shipment.get("tracking_events") or [] if e.get("status") == "arrived"),
        None,
    )
    estimated = _parse_timestamp(shipment.get("estimated_arrival"))
    if arrived_event is None or estimated is None:
        return 0.0

    actual = _parse_timestamp(arrived_event.get("timestamp"))
    if actual is None:
        return 0.0
    return (actual - estimated).total_seconds() / 3600


def route_performance_rows(
    shipments: Iterable[Dict[str, Any]],
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Aggregate shipments per route (origin → destination).

    Args:
        shipments: Shipment records with optional tracking_events and weather_impacts
        date_from: Period start label
        date_to: Period end label

    Returns:
        list: One row per route, in first-seen order
    """
    stats: "OrderedDict[str, Dict[str, float]]" = OrderedDict()

    for shipment in shipments:
        route = f"{shipment.get('origin')} → {shipment.get('destination')}"
        current = stats.setdefault(route, {
            "total": 0,
            "on_time": 0,
            "late": 0,
            "total_delay_hours": 0.0,
            "weather_delays": 0,
            "total_weight": 0.0,
        })

        current["total"] += 1
        current["total_weight"] += shipment.get("weight_kg") or 0

        delay_hours = _arrival_delay_hours(shipment)
        arrived_late = delay_hours is not None and delay_hours > 0
        if delay_hours is not None:
            if arrived_late:
                current["late"] += 1
                current["total_delay_hours"] += delay_hours
            else:
                current["on_time"] += 1

        significant_weather = any(
            w.get("severity") in SIGNIFICANT_WEATHER
            for w in shipment.get("weather_impacts") or []
        )
        if significant_weather and (shipment.get("status") == "delayed" or arrived_late):
            current["weather_delays"] += 1

    rows = []
    for route, s in stats.items():
        completed = s["on_time"] + s["late"]
        if completed > 0:
            on_time_pct = round_half_up(s["on_time"] / completed * 100)
        else:
            on_time_pct = 100 if s["total"] > 0 else 0

        avg_delay = round_half_up_places(s["total_delay_hours"] / s["late"], 1) if s["late"] else 0

        rows.append({
            "route": route,
            "total_shipments": int(s["total"]),
            "on_time_percentage": on_time_pct,
            "avg_delay_hours": avg_delay,
            "weather_delays": int(s["weather_delays"]),
            "total_weight_kg": round_half_up_places(s["total_weight"], 2),
            "period_start": date_from or "All time",
            "period_end": date_to or "Present",
        })

    logger.debug(f"Route performance computed for {len(rows)} routes")
    return rows
