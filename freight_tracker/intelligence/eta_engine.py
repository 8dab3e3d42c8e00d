"""
ETA PROJECTION ENGINE

Purpose:
- Compute distance and ETA from a vehicle's current state to a destination
- Inflate the ETA by the worst origin/destination weather delay
- Explain the weather adjustment (severity + reason)

Requirements:
• Zero speed yields an unreachable ETA, never an error
• Worst-case weather wins (max of origin/destination delay factor)
• Pure computation, no IO

Author: Freight Tracker
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional, Tuple

from freight_tracker.core.geo import (
    Position,
    eta_minutes,
    haversine_distance,
    is_unreachable,
    round_half_up,
    round_half_up_places,
)
from freight_tracker.core.vehicle import VehicleState
from freight_tracker.intelligence.weather_engine import ImpactLevel, WeatherCondition

logger = logging.getLogger(__name__)

# (minimum delay factor, severity, reason), checked top-down
DELAY_SEVERITY_BANDS = [
    (0.4, ImpactLevel.CRITICAL, "severe weather"),
    (0.2, ImpactLevel.HIGH, "poor weather"),
    (0.1, ImpactLevel.MEDIUM, "moderate weather"),
]
MINOR_DELAY_REASON = "minor weather impact"
NO_DELAY_REASON = "clear conditions"
NO_WEATHER_DETAIL = "No weather data"


def classify_weather_delay(max_delay: float) -> Tuple[ImpactLevel, str]:
    """
    Map the worst delay factor to a display severity and reason.

    Args:
        max_delay: Larger of the origin/destination delay factors

    Returns:
        (severity, reason)
    """
    for threshold, severity, reason in DELAY_SEVERITY_BANDS:
        if max_delay >= threshold:
            return severity, reason
    if max_delay > 0:
        return ImpactLevel.LOW, MINOR_DELAY_REASON
    return ImpactLevel.NONE, NO_DELAY_REASON


def _delay_detail(
    severity: ImpactLevel,
    reason: str,
    origin_weather: Optional[WeatherCondition],
    destination_weather: Optional[WeatherCondition],
) -> str:
    """Human detail, naming the location for high/critical weather."""
    if origin_weather is None and destination_weather is None:
        return NO_WEATHER_DETAIL

    if severity in (ImpactLevel.CRITICAL, ImpactLevel.HIGH):
        origin_delay = origin_weather.delay_factor if origin_weather else 0.0
        dest_delay = destination_weather.delay_factor if destination_weather else 0.0
        if dest_delay >= origin_delay:
            where, worst = "destination", destination_weather
        else:
            where, worst = "origin", origin_weather
        return f"{reason.capitalize()} at {where} ({worst.condition_type.value})"

    if severity == ImpactLevel.MEDIUM:
        return "Moderate weather conditions"
    return reason.capitalize()


@dataclass(frozen=True)
class EtaProjection:
    """
    Weather-adjusted ETA for a vehicle.

    Minute values are ints, or math.inf when the vehicle is not moving.
    """
    distance_km: float
    base_eta_minutes: float
    eta_minutes: float
    added_minutes: int
    delay_multiplier: float
    severity: ImpactLevel
    reason: str
    detail: str
    eta_time: Optional[datetime]

    @property
    def reachable(self) -> bool:
        return not is_unreachable(self.eta_minutes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "distanceKm": round_half_up_places(self.distance_km, 2),
            "baseEtaMinutes": None if is_unreachable(self.base_eta_minutes) else self.base_eta_minutes,
            "etaMinutes": None if is_unreachable(self.eta_minutes) else self.eta_minutes,
            "addedMinutes": self.added_minutes,
            "reachable": self.reachable,
            "etaTime": self.eta_time.isoformat() if self.eta_time else None,
            "weatherDelay": {
                "factor": self.delay_multiplier,
                "severity": self.severity.value,
                "reason": self.reason,
                "detail": self.detail,
                "addedMinutes": self.added_minutes,
            },
        }


def project_eta(
    vehicle: VehicleState,
    destination: Position,
    origin_weather: Optional[WeatherCondition] = None,
    destination_weather: Optional[WeatherCondition] = None,
    now: Optional[datetime] = None,
) -> EtaProjection:
    """
    Project a weather-adjusted ETA.

    Args:
        vehicle: Current vehicle state (speed in m/s)
        destination: Destination position
        origin_weather: Classified weather at origin, if known
        destination_weather: Classified weather at destination, if known
        now: Reference time for eta_time, defaults to current UTC time

    Returns:
        EtaProjection
    """
    distance_km = haversine_distance(vehicle.position, destination)
    base_eta = eta_minutes(distance_km, vehicle.speed)

    origin_delay = origin_weather.delay_factor if origin_weather else 0.0
    dest_delay = destination_weather.delay_factor if destination_weather else 0.0
    max_delay = max(origin_delay, dest_delay)
    multiplier = 1 + max_delay

    severity, reason = classify_weather_delay(max_delay)
    detail = _delay_detail(severity, reason, origin_weather, destination_weather)

    if is_unreachable(base_eta):
        logger.debug(f"Vehicle {vehicle.id} is stationary, ETA unreachable")
        return EtaProjection(
            distance_km=distance_km,
            base_eta_minutes=base_eta,
            eta_minutes=base_eta,
            added_minutes=0,
            delay_multiplier=multiplier,
            severity=severity,
            reason=reason,
            detail=detail,
            eta_time=None,
        )

    adjusted = round_half_up(base_eta * multiplier)
    reference = now or datetime.now(timezone.utc)

    return EtaProjection(
        distance_km=distance_km,
        base_eta_minutes=base_eta,
        eta_minutes=adjusted,
        added_minutes=adjusted - base_eta,
        delay_multiplier=multiplier,
        severity=severity,
        reason=reason,
        detail=detail,
        eta_time=reference + timedelta(minutes=adjusted),
    )
