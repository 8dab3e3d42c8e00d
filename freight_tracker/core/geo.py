"""
GEO KINEMATICS

Purpose:
- Great-circle distance between two positions
- Time-to-arrival from distance and ground speed

Rules:
- Pure functions, no IO
- Zero or negative speed yields ETA_UNREACHABLE, never an exception
- Inputs are trusted (range validation belongs to the caller)
"""

import math
from decimal import Decimal, ROUND_HALF_UP
from dataclasses import dataclass
from typing import Dict, Any

EARTH_RADIUS_KM = 6371.0
MPS_TO_KMH = 3.6

# Sentinel for "will never arrive at current speed"
ETA_UNREACHABLE = math.inf


@dataclass(frozen=True)
class Position:
    """Immutable WGS84 position in degrees."""
    lat: float
    lon: float

    def to_dict(self) -> Dict[str, Any]:
        return {"lat": self.lat, "lon": self.lon}


def round_half_up(value: float) -> int:
    """Round to nearest integer with .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def round_half_up_places(value: float, places: int) -> float:
    """Round to a number of decimal places with .5 going up."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def haversine_distance(a: Position, b: Position) -> float:
    """
    Calculate great-circle distance between two points.

    Args:
        a: First position
        b: Second position

    Returns:
        float: Distance in kilometers
    """
    lat1_rad = math.radians(a.lat)
    lat2_rad = math.radians(b.lat)
    dlat = math.radians(b.lat - a.lat)
    dlon = math.radians(b.lon - a.lon)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))

    return EARTH_RADIUS_KM * c


def eta_minutes(distance_km: float, speed_mps: float) -> float:
    """
    Convert a distance and ground speed into whole minutes to arrival.

    Args:
        distance_km: Remaining distance in kilometers
        speed_mps: Ground speed in meters per second

    Returns:
        int minutes, or ETA_UNREACHABLE when speed <= 0
    """
    speed_kmh = speed_mps * MPS_TO_KMH
    if speed_kmh <= 0:
        return ETA_UNREACHABLE

    hours_to_arrival = distance_km / speed_kmh
    return round_half_up(hours_to_arrival * 60)


def is_unreachable(minutes: float) -> bool:
    """True when an ETA value is the unreachable sentinel."""
    return math.isinf(minutes)


def midpoint(a: Position, b: Position) -> Position:
    """Arithmetic-mean midpoint, used for coarse route sampling."""
    return Position(lat=(a.lat + b.lat) / 2, lon=(a.lon + b.lon) / 2)
