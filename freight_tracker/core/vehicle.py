"""
VEHICLE & FLIGHT STATE

Purpose:
- Immutable kinematic state for tracked vehicles
- Flight state built from flight-data provider state vectors
- Derived display values (name, feet, knots)

Rules:
- States are never mutated; update_position returns a new state
- A flight refresh replaces the whole FlightState
"""

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Any, Optional, Sequence

from freight_tracker.core.geo import Position, haversine_distance, eta_minutes, round_half_up

METERS_TO_FEET = 3.28084
MPS_TO_KNOTS = 1.94384

FLIGHT_ESTIMATED_RANGE_KM = 5000
DOMESTIC_COUNTRY = "United States"

# Positional indices in a provider state vector
SV_ICAO24 = 0
SV_CALLSIGN = 1
SV_ORIGIN_COUNTRY = 2
SV_LONGITUDE = 5
SV_LATITUDE = 6
SV_BARO_ALTITUDE = 7
SV_ON_GROUND = 8
SV_VELOCITY = 9
SV_TRUE_TRACK = 10
SV_VERTICAL_RATE = 11


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class VehicleState:
    """
    Current kinematic state of a tracked vehicle.

    Attributes:
        id: Vehicle identifier
        position: Current position
        speed: Ground speed in m/s
        last_update: When the position was last refreshed
    """
    id: str
    position: Position
    speed: float = 0.0
    last_update: datetime = field(default_factory=_utcnow)

    @property
    def vehicle_type(self) -> str:
        return "vehicle"

    @property
    def display_name(self) -> str:
        return self.id

    def distance_to(self, destination: Position) -> float:
        """Great-circle distance to destination in km."""
        return haversine_distance(self.position, destination)

    def eta_to(self, destination: Position) -> float:
        """Minutes to destination at current speed (may be unreachable)."""
        return eta_minutes(self.distance_to(destination), self.speed)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "latitude": self.position.lat,
            "longitude": self.position.lon,
            "speed": self.speed,
            "lastUpdate": self.last_update.isoformat(),
            "vehicleType": self.vehicle_type,
            "displayName": self.display_name,
        }


@dataclass(frozen=True)
class FlightState(VehicleState):
    """
    Flight position report from the flight-data provider.

    Attributes:
        icao24: ICAO 24-bit transponder address
        callsign: Trimmed callsign (may be empty)
        altitude: Barometric altitude in meters
        heading: True track in degrees
        origin_country: Country of registration
        vertical_rate: Climb/descent rate in m/s
        on_ground: Whether the aircraft reports on-ground
    """
    icao24: str = ""
    callsign: str = ""
    altitude: float = 0.0
    heading: float = 0.0
    origin_country: str = ""
    vertical_rate: float = 0.0
    on_ground: bool = False

    def __post_init__(self):
        object.__setattr__(self, "callsign", (self.callsign or "").strip())

    @property
    def vehicle_type(self) -> str:
        return "flight"

    @property
    def display_name(self) -> str:
        return self.callsign or f"Flight {self.icao24.upper()}"

    @property
    def estimated_range_km(self) -> int:
        return FLIGHT_ESTIMATED_RANGE_KM

    @property
    def altitude_feet(self) -> int:
        return round_half_up(self.altitude * METERS_TO_FEET)

    @property
    def speed_knots(self) -> int:
        return round_half_up(self.speed * MPS_TO_KNOTS)

    @property
    def is_international(self) -> bool:
        return self.origin_country != DOMESTIC_COUNTRY

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "icao24": self.icao24,
            "callsign": self.callsign,
            "latitude": self.position.lat,
            "longitude": self.position.lon,
            "altitude": self.altitude,
            "speed": self.speed,
            "heading": self.heading,
            "originCountry": self.origin_country,
            "verticalRate": self.vertical_rate,
            "onGround": self.on_ground,
            "lastUpdate": self.last_update.isoformat(),
            "vehicleType": self.vehicle_type,
            "displayName": self.display_name,
        }


def update_position(state: VehicleState, position: Position, now: Optional[datetime] = None) -> VehicleState:
    """
    Move a vehicle to a new position.

    Args:
        state: Current state (left untouched)
        position: New position
        now: Update time, defaults to current UTC time

    Returns:
        A copy of state with the new position and refreshed last_update
    """
    return dataclasses.replace(state, position=position, last_update=now or _utcnow())


def _field(vector: Sequence[Any], index: int, default: Any) -> Any:
    if index >= len(vector):
        return default
    value = vector[index]
    return default if value is None else value


def flight_from_state_vector(vector: Sequence[Any], now: Optional[datetime] = None) -> FlightState:
    """
    Build a FlightState from a positional provider state vector.

    Layout: [icao24, callsign, origin_country, time_position, last_contact,
    longitude, latitude, baro_altitude, on_ground, velocity, true_track,
    vertical_rate, ...]

    Missing numeric fields default to 0, missing strings to "".
    """
    icao24 = str(_field(vector, SV_ICAO24, ""))

    return FlightState(
        id=icao24,
        position=Position(
            lat=float(_field(vector, SV_LATITUDE, 0) or 0),
            lon=float(_field(vector, SV_LONGITUDE, 0) or 0),
        ),
        speed=float(_field(vector, SV_VELOCITY, 0) or 0),
        last_update=now or _utcnow(),
        icao24=icao24,
        callsign=str(_field(vector, SV_CALLSIGN, "")),
        altitude=float(_field(vector, SV_BARO_ALTITUDE, 0) or 0),
        heading=float(_field(vector, SV_TRUE_TRACK, 0) or 0),
        origin_country=str(_field(vector, SV_ORIGIN_COUNTRY, "")),
        vertical_rate=float(_field(vector, SV_VERTICAL_RATE, 0) or 0),
        on_ground=bool(_field(vector, SV_ON_GROUND, False)),
    )
