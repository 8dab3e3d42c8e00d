"""
OPENSKY NETWORK ADAPTER

Purpose:
- Fetch live flight state vectors from OpenSky
- Convert them into FlightState values

Requirements:
• Timeout protection
• Graceful failure (empty list / None, never raise)
• Skip vectors without a position

Author: Freight Tracker
"""

import logging
from typing import Dict, Any, List, Optional

import requests

from freight_tracker import config
from freight_tracker.core.vehicle import (
    FlightState,
    SV_LATITUDE,
    SV_LONGITUDE,
    SV_ON_GROUND,
    flight_from_state_vector,
)

logger = logging.getLogger(__name__)


def _fetch_states(params: Optional[Dict[str, Any]] = None, timeout: Optional[int] = None) -> Optional[List[list]]:
    """
    Fetch raw state vectors from /states/all.

    Returns:
        list of state vectors ([] when OpenSky reports none), or None if failed
    """
    try:
        url = f"{config.OPENSKY_BASE_URL}/states/all"
        logger.info(f"Fetching flight states {params or {}}")
        response = requests.get(url, params=params, timeout=timeout or config.API_TIMEOUT)
        response.raise_for_status()

        data = response.json()
        if not isinstance(data, dict):
            logger.error(f"OpenSky API returned unexpected payload: {type(data).__name__}")
            return None

        return data.get("states") or []

    except requests.exceptions.Timeout:
        logger.error("OpenSky API timeout")
        return None

    except requests.exceptions.HTTPError as e:
        if e.response is not None and e.response.status_code == 429:
            logger.error("OpenSky API rate limit exceeded")
        else:
            logger.error(f"OpenSky API HTTP error: {str(e)}")
        return None

    except requests.exceptions.RequestException as e:
        logger.error(f"OpenSky API error: {str(e)}")
        return None

    except ValueError as e:
        logger.error(f"OpenSky API returned invalid JSON: {str(e)}")
        return None


def _has_position(vector: list) -> bool:
    return (
        len(vector) > SV_LATITUDE
        and vector[SV_LONGITUDE] is not None
        and vector[SV_LATITUDE] is not None
    )


def get_flights_in_area(min_lat: float, max_lat: float, min_lon: float, max_lon: float) -> List[FlightState]:
    """
    Flights currently inside a bounding box.

    Args:
        min_lat, max_lat: Latitude bounds
        min_lon, max_lon: Longitude bounds

    Returns:
        list: FlightState for every vector with a position
    """
    states = _fetch_states({
        "lamin": min_lat,
        "lamax": max_lat,
        "lomin": min_lon,
        "lomax": max_lon,
    })
    if not states:
        return []

    return [flight_from_state_vector(s) for s in states if _has_position(s)]


def get_all_flights() -> List[FlightState]:
    """Airborne flights worldwide, capped at OPENSKY_MAX_FLIGHTS."""
    states = _fetch_states(timeout=config.OPENSKY_ALL_TIMEOUT)
    if not states:
        return []

    airborne = [
        s for s in states
        if _has_position(s) and not (len(s) > SV_ON_GROUND and s[SV_ON_GROUND])
    ]
    return [flight_from_state_vector(s) for s in airborne[:config.OPENSKY_MAX_FLIGHTS]]


def get_flight_by_icao(icao24: str) -> Optional[FlightState]:
    """Current state of one aircraft, or None if unknown or unavailable."""
    states = _fetch_states({"icao24": icao24.lower()})
    if not states:
        return None
    return flight_from_state_vector(states[0])


def get_flights_by_callsign(callsign_prefix: str) -> List[FlightState]:
    """Airborne flights whose callsign starts with a prefix, e.g. 'UAL'."""
    prefix = callsign_prefix.upper()
    return [f for f in get_all_flights() if f.callsign.upper().startswith(prefix)]


def get_flights_by_country(country: str) -> List[FlightState]:
    """Airborne flights registered in a country (case-insensitive)."""
    wanted = country.lower()
    return [f for f in get_all_flights() if f.origin_country.lower() == wanted]
