"""
Provider Integrations

Thin wrappers around the weather and flight-data provider adapters.
"""

from freight_tracker.integrations.openweather import (
    fetch_current_weather,
    reading_from_payload,
    get_weather_by_coords,
    get_route_weather,
    get_route_impact,
)
from freight_tracker.integrations.opensky import (
    get_flights_in_area,
    get_all_flights,
    get_flight_by_icao,
    get_flights_by_callsign,
    get_flights_by_country,
)

__all__ = [
    'fetch_current_weather',
    'reading_from_payload',
    'get_weather_by_coords',
    'get_route_weather',
    'get_route_impact',
    'get_flights_in_area',
    'get_all_flights',
    'get_flight_by_icao',
    'get_flights_by_callsign',
    'get_flights_by_country',
]
