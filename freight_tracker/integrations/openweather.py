"""
OPENWEATHERMAP ADAPTER

Purpose:
- Fetch current weather from OpenWeatherMap
- Convert the provider payload into a WeatherReading
- Classify readings along a route

Requirements:
• Never hardcode API keys (use os.getenv via config)
• Timeout protection
• Graceful failure (return None / empty list, never raise)

Author: Freight Tracker
"""

import logging
from typing import Dict, Any, List, Optional

import requests

from freight_tracker import config
from freight_tracker.core.geo import Position
from freight_tracker.intelligence.weather_engine import (
    RouteImpact,
    WeatherCondition,
    WeatherReading,
    classify_reading,
    summarize_route_impact,
)

logger = logging.getLogger(__name__)


def fetch_current_weather(lat: float, lon: float) -> Optional[Dict[str, Any]]:
    """
    Fetch current weather from OpenWeatherMap.

    Args:
        lat: Latitude
        lon: Longitude

    Returns:
        dict: Raw weather payload or None if failed

    API Response includes:
    - weather[].id: Condition code
    - main.temp / main.humidity
    - visibility: Visibility in meters
    - wind.speed: Wind speed m/s
    - clouds.all: Cloud cover %
    - snow.1h: Snow volume (mm) for the last hour
    """
    if not config.OPENWEATHER_API_KEY:
        logger.warning("OPENWEATHER_API_KEY not configured")
        return None

    try:
        url = f"{config.OPENWEATHER_BASE_URL}/weather"
        params = {
            "lat": lat,
            "lon": lon,
            "appid": config.OPENWEATHER_API_KEY,
            "units": "metric",  # Celsius
        }

        logger.info(f"Fetching weather for ({lat}, {lon})")
        response = requests.get(url, params=params, timeout=config.API_TIMEOUT)
        response.raise_for_status()

        return response.json()

    except requests.exceptions.Timeout:
        logger.error(f"Weather API timeout for ({lat}, {lon})")
        return None

    except requests.exceptions.RequestException as e:
        logger.error(f"Weather API error: {str(e)}")
        return None

    except ValueError as e:
        logger.error(f"Weather API returned invalid JSON: {str(e)}")
        return None


def reading_from_payload(payload: Dict[str, Any]) -> WeatherReading:
    """
    Convert an OpenWeatherMap payload into a WeatherReading.

    Snow volume (mm/h of snow) is converted to cm/h of accumulation.
    """
    main = payload.get("main") or {}
    wind = payload.get("wind") or {}
    clouds = payload.get("clouds") or {}
    snow = payload.get("snow") or {}
    conditions = payload.get("weather") or []

    return WeatherReading(
        temp=main.get("temp", 0),
        wind_speed=wind.get("speed", 0),
        humidity=main.get("humidity"),
        visibility=payload.get("visibility"),
        cloud_coverage=clouds.get("all"),
        condition_code=conditions[0].get("id") if conditions else None,
        snow_accumulation=(snow.get("1h") or 0) / 10,
    )


def get_weather_by_coords(lat: float, lon: float) -> Optional[WeatherCondition]:
    """Classified current weather at a position, or None if unavailable."""
    payload = fetch_current_weather(lat, lon)
    if payload is None:
        return None

    try:
        return classify_reading(reading_from_payload(payload))
    except (TypeError, AttributeError) as e:
        logger.error(f"Malformed weather payload for ({lat}, {lon}): {str(e)}")
        return None


def get_route_weather(points: List[Position]) -> List[WeatherCondition]:
    """Classified weather for each route point; unavailable points are skipped."""
    conditions = []
    for point in points:
        condition = get_weather_by_coords(point.lat, point.lon)
        if condition is not None:
            conditions.append(condition)
    return conditions


def get_route_impact(points: List[Position]) -> RouteImpact:
    """Worst impact and mean delay factor along a route."""
    return summarize_route_impact(get_route_weather(points))
