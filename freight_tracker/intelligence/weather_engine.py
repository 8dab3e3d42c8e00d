"""
WEATHER IMPACT ENGINE

Purpose:
- Convert raw meteorological readings into a weather condition
- Standardized verdict per condition: impact level, delay factor, ground stop
- Aggregate verdicts along a route (worst impact, mean delay)

Requirements:
• Closed set of six condition types, dispatched through rule tables
• Thresholds are fixed numeric cutoffs (no tuning at runtime)
• Unknown/missing condition codes fall back to clear weather
• Pure functions, no IO (fetching lives in integrations.openweather)

Author: Freight Tracker
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Any, Callable, List, Optional, Sequence

from freight_tracker.core.geo import Position, midpoint, round_half_up

logger = logging.getLogger(__name__)

# Defaults for optional reading fields
DEFAULT_VISIBILITY_M = 10000
DEFAULT_CLOUD_COVERAGE = 0
DEFAULT_HUMIDITY = 50


class WeatherType(str, Enum):
    """Weather condition discriminant."""
    CLEAR = "clear"
    CLOUDY = "cloudy"
    RAIN = "rain"
    STORM = "storm"
    FOG = "fog"
    SNOW = "snow"


class ImpactLevel(str, Enum):
    """Weather impact on operations, ordered none < ... < critical."""
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


IMPACT_ORDER = [
    ImpactLevel.NONE,
    ImpactLevel.LOW,
    ImpactLevel.MEDIUM,
    ImpactLevel.HIGH,
    ImpactLevel.CRITICAL,
]


def impact_rank(level: ImpactLevel) -> int:
    """Ordinal of an impact level (none=0 ... critical=4)."""
    return IMPACT_ORDER.index(ImpactLevel(level))


def worst_impact(levels: Sequence[ImpactLevel]) -> ImpactLevel:
    """Highest-ordinal impact, NONE for an empty sequence."""
    worst = ImpactLevel.NONE
    for level in levels:
        if impact_rank(level) > impact_rank(worst):
            worst = ImpactLevel(level)
    return worst


# ==================================================
# RAW READING
# ==================================================

@dataclass(frozen=True)
class WeatherReading:
    """
    One observation from the weather provider.

    Attributes:
        temp: Temperature in °C
        wind_speed: Wind speed in m/s
        humidity: Relative humidity %
        visibility: Visibility in meters (None = not reported)
        cloud_coverage: Cloud cover % (None = not reported)
        condition_code: Provider weather condition id
        snow_accumulation: Snowfall rate in cm/hr
    """
    temp: float
    wind_speed: float
    humidity: Optional[float] = None
    visibility: Optional[float] = None
    cloud_coverage: Optional[float] = None
    condition_code: Optional[int] = None
    snow_accumulation: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WeatherReading':
        """Create from the provider JSON shape (camelCase keys)."""
        return cls(
            temp=data["temp"],
            wind_speed=data["windSpeed"],
            humidity=data.get("humidity"),
            visibility=data.get("visibility"),
            cloud_coverage=data.get("cloudCoverage"),
            condition_code=data.get("conditionCode"),
            snow_accumulation=data.get("snowAccumulation") or 0.0,
        )


# ==================================================
# CLASSIFIED CONDITION
# ==================================================

@dataclass(frozen=True)
class WeatherCondition:
    """
    A classified weather condition.

    Common fields are always set. Type-specific fields are only set for
    their condition type:
        cloudy -> cloud_coverage
        rain   -> intensity
        storm  -> severity, has_lightning
        fog    -> visibility
        snow   -> intensity, accumulation
    """
    condition_type: WeatherType
    temperature: float
    description: str
    wind_speed: float
    humidity: float = DEFAULT_HUMIDITY
    cloud_coverage: Optional[float] = None
    intensity: Optional[str] = None
    severity: Optional[str] = None
    has_lightning: bool = False
    visibility: Optional[float] = None
    accumulation: Optional[float] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def impact(self) -> ImpactLevel:
        return assess_impact(self)

    @property
    def delay_factor(self) -> float:
        return get_delay_factor(self)

    @property
    def should_ground(self) -> bool:
        return should_ground_flights(self)

    @property
    def summary(self) -> str:
        return f"{self.description}, {self.temperature}°C, Wind: {self.wind_speed} m/s"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.condition_type.value,
            "temperature": self.temperature,
            "description": self.description,
            "windSpeed": self.wind_speed,
            "humidity": self.humidity,
            "impact": self.impact.value,
            "delayFactor": self.delay_factor,
            "shouldGround": self.should_ground,
            "summary": self.summary,
            "timestamp": self.timestamp.isoformat(),
        }


def clear_weather(temp: float, wind: float, humidity: float = DEFAULT_HUMIDITY) -> WeatherCondition:
    return WeatherCondition(WeatherType.CLEAR, temp, "Clear skies", wind, humidity)


def cloudy_weather(temp: float, wind: float, humidity: float, cloud_coverage: float) -> WeatherCondition:
    return WeatherCondition(
        WeatherType.CLOUDY, temp, "Cloudy conditions", wind, humidity,
        cloud_coverage=cloud_coverage,
    )


def rain_weather(temp: float, wind: float, humidity: float, intensity: str) -> WeatherCondition:
    return WeatherCondition(
        WeatherType.RAIN, temp, f"{intensity.capitalize()} rain", wind, humidity,
        intensity=intensity,
    )


def storm_weather(
    temp: float,
    wind: float,
    humidity: float,
    severity: str,
    has_lightning: bool = False,
) -> WeatherCondition:
    return WeatherCondition(
        WeatherType.STORM, temp, f"{severity.capitalize()} thunderstorm", wind, humidity,
        severity=severity, has_lightning=has_lightning,
    )


def fog_weather(temp: float, wind: float, humidity: float, visibility: float) -> WeatherCondition:
    return WeatherCondition(
        WeatherType.FOG, temp, "Foggy conditions", wind, humidity,
        visibility=visibility,
    )


def snow_weather(
    temp: float,
    wind: float,
    humidity: float,
    intensity: str,
    accumulation: float = 0.0,
) -> WeatherCondition:
    return WeatherCondition(
        WeatherType.SNOW, temp, f"{intensity.capitalize()} snow", wind, humidity,
        intensity=intensity, accumulation=accumulation,
    )


# ==================================================
# IMPACT RULES
# ==================================================

# Fog visibility bands: (upper bound m, impact, delay factor)
FOG_BANDS = [
    (200, ImpactLevel.CRITICAL, 0.60),
    (500, ImpactLevel.HIGH, 0.40),
    (1000, ImpactLevel.MEDIUM, 0.25),
    (2000, ImpactLevel.LOW, 0.15),
]
FOG_GROUND_VISIBILITY_M = 200  # CAT I minimum


def _fog_band(visibility: float):
    for upper, impact, delay in FOG_BANDS:
        if visibility < upper:
            return impact, delay
    return ImpactLevel.NONE, 0.05


def _cloudy_degraded(c: WeatherCondition) -> bool:
    return (c.cloud_coverage or 0) > 90 and c.wind_speed > 10


def _snow_heavy_build_up(c: WeatherCondition) -> bool:
    return c.intensity == "heavy" and (c.accumulation or 0) > 5


_IMPACT_RULES: Dict[WeatherType, Callable[[WeatherCondition], ImpactLevel]] = {
    WeatherType.CLEAR: lambda c: ImpactLevel.LOW if c.wind_speed > 15 else ImpactLevel.NONE,
    WeatherType.CLOUDY: lambda c: ImpactLevel.LOW if _cloudy_degraded(c) else ImpactLevel.NONE,
    WeatherType.RAIN: lambda c: {
        "heavy": ImpactLevel.MEDIUM,
        "moderate": ImpactLevel.LOW,
    }.get(c.intensity, ImpactLevel.NONE),
    WeatherType.STORM: lambda c: ImpactLevel.CRITICAL if (c.severity == "severe" or c.has_lightning) else {
        "moderate": ImpactLevel.HIGH,
    }.get(c.severity, ImpactLevel.MEDIUM),
    WeatherType.FOG: lambda c: _fog_band(c.visibility)[0],
    WeatherType.SNOW: lambda c: ImpactLevel.HIGH if (c.intensity == "heavy" or (c.accumulation or 0) > 5) else (
        ImpactLevel.MEDIUM if c.intensity == "moderate" else ImpactLevel.LOW
    ),
}

_DELAY_RULES: Dict[WeatherType, Callable[[WeatherCondition], float]] = {
    WeatherType.CLEAR: lambda c: 0.05 if c.wind_speed > 15 else 0.0,
    WeatherType.CLOUDY: lambda c: 0.05 if _cloudy_degraded(c) else 0.0,
    WeatherType.RAIN: lambda c: {"heavy": 0.20, "moderate": 0.10}.get(c.intensity, 0.05),
    WeatherType.STORM: lambda c: {"severe": 0.50, "moderate": 0.30}.get(c.severity, 0.15),
    WeatherType.FOG: lambda c: _fog_band(c.visibility)[1],
    WeatherType.SNOW: lambda c: {"heavy": 0.40, "moderate": 0.25}.get(c.intensity, 0.10),
}

_GROUND_RULES: Dict[WeatherType, Callable[[WeatherCondition], bool]] = {
    WeatherType.CLEAR: lambda c: c.wind_speed > 25,
    WeatherType.CLOUDY: lambda c: False,
    WeatherType.RAIN: lambda c: c.intensity == "heavy" and c.wind_speed > 15,
    WeatherType.STORM: lambda c: c.severity == "severe" or c.has_lightning,
    WeatherType.FOG: lambda c: c.visibility < FOG_GROUND_VISIBILITY_M,
    WeatherType.SNOW: _snow_heavy_build_up,
}


def assess_impact(condition: WeatherCondition) -> ImpactLevel:
    """Impact level of a condition on flight operations."""
    return _IMPACT_RULES[condition.condition_type](condition)


def get_delay_factor(condition: WeatherCondition) -> float:
    """Fractional ETA inflation (0-1) caused by a condition."""
    return _DELAY_RULES[condition.condition_type](condition)


def should_ground_flights(condition: WeatherCondition) -> bool:
    """Whether operations should stop under a condition."""
    return _GROUND_RULES[condition.condition_type](condition)


def condition_types() -> List[str]:
    return [t.value for t in WeatherType]


# ==================================================
# CLASSIFICATION FROM PROVIDER CODES
# ==================================================

def _storm_from_code(code: int):
    if code >= 212:
        severity = "severe"
    elif code >= 211:
        severity = "moderate"
    else:
        severity = "light"
    return severity, code >= 210


def _rain_intensity_from_code(code: int) -> str:
    if code >= 502:
        return "heavy"
    if code >= 500:
        return "moderate"
    return "light"  # drizzle range


def _snow_intensity_from_code(code: int) -> str:
    return "heavy" if code >= 622 else "moderate"


def classify_reading(reading: WeatherReading) -> WeatherCondition:
    """
    Select and populate the weather condition for a reading.

    Condition code ranges:
        200-299 storm, 300-599 rain, 600-699 snow, 700-799 fog,
        800 clear, 801-899 cloudy, anything else clear.

    Args:
        reading: Raw provider reading

    Returns:
        WeatherCondition: Freshly classified condition
    """
    temp = reading.temp
    wind = reading.wind_speed
    humidity = DEFAULT_HUMIDITY if reading.humidity is None else reading.humidity
    visibility = DEFAULT_VISIBILITY_M if reading.visibility is None else reading.visibility
    clouds = DEFAULT_CLOUD_COVERAGE if reading.cloud_coverage is None else reading.cloud_coverage
    code = reading.condition_code

    if code is None:
        logger.debug("No condition code, defaulting to clear")
        return clear_weather(temp, wind, humidity)

    if 200 <= code < 300:
        severity, lightning = _storm_from_code(code)
        return storm_weather(temp, wind, humidity, severity, lightning)

    if 300 <= code < 600:
        return rain_weather(temp, wind, humidity, _rain_intensity_from_code(code))

    if 600 <= code < 700:
        return snow_weather(temp, wind, humidity, _snow_intensity_from_code(code), reading.snow_accumulation)

    if 700 <= code < 800:
        return fog_weather(temp, wind, humidity, visibility)

    if 800 < code < 900:
        return cloudy_weather(temp, wind, humidity, clouds)

    if code != 800:
        logger.debug(f"Unknown condition code {code}, defaulting to clear")
    return clear_weather(temp, wind, humidity)


# ==================================================
# ROUTE AGGREGATION
# ==================================================

@dataclass(frozen=True)
class RouteImpact:
    """Worst-case impact and mean delay over sampled route points."""
    max_impact: ImpactLevel
    average_delay_factor: float
    conditions: List[WeatherCondition] = field(default_factory=list)

    @property
    def estimated_delay_minutes(self) -> int:
        return round_half_up(self.average_delay_factor * 60)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "maxImpact": self.max_impact.value,
            "averageDelayFactor": self.average_delay_factor,
            "estimatedDelayMinutes": self.estimated_delay_minutes,
            "conditions": [c.to_dict() for c in self.conditions],
        }


def summarize_route_impact(conditions: Sequence[WeatherCondition]) -> RouteImpact:
    """
    Aggregate conditions along a route.

    Args:
        conditions: Classified conditions, one per route point

    Returns:
        RouteImpact with the worst impact and mean delay factor;
        NONE / 0.0 for an empty route
    """
    if not conditions:
        return RouteImpact(max_impact=ImpactLevel.NONE, average_delay_factor=0.0, conditions=[])

    max_impact = worst_impact([c.impact for c in conditions])
    average_delay = sum(c.delay_factor for c in conditions) / len(conditions)

    return RouteImpact(
        max_impact=max_impact,
        average_delay_factor=average_delay,
        conditions=list(conditions),
    )


def route_points(origin: Optional[Position], destination: Optional[Position]) -> List[Position]:
    """Sample points for route weather: origin, midpoint, destination."""
    points = []
    if origin is not None:
        points.append(origin)
        if destination is not None:
            points.append(midpoint(origin, destination))
    if destination is not None:
        points.append(destination)
    return points


def impact_record(condition: WeatherCondition, location_label: str) -> Dict[str, Any]:
    """
    Build a weather-impact record for report history.

    Args:
        condition: Classified condition
        location_label: "Origin" or "Destination"

    Returns:
        dict with weather_condition, severity and description
    """
    delay_pct = round_half_up(condition.delay_factor * 100)
    return {
        "weather_condition": condition.condition_type.value,
        "severity": condition.impact.value,
        "description": f"{location_label}: {condition.summary}. Delay factor: {delay_pct}%",
    }
