"""
Photography reading of raw weather values.

Pure functions: sun position from sunrise/sunset, light quality and a
shooting note from cloud cover, visibility and WMO weather code, and the
light condition a reading implies.
"""

import math
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Tuple

from ..types import LightCondition, SunPosition, WeatherData

EARTH_RADIUS_M = 6371000

# WMO weather interpretation codes
WEATHER_CODES = {
    0: ("Clear", "Clear sky"),
    1: ("Mostly Clear", "Mainly clear"),
    2: ("Partly Cloudy", "Partly cloudy"),
    3: ("Overcast", "Overcast"),
    45: ("Foggy", "Fog"),
    48: ("Foggy", "Depositing rime fog"),
    51: ("Light Drizzle", "Light drizzle"),
    53: ("Drizzle", "Moderate drizzle"),
    55: ("Heavy Drizzle", "Dense drizzle"),
    61: ("Light Rain", "Slight rain"),
    63: ("Rain", "Moderate rain"),
    65: ("Heavy Rain", "Heavy rain"),
    71: ("Light Snow", "Slight snow"),
    73: ("Snow", "Moderate snow"),
    75: ("Heavy Snow", "Heavy snow"),
    77: ("Snow Grains", "Snow grains"),
    80: ("Light Showers", "Slight rain showers"),
    81: ("Showers", "Moderate rain showers"),
    82: ("Heavy Showers", "Violent rain showers"),
    85: ("Snow Showers", "Slight snow showers"),
    86: ("Heavy Snow", "Heavy snow showers"),
    95: ("Thunderstorm", "Thunderstorm"),
    96: ("Thunderstorm", "Thunderstorm with slight hail"),
    99: ("Thunderstorm", "Thunderstorm with heavy hail"),
}

UNKNOWN_WEATHER = ("Unknown", "Unknown conditions")


@dataclass(frozen=True)
class SunTimes:
    """Key times of a day, derived from sunrise and sunset"""
    sunrise: datetime
    sunset: datetime
    golden_morning: datetime
    golden_evening: datetime
    mid_morning: datetime
    midday: datetime
    mid_afternoon: datetime
    twilight: datetime
    night: datetime


def describe_weather_code(code: int) -> Tuple[str, str]:
    """(condition, description) for a WMO code"""
    return WEATHER_CODES.get(code, UNKNOWN_WEATHER)


def get_sun_position(
        now: datetime,
        sunrise: datetime,
        sunset: datetime,
        is_day: bool,
        golden_fraction: float = 0.1,
        low_fraction: float = 0.2,
        twilight_minutes: float = 30
) -> SunPosition:
    """
    Classify the sun by how far through daylight `now` is

    At night, the `twilight_minutes` either side of sunrise and sunset count
    as twilight.
    """
    if not is_day:
        to_sunrise = (sunrise - now).total_seconds() / 60
        from_sunset = (now - sunset).total_seconds() / 60

        if 0 < to_sunrise < twilight_minutes or 0 < from_sunset < twilight_minutes:
            return SunPosition.TWILIGHT
        return SunPosition.NIGHT

    day_length = (sunset - sunrise).total_seconds()
    if day_length <= 0:
        return SunPosition.HIGH

    progress = (now - sunrise).total_seconds() / day_length

    if progress < golden_fraction or progress > 1 - golden_fraction:
        return SunPosition.GOLDEN
    if progress < low_fraction or progress > 1 - low_fraction:
        return SunPosition.LOW
    return SunPosition.HIGH


def get_light_quality(cloud_cover: float, visibility: float, sun_position: SunPosition) -> str:
    if visibility < 2:
        return "Diffused, atmospheric"
    if visibility < 5:
        return "Soft, hazy"

    if sun_position is SunPosition.NIGHT:
        return "Available light only"
    if sun_position is SunPosition.TWILIGHT:
        return "Soft, directional twilight"

    if sun_position is SunPosition.GOLDEN:
        if cloud_cover < 30:
            return "Warm, directional golden light"
        if cloud_cover < 60:
            return "Filtered golden light"
        return "Diffused warm light"

    if cloud_cover > 80:
        return "Even, shadowless"
    if cloud_cover > 50:
        return "Soft, diffused"
    if cloud_cover > 20:
        return "Mixed sun and clouds"

    if sun_position is SunPosition.HIGH:
        return "Harsh, high contrast"
    return "Directional with defined shadows"


def get_shooting_note(
        cloud_cover: float,
        visibility: float,
        sun_position: SunPosition,
        weather_code: int
) -> str:
    # storms, then rain and snow, then fog
    if weather_code >= 95:
        return "Protect your gear. Dramatic light possible between storms."
    if weather_code >= 61:
        return "Overcast light is flattering for portraits. Watch for lens droplets."
    if weather_code >= 45:
        return "Fog creates depth and mood. Increase exposure +1 stop."

    if sun_position is SunPosition.NIGHT:
        return "Use fast film or push. Tripod recommended for sharp images."
    if sun_position is SunPosition.TWILIGHT:
        return "Blue hour magic. Meter carefully, bracket if unsure."

    if sun_position is SunPosition.GOLDEN:
        if cloud_cover < 30:
            return "Prime shooting time. Side-light for texture, backlight for glow."
        return "Soft golden light. Great for any subject."

    if visibility < 5:
        return "Atmospheric conditions. Use haze for depth in landscapes."

    if sun_position is SunPosition.HIGH:
        if cloud_cover > 60:
            return "Clouds taming harsh light. Good for outdoor portraits."
        if cloud_cover > 30:
            return "Watch for shifting light. Meter frequently."
        return "Seek open shade or use fill. Harsh shadows on faces."

    if cloud_cover > 50:
        return "Overcast is your softbox. Great for portraits and details."
    return "Good directional light. Use shadows creatively."


def infer_light_condition(
        weather: WeatherData,
        heavy_overcast_cloud_cover: float = 80,
        low_visibility_km: float = 5,
        clear_cloud_cover: float = 30
) -> LightCondition:
    """Light condition a weather reading implies, for callers that did not pick one"""
    if weather.sun_position is SunPosition.NIGHT:
        return LightCondition.DARK
    if weather.sun_position is SunPosition.TWILIGHT:
        return LightCondition.DIM
    if weather.cloud_cover >= heavy_overcast_cloud_cover or weather.visibility < low_visibility_km:
        return LightCondition.FLAT
    if weather.sun_position in (SunPosition.GOLDEN, SunPosition.LOW):
        return LightCondition.MIXED
    if weather.cloud_cover < clear_cloud_cover:
        return LightCondition.HARSH
    return LightCondition.BRIGHT


def compute_sun_times(
        sunrise: datetime,
        sunset: datetime,
        golden_fraction: float = 0.1,
        twilight_offset_minutes: float = 30,
        night_offset_minutes: float = 90
) -> SunTimes:
    day_length = sunset - sunrise
    golden = day_length * golden_fraction

    return SunTimes(
        sunrise=sunrise,
        sunset=sunset,
        golden_morning=sunrise + golden / 2,
        golden_evening=sunset - golden / 2,
        mid_morning=sunrise + day_length * 0.25,
        midday=sunrise + day_length * 0.5,
        mid_afternoon=sunrise + day_length * 0.75,
        twilight=sunset + timedelta(minutes=twilight_offset_minutes),
        night=sunset + timedelta(minutes=night_offset_minutes),
    )


def haversine_distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in metres"""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (math.sin(d_lat / 2) ** 2
         + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2)
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def clean_location_name(name: str, clutter_words: Iterable[str]) -> str:
    """Strip administrative clutter: 'Tokyo Metropolitan Prefecture' -> 'Tokyo'"""
    cleaned = name
    for word in clutter_words:
        pattern = rf"\s*(of\s+)?{re.escape(word)}(\s+of)?\s*"
        cleaned = re.sub(pattern, " ", cleaned, flags=re.IGNORECASE).strip()
    cleaned = re.sub(r"\s+", " ", cleaned)
    return re.sub(r",\s*$", "", cleaned).strip()
