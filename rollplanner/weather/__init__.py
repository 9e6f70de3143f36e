from .cache import WeatherCache
from .analysis import (
    SunTimes,
    describe_weather_code,
    get_sun_position,
    get_light_quality,
    get_shooting_note,
    infer_light_condition,
    haversine_distance_m,
    clean_location_name,
)
from .client import WeatherService, LocationResult, LocationThrottle

__all__ = [
    'WeatherCache',
    'SunTimes',
    'describe_weather_code',
    'get_sun_position',
    'get_light_quality',
    'get_shooting_note',
    'infer_light_condition',
    'haversine_distance_m',
    'clean_location_name',
    'WeatherService',
    'LocationResult',
    'LocationThrottle',
]
