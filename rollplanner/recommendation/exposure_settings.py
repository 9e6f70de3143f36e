from typing import Optional

from config.validators import ExposureConfig
from ..utils.photo_utils import aperture_stop_difference, format_aperture, nearest_shutter
from ..types import Environment, ExposureGuidance, LightCondition, SunPosition, WeatherData


class ExposureSettingsGenerator:
    """Sunny 16 derived aperture/shutter suggestion snapped to standard increments"""

    def __init__(self, config: ExposureConfig):
        self.config = config

    def shutter_for(self, target: float) -> str:
        return nearest_shutter(target, self.config.standard_shutters, self.config.default_shutter)

    def generate(
            self,
            light: LightCondition,
            ei: int,
            environment: Environment,
            weather: Optional[WeatherData] = None
    ) -> ExposureGuidance:
        base = self.config.base_table[light.value]
        aperture = base.aperture
        target = ei / base.shutter_divisor
        note = base.note

        override = self.config.environment_overrides.get(environment.value)
        if override is not None:
            note = override.note

            if override.aperture is not None and light.value in override.applies_to:
                aperture = override.aperture
                target = ei / override.shutter_divisor

            # smaller f-number is a wider aperture
            if override.max_aperture is not None and aperture > override.max_aperture:
                stops = aperture_stop_difference(aperture, override.max_aperture)
                aperture = override.max_aperture
                target = target * 2 ** stops

        weather_note = self.weather_note(weather)
        if weather_note is not None:
            note = weather_note

        return ExposureGuidance(
            aperture=format_aperture(aperture),
            shutter=self.shutter_for(target),
            note=note,
        )

    def weather_note(self, weather: Optional[WeatherData]) -> Optional[str]:
        """Golden, then twilight, then low visibility, then heavy overcast"""
        if weather is None:
            return None

        notes = self.config.weather_notes
        limits = self.config.weather_thresholds

        if weather.sun_position is SunPosition.GOLDEN:
            return notes.golden
        if weather.sun_position is SunPosition.TWILIGHT:
            return notes.twilight
        if weather.visibility < limits.low_visibility_km:
            return notes.low_visibility
        if weather.cloud_cover >= limits.heavy_overcast_cloud_cover:
            return notes.heavy_overcast
        return None
