from typing import Optional

from config.validators import MeteringConfig
from ..types import Environment, Intent, LightCondition, MeteringTips, SunPosition, WeatherData


class MeteringTipsGenerator:
    """Primary tip by environment, secondary by light and intent, weather may override"""

    def __init__(self, config: MeteringConfig):
        self.config = config

    def generate(
            self,
            light: LightCondition,
            environment: Environment,
            intent: Intent,
            weather: Optional[WeatherData] = None
    ) -> MeteringTips:
        return MeteringTips(
            primary=self.config.primary[environment.value],
            secondary=self._secondary(light, intent, weather),
        )

    def discipline(self, intent: Intent) -> str:
        """One-line reminder of how to shoot the intent"""
        return self.config.disciplines[intent.value]

    def _secondary(self, light: LightCondition, intent: Intent, weather: Optional[WeatherData]) -> str:
        if weather is not None and weather.sun_position in (SunPosition.GOLDEN, SunPosition.TWILIGHT):
            return self.config.weather[weather.sun_position.value]

        tips = self.config.secondary

        if light in (LightCondition.HARSH, LightCondition.BRIGHT):
            if intent.value in self.config.deep_shadow_intents:
                return tips.bright_deep_shadow
            if intent.value in self.config.graphic_intents:
                return tips.bright_graphic
            return tips.bright_default

        if light is LightCondition.FLAT:
            if intent.value in self.config.calm_intents:
                return tips.flat_calm
            return tips.flat_default

        if light.is_low_light:
            if intent.value in self.config.push_intents:
                return tips.low_light_push
            return tips.low_light_default

        return tips.mixed
