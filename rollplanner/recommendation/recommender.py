from typing import List, Optional, Union

from config.settings import get_settings
from ..catalog.film_catalog import FilmCatalog, get_catalog
from ..catalog.models import FilmStock
from ..utils.exceptions import ConfigurationError
from ..utils.logger import get_logger, log_performance
from ..weather.analysis import infer_light_condition
from .exposure_index import ExposureIndexResolver
from .exposure_settings import ExposureSettingsGenerator
from .metering_tips import MeteringTipsGenerator
from .scoring_engine import ScoringEngine
from ..types import (
    Environment,
    ExposureGuidance,
    ExposureIndex,
    FilmFormat,
    FilmType,
    Intent,
    LightCondition,
    MeteringTips,
    Recommendation,
    WeatherData,
)

logger = get_logger(__name__)

LightArg = Union[LightCondition, str]
EnvironmentArg = Union[Environment, str]
IntentArg = Union[Intent, str]
FilmTypeArg = Union[FilmType, str]
FilmFormatArg = Union[FilmFormat, str]


class Recommender:
    """
    Facade over the scoring engine and the guidance generators

    Deterministic and free of I/O once constructed: the catalog and the
    validated configuration are passed in and never mutated.
    """

    def __init__(self, catalog: FilmCatalog, settings=None):
        settings = settings or get_settings()
        try:
            scoring = settings.get_scoring_config()
            exposure = settings.get_exposure_config()
            metering = settings.get_metering_config()
        except ValueError as e:
            raise ConfigurationError("Recommendation tables failed validation", original_error=e) from e

        self.catalog = catalog
        self.scoring_config = scoring
        self.exposure_config = exposure
        self.engine = ScoringEngine(scoring)
        self.resolver = ExposureIndexResolver(exposure.light_bands, exposure.exposure_index)
        self.exposure = ExposureSettingsGenerator(exposure)
        self.metering = MeteringTipsGenerator(metering)

    # =========================================================================
    # Recommendation
    # =========================================================================

    @log_performance("get_recommendation")
    def get_recommendation(
            self,
            light: LightArg,
            environment: EnvironmentArg,
            intent: IntentArg,
            weather: Optional[WeatherData] = None,
            film_type: FilmTypeArg = FilmType.COLOR,
            film_format: FilmFormatArg = FilmFormat.SMALL
    ) -> Recommendation:
        light = LightCondition(light)
        environment = Environment(environment)
        intent = Intent(intent)
        film_type = FilmType(film_type)
        film_format = FilmFormat(film_format)

        ranked = self.engine.score_and_rank(
            light, environment, intent, weather, film_type, film_format, self.catalog
        )
        if not ranked:
            return Recommendation.no_film_available()

        winner = ranked[0]
        index = self.resolver.resolve(winner.film, light, weather)

        recommendation = Recommendation(
            film=winner.film.name,
            ei=index.ei,
            exposure=self.exposure_config.approach[film_type.value][light.value],
            adjustments=self.build_adjustments(index, light),
            film_key=winner.film.key,
            iso=winner.film.iso,
            push_stops=index.push_stops,
            pull_stops=index.pull_stops,
            score=winner.score,
        )

        logger.info(
            "recommendation_built",
            film=recommendation.film_key,
            ei=recommendation.ei,
            score=round(winner.score, 2),
        )
        return recommendation

    def get_guidance_for_film(
            self,
            film_key: str,
            light: Optional[LightArg] = None,
            weather: Optional[WeatherData] = None,
            film_type: Optional[FilmTypeArg] = None
    ) -> Recommendation:
        """
        Guidance for a stock the user already has, without scoring

        Raises:
            FilmNotFoundError: unknown film key
        """
        film = self.catalog.get(film_key)
        film_type = FilmType(film_type) if film_type is not None else self._type_of(film)

        if light is None and weather is not None:
            thresholds = self.exposure_config.weather_thresholds
            light = infer_light_condition(
                weather,
                heavy_overcast_cloud_cover=thresholds.heavy_overcast_cloud_cover,
                low_visibility_km=thresholds.low_visibility_km,
                clear_cloud_cover=self.scoring_config.thresholds.clear_cloud_cover,
            )
            logger.debug("light_inferred_from_weather", film=film_key, light=light.value)

        if light is None:
            return Recommendation(
                film=film.name,
                ei=film.iso,
                exposure=self.exposure_config.default_approach,
                adjustments=[],
                film_key=film.key,
                iso=film.iso,
            )

        light = LightCondition(light)
        index = self.resolver.resolve(film, light, weather)
        return Recommendation(
            film=film.name,
            ei=index.ei,
            exposure=self.exposure_config.approach[film_type.value][light.value],
            adjustments=self.build_adjustments(index, light),
            film_key=film.key,
            iso=film.iso,
            push_stops=index.push_stops,
            pull_stops=index.pull_stops,
        )

    # =========================================================================
    # Guidance
    # =========================================================================

    def get_exposure_guidance(
            self,
            light: LightArg,
            ei: int,
            environment: EnvironmentArg,
            weather: Optional[WeatherData] = None
    ) -> ExposureGuidance:
        return self.exposure.generate(LightCondition(light), ei, Environment(environment), weather)

    def get_metering_tips(
            self,
            light: LightArg,
            environment: EnvironmentArg,
            intent: IntentArg,
            weather: Optional[WeatherData] = None
    ) -> MeteringTips:
        return self.metering.generate(
            LightCondition(light), Environment(environment), Intent(intent), weather
        )

    def get_discipline(self, intent: IntentArg) -> str:
        return self.metering.discipline(Intent(intent))

    def build_adjustments(self, index: ExposureIndex, light: LightCondition) -> List[str]:
        text = self.exposure_config.adjustments
        adjustments = []

        if index.push_stops:
            adjustments.append(text.push.format(stops=index.push_stops))
        if index.pull_stops:
            adjustments.append(text.pull.format(stops=index.pull_stops))
        if index.extra_push:
            adjustments.append(text.low_visibility)
        if light.value in text.tripod_lights:
            adjustments.append(text.tripod)

        return adjustments

    @staticmethod
    def _type_of(film: FilmStock) -> FilmType:
        return FilmType.COLOR if film.is_color else FilmType.BW


# =============================================================================
# Module-level API
# =============================================================================

_recommender_instance: Optional[Recommender] = None


def get_recommender() -> Recommender:
    """Get or create the recommender over the configured catalog"""
    global _recommender_instance

    if _recommender_instance is None:
        _recommender_instance = Recommender(get_catalog())

    return _recommender_instance


def reset_recommender():
    """Reset recommender singleton (useful for testing)"""
    global _recommender_instance
    _recommender_instance = None


def get_recommendation(
        light: LightArg,
        environment: EnvironmentArg,
        intent: IntentArg,
        weather: Optional[WeatherData] = None,
        film_type: FilmTypeArg = FilmType.COLOR,
        film_format: FilmFormatArg = FilmFormat.SMALL
) -> Recommendation:
    """Best stock for the situation with its EI, approach and adjustments"""
    return get_recommender().get_recommendation(
        light, environment, intent, weather, film_type, film_format
    )


def get_guidance_for_film(
        film_key: str,
        light: Optional[LightArg] = None,
        weather: Optional[WeatherData] = None,
        film_type: Optional[FilmTypeArg] = None
) -> Recommendation:
    """Guidance for a named stock, bypassing scoring"""
    return get_recommender().get_guidance_for_film(film_key, light, weather, film_type)


def get_exposure_guidance(
        light: LightArg,
        ei: int,
        environment: EnvironmentArg,
        weather: Optional[WeatherData] = None
) -> ExposureGuidance:
    """Aperture, shutter and note for the light, rating and environment"""
    return get_recommender().get_exposure_guidance(light, ei, environment, weather)


def get_metering_tips(
        light: LightArg,
        environment: EnvironmentArg,
        intent: IntentArg,
        weather: Optional[WeatherData] = None
) -> MeteringTips:
    return get_recommender().get_metering_tips(light, environment, intent, weather)


def get_discipline(intent: IntentArg) -> str:
    """Shooting discipline line shown alongside a recommendation"""
    return get_recommender().get_discipline(intent)
