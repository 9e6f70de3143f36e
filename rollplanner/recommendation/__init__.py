from ..types import (
    LightCondition,
    Environment,
    Intent,
    FilmType,
    FilmFormat,
    FilmCategory,
    SunPosition,
    WeatherData,
    Recommendation,
    ExposureGuidance,
    MeteringTips,
    ExposureIndex,
    ScoredFilm,
)
from .scoring_engine import ScoringEngine
from .recommender import (
    Recommender,
    get_recommender,
    reset_recommender,
    get_recommendation,
    get_guidance_for_film,
    get_exposure_guidance,
    get_metering_tips,
    get_discipline,
)

__all__ = [
    'LightCondition',
    'Environment',
    'Intent',
    'FilmType',
    'FilmFormat',
    'FilmCategory',
    'SunPosition',
    'WeatherData',
    'Recommendation',
    'ExposureGuidance',
    'MeteringTips',
    'ExposureIndex',
    'ScoredFilm',
    'ScoringEngine',
    'Recommender',
    'get_recommender',
    'reset_recommender',
    'get_recommendation',
    'get_guidance_for_film',
    'get_exposure_guidance',
    'get_metering_tips',
    'get_discipline',
]
