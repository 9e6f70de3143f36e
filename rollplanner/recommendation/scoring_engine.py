from typing import Dict, Iterable, List, Optional

from config.validators import ScoringConfig
from ..catalog.models import FilmStock
from ..utils.logger import get_logger
from ..utils.photo_utils import stops_between, whole_stops_needed
from ..types import (
    Environment,
    FilmFormat,
    FilmType,
    Intent,
    LightCondition,
    ScoredFilm,
    SunPosition,
    WeatherData,
)

logger = get_logger(__name__)


class ScoringEngine:
    """
    Weighted additive scoring of film stocks against the shooting situation.

    Every term reads its weight and threshold from ScoringConfig, so a
    change to scoring.yaml is the only way a score moves. Each term is kept
    in the breakdown under its own name.
    """

    TERMS = ("iso", "environment", "intent", "weather", "community", "reciprocity")

    def __init__(self, config: ScoringConfig):
        self.config = config
        self.weights = config.weights
        self.thresholds = config.thresholds

    # =========================================================================
    # Individual terms
    # =========================================================================

    def iso_fit(self, film: FilmStock, light: LightCondition) -> float:
        w = self.weights
        band = self.config.light_bands[light.value]

        if band.min <= film.iso <= band.max:
            score = w.iso_native_fit
            if film.iso == band.ideal:
                score += w.iso_ideal_match
            elif abs(stops_between(film.iso, band.ideal)) <= self.thresholds.near_ideal_stops:
                score += w.iso_near_ideal
            return score

        if film.iso < band.min:
            needed = whole_stops_needed(film.iso, band.min)
            return w.iso_push_reachable if film.push_stops >= needed else w.iso_push_unreachable

        needed = whole_stops_needed(band.max, film.iso)
        if self.config.allow_pull and film.pull_stops >= needed:
            return w.iso_pull_reachable
        return w.iso_pull_unreachable

    def environment_fit(self, film: FilmStock, environment: Environment, intent: Intent) -> float:
        w = self.weights
        t = self.thresholds
        pref = self.config.environments[environment.value]
        score = 0.0

        if environment in film.ideal_environment:
            score += w.environment_match

        if pref.grain == "low" and film.grain <= t.grain_low_max:
            score += w.grain_low_match
        elif pref.grain == "medium" and t.grain_medium_min <= film.grain <= t.grain_medium_max:
            score += w.grain_medium_match
        elif pref.grain == "high" and film.grain >= t.grain_high_min:
            score += w.grain_high_match

        if pref.grain == "low" and film.grain >= t.grain_mismatch_min:
            tolerance = self.config.intents[intent.value].grain_tolerance
            remaining = max(0.0, 1.0 - tolerance / t.grain_tolerance_full)
            score += w.grain_mismatch_penalty * remaining

        if pref.contrast == "low" and film.contrast <= t.contrast_low_max:
            score += w.contrast_low_match
        elif pref.contrast == "medium" and t.contrast_medium_min <= film.contrast <= t.contrast_medium_max:
            score += w.contrast_medium_match
        elif pref.contrast == "high" and film.contrast >= t.contrast_high_min:
            score += w.contrast_high_match

        if pref.skin_tones and film.skin_tones >= t.skin_tones_min:
            score += w.skin_tone_bonus

        score += film.sharpness * w.sharpness * pref.sharpness_multiplier
        score += film.latitude * w.latitude * pref.latitude_multiplier

        if film.is_color and film.color_bias.value in pref.preferred_bias:
            score += w.color_bias_match

        return score

    def intent_fit(self, film: FilmStock, intent: Intent) -> float:
        w = self.weights
        t = self.thresholds
        mod = self.config.intents[intent.value]
        score = 0.0

        if mod.saturation_bonus > 0 and film.saturation >= t.intent_high:
            score += mod.saturation_bonus * w.intent_saturation_step
        elif mod.saturation_bonus < 0 and film.saturation <= t.intent_low:
            score += -mod.saturation_bonus * w.intent_saturation_step

        if mod.contrast_bonus > 0 and film.contrast >= t.intent_high:
            score += mod.contrast_bonus * w.intent_contrast_step
        elif mod.contrast_bonus < 0 and film.contrast <= t.intent_low:
            score += -mod.contrast_bonus * w.intent_contrast_step

        if mod.latitude_bonus > 0 and film.latitude >= t.intent_latitude_min:
            score += mod.latitude_bonus * w.intent_latitude_step

        score += mod.grain_tolerance * w.grain_tolerance
        return score

    def weather_fit(self, film: FilmStock, weather: Optional[WeatherData]) -> float:
        if weather is None:
            return 0.0

        w = self.weights
        t = self.thresholds
        score = 0.0

        if weather.cloud_cover > t.overcast_cloud_cover and film.latitude >= t.overcast_latitude_min:
            score += w.overcast_latitude

        if weather.cloud_cover < t.clear_cloud_cover:
            if film.contrast >= t.clear_contrast_min:
                score += w.clear_contrast
            if film.saturation >= t.clear_saturation_min:
                score += w.clear_saturation

        if weather.visibility < t.low_visibility_km and film.contrast <= t.haze_contrast_max:
            score += w.haze_low_contrast
        if weather.visibility > t.high_visibility_km and film.saturation >= t.visibility_saturation_min:
            score += w.visibility_saturation

        if (weather.sun_position is SunPosition.GOLDEN and film.is_color
                and film.color_bias.value in self.config.warm_biases):
            score += w.golden_warm_bias

        tags = self.config.sun_light_tags[weather.sun_position.value]
        matches = len(film.ideal_light.intersection(tags))
        score += matches * w.ideal_light_match

        return score

    def community_fit(self, film: FilmStock) -> float:
        return film.community_score * self.weights.community

    def reciprocity_fit(self, film: FilmStock, light: LightCondition) -> float:
        if not light.is_low_light:
            return 0.0
        if film.reciprocity_start >= self.thresholds.reciprocity_excellent_seconds:
            return self.weights.reciprocity_excellent
        if film.reciprocity_start >= self.thresholds.reciprocity_comfortable_seconds:
            return self.weights.reciprocity_comfortable
        return 0.0

    # =========================================================================
    # Scoring and ranking
    # =========================================================================

    def score_film(
            self,
            film: FilmStock,
            light: LightCondition,
            environment: Environment,
            intent: Intent,
            weather: Optional[WeatherData] = None
    ) -> ScoredFilm:
        """Score one stock, keeping each term in the breakdown"""
        breakdown = {
            "iso": self.iso_fit(film, light),
            "environment": self.environment_fit(film, environment, intent),
            "intent": self.intent_fit(film, intent),
            "weather": self.weather_fit(film, weather),
            "community": self.community_fit(film),
            "reciprocity": self.reciprocity_fit(film, light),
        }
        total = sum(breakdown[term] for term in self.TERMS)
        return ScoredFilm(film=film, score=total, breakdown=breakdown)

    def score_and_rank(
            self,
            light: LightCondition,
            environment: Environment,
            intent: Intent,
            weather: Optional[WeatherData],
            film_type: FilmType,
            film_format: FilmFormat,
            catalog: Iterable[FilmStock]
    ) -> List[ScoredFilm]:
        """
        Filter by type and format, score, and sort best first

        The sort is stable, so equal scores keep catalog order. An empty list
        means no stock matched the type and format.
        """
        eligible = [
            film for film in catalog
            if film.category is film_type.category and film.supports(film_format)
        ]

        scored = [self.score_film(film, light, environment, intent, weather) for film in eligible]
        scored.sort(key=lambda s: s.score, reverse=True)

        if scored:
            logger.debug(
                "films_ranked",
                light=light.value,
                environment=environment.value,
                intent=intent.value,
                candidates=len(scored),
                winner=scored[0].film.key,
                score=round(scored[0].score, 2),
            )
        else:
            logger.warning(
                "no_eligible_films",
                film_type=film_type.value,
                film_format=film_format.value,
            )

        return scored


def summarize_breakdown(scored: ScoredFilm) -> Dict[str, float]:
    """Rounded per-term scores for display"""
    return {term: round(value, 2) for term, value in scored.breakdown.items()}
