from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet

from config.validators import FilmStockConfig
from ..types import Environment, FilmCategory, FilmFormat


class ColorBias(Enum):
    NEUTRAL = "neutral"
    WARM = "warm"
    COOL = "cool"
    NEUTRAL_WARM = "neutral_warm"
    NEUTRAL_COOL = "neutral_cool"
    VERY_WARM = "very_warm"
    GREEN_SHIFT = "green_shift"


class PricePoint(Enum):
    BUDGET = "budget"
    CONSUMER = "consumer"
    PROFESSIONAL = "professional"
    PREMIUM = "premium"


@dataclass(frozen=True)
class FilmStock:
    """Catalog entry. Scale fields are 0-10."""
    key: str
    name: str
    brand: str
    category: FilmCategory
    iso: int
    formats: FrozenSet[FilmFormat]

    grain: float
    saturation: float
    contrast: float
    latitude: float
    sharpness: float
    skin_tones: float

    color_bias: ColorBias
    ideal_light: FrozenSet[str]
    ideal_environment: FrozenSet[Environment]

    push_stops: int
    pull_stops: int
    reciprocity_start: float  # seconds

    community_score: float
    price_point: PricePoint

    @property
    def is_color(self) -> bool:
        return self.category is FilmCategory.COLOR_NEGATIVE

    def supports(self, film_format: FilmFormat) -> bool:
        return film_format in self.formats

    @classmethod
    def from_config(cls, key: str, config: FilmStockConfig) -> 'FilmStock':
        """Build from a validated catalog entry"""
        return cls(
            key=key,
            name=config.name,
            brand=config.brand,
            category=FilmCategory(config.category),
            iso=config.iso,
            formats=frozenset(FilmFormat(f) for f in config.formats),
            grain=config.grain,
            saturation=config.saturation,
            contrast=config.contrast,
            latitude=config.latitude,
            sharpness=config.sharpness,
            skin_tones=config.skin_tones,
            color_bias=ColorBias(config.color_bias),
            ideal_light=frozenset(config.ideal_light),
            ideal_environment=frozenset(Environment(e) for e in config.ideal_environment),
            push_stops=config.push_stops,
            pull_stops=config.pull_stops,
            reciprocity_start=config.reciprocity_start,
            community_score=config.community_score,
            price_point=PricePoint(config.price_point),
        )
