from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from rollplanner.catalog.models import FilmStock


class LightCondition(Enum):
    """Light at the scene, brightest first"""
    HARSH = "harsh"
    BRIGHT = "bright"
    MIXED = "mixed"
    FLAT = "flat"
    DIM = "dim"
    DARK = "dark"

    @property
    def is_low_light(self) -> bool:
        return self in (LightCondition.DIM, LightCondition.DARK)


class Environment(Enum):
    PORTRAIT = "portrait"
    STREET = "street"
    ARCHITECTURE = "architecture"
    INTERIORS = "interiors"
    LANDSCAPE = "landscape"
    NATURE = "nature"


class Intent(Enum):
    """Creative mode; each carries a modifier vector in scoring.yaml"""
    CALM = "calm"
    GRAPHIC = "graphic"
    EMOTIONAL = "emotional"
    DOCUMENTARY = "documentary"
    NARRATIVE = "narrative"
    ABSTRACT = "abstract"
    TRAVEL = "travel"


class FilmCategory(Enum):
    COLOR_NEGATIVE = "color_negative"
    BW_NEGATIVE = "bw_negative"


class FilmType(Enum):
    COLOR = "color"
    BW = "bw"

    @property
    def category(self) -> FilmCategory:
        if self is FilmType.COLOR:
            return FilmCategory.COLOR_NEGATIVE
        return FilmCategory.BW_NEGATIVE

    @property
    def label(self) -> str:
        """Label used in exports"""
        return "Colour" if self is FilmType.COLOR else "B&W"


class FilmFormat(Enum):
    SMALL = "35mm"
    MEDIUM = "120"


class SunPosition(Enum):
    GOLDEN = "golden"
    HIGH = "high"
    LOW = "low"
    TWILIGHT = "twilight"
    NIGHT = "night"


@dataclass(frozen=True)
class WeatherData:
    """Weather reading as consumed by the engine"""
    conditions: str
    description: str
    cloud_cover: float  # 0-100
    visibility: float  # km
    sun_position: SunPosition
    light_quality: str = ""
    shooting_note: str = ""
    location_name: str = ""
    updated_at: Optional[float] = None  # unix seconds

    def __post_init__(self):
        if not isinstance(self.sun_position, SunPosition):
            object.__setattr__(self, 'sun_position', SunPosition(self.sun_position))

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['sun_position'] = self.sun_position.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WeatherData':
        return cls(**data)


@dataclass
class Recommendation:
    """
    Engine output for one request

    `film`, `ei`, `exposure` and `adjustments` are the user-facing fields;
    the rest identify the stock and explain how EI was reached.
    """
    film: str
    ei: int
    exposure: str
    adjustments: List[str] = field(default_factory=list)
    film_key: Optional[str] = None
    iso: Optional[int] = None
    push_stops: int = 0
    pull_stops: int = 0
    score: Optional[float] = None
    is_placeholder: bool = False

    @classmethod
    def no_film_available(cls) -> 'Recommendation':
        """Sentinel returned when no stock matches the requested type and format"""
        return cls(
            film="No film available",
            ei=400,
            exposure="Check your settings",
            adjustments=[],
            is_placeholder=True,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Recommendation':
        return cls(**data)


@dataclass(frozen=True)
class ExposureGuidance:
    aperture: str  # e.g. "f/16"
    shutter: str  # e.g. "1/125"
    note: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class MeteringTips:
    primary: str
    secondary: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class ExposureIndex:
    """Rating resolved for a stock in a given light"""
    ei: int
    push_stops: int = 0
    pull_stops: int = 0
    extra_push: bool = False  # one more stop for low visibility


@dataclass
class ScoredFilm:
    film: 'FilmStock'
    score: float
    breakdown: Dict[str, float] = field(default_factory=dict)
