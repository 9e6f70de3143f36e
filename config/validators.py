from typing import Dict, Any, List, Tuple, Optional, Literal
from pydantic import BaseModel, Field, field_validator, model_validator


LIGHT_CONDITIONS = ("harsh", "bright", "mixed", "flat", "dim", "dark")
ENVIRONMENTS = ("portrait", "street", "architecture", "interiors", "landscape", "nature")
INTENTS = ("calm", "graphic", "emotional", "documentary", "narrative", "abstract", "travel")
SUN_POSITIONS = ("golden", "high", "low", "twilight", "night")

LightName = Literal["harsh", "bright", "mixed", "flat", "dim", "dark"]
EnvironmentName = Literal["portrait", "street", "architecture", "interiors", "landscape", "nature"]
IntentName = Literal["calm", "graphic", "emotional", "documentary", "narrative", "abstract", "travel"]
SunPositionName = Literal["golden", "high", "low", "twilight", "night"]
LightTag = Literal["harsh", "golden", "mixed", "flat"]
FilmFormatName = Literal["35mm", "120"]
ColorBiasName = Literal[
    "neutral", "warm", "cool", "neutral_warm", "neutral_cool", "very_warm", "green_shift"
]
PreferenceBucket = Literal["low", "medium", "high", "any"]


def _require_all(mapping: Dict[str, Any], names: Tuple[str, ...], label: str) -> None:
    missing = [name for name in names if name not in mapping]
    if missing:
        raise ValueError(f'{label} missing entries for: {missing}')


# =============================================================================
# CATALOG DOMAIN VALIDATORS
# =============================================================================

class FilmStockConfig(BaseModel):
    """Single film stock entry"""
    name: str = Field(min_length=1)
    brand: str = Field(min_length=1)
    category: Literal["color_negative", "bw_negative"]
    iso: int = Field(gt=0, le=25600)
    formats: List[FilmFormatName] = Field(min_length=1)

    # 0-10 characteristics
    grain: float = Field(ge=0, le=10)
    saturation: float = Field(ge=0, le=10)
    contrast: float = Field(ge=0, le=10)
    latitude: float = Field(ge=0, le=10)
    sharpness: float = Field(ge=0, le=10)
    skin_tones: float = Field(ge=0, le=10)

    color_bias: ColorBiasName
    ideal_light: List[LightTag] = Field(default_factory=list)
    ideal_environment: List[EnvironmentName] = Field(default_factory=list)

    push_stops: int = Field(ge=0, le=4)
    pull_stops: int = Field(ge=0, le=4)
    reciprocity_start: float = Field(gt=0)

    community_score: float = Field(ge=0, le=10)
    price_point: Literal["budget", "consumer", "professional", "premium"]

    model_config = {"extra": "forbid"}


class CatalogConfig(BaseModel):
    """Complete catalog domain"""
    films: Dict[str, FilmStockConfig]

    @field_validator('films')
    @classmethod
    def validate_films(cls, v: Dict[str, FilmStockConfig]) -> Dict[str, FilmStockConfig]:
        """Catalog must not be empty and keys must be stable identifiers"""
        if not v:
            raise ValueError('film catalog is empty')
        for key in v:
            if not key.replace('_', '').isalnum() or key != key.lower():
                raise ValueError(f'film key {key!r} must be lowercase letters, digits and underscores')
        return v


# =============================================================================
# ALGORITHMS DOMAIN VALIDATORS
# =============================================================================

class LightBandConfig(BaseModel):
    """ISO need for one light condition"""
    min: int = Field(gt=0)
    ideal: int = Field(gt=0)
    max: int = Field(gt=0)

    @model_validator(mode='after')
    def validate_order(self) -> 'LightBandConfig':
        """Ensure min <= ideal <= max"""
        if not self.min <= self.ideal <= self.max:
            raise ValueError('light band must satisfy min <= ideal <= max')
        return self


class ScoringWeightsConfig(BaseModel):
    """Named weights for every scoring term"""
    community: float = Field(ge=0)

    iso_native_fit: float
    iso_ideal_match: float
    iso_near_ideal: float
    iso_push_reachable: float
    iso_push_unreachable: float
    iso_pull_reachable: float
    iso_pull_unreachable: float

    environment_match: float
    grain_low_match: float
    grain_medium_match: float
    grain_high_match: float
    grain_mismatch_penalty: float = Field(le=0)
    contrast_low_match: float
    contrast_medium_match: float
    contrast_high_match: float
    skin_tone_bonus: float
    sharpness: float = Field(ge=0)
    latitude: float = Field(ge=0)
    color_bias_match: float

    intent_saturation_step: float = Field(ge=0)
    intent_contrast_step: float = Field(ge=0)
    intent_latitude_step: float = Field(ge=0)
    grain_tolerance: float = Field(ge=0)

    overcast_latitude: float
    clear_contrast: float
    clear_saturation: float
    haze_low_contrast: float
    visibility_saturation: float
    golden_warm_bias: float
    ideal_light_match: float

    reciprocity_comfortable: float
    reciprocity_excellent: float

    model_config = {"extra": "forbid"}

    @model_validator(mode='after')
    def validate_directions(self) -> 'ScoringWeightsConfig':
        """Rewards must stay rewards and penalties must stay penalties"""
        if self.iso_push_unreachable >= 0 or self.iso_pull_unreachable >= 0:
            raise ValueError('unreachable push/pull weights must be negative')
        if self.iso_push_reachable >= self.iso_native_fit:
            raise ValueError('a pushed fit must score below a native fit')
        if self.iso_pull_reachable >= self.iso_push_reachable:
            raise ValueError('a pulled fit must score below a pushed fit')
        if self.reciprocity_excellent < self.reciprocity_comfortable:
            raise ValueError('reciprocity_excellent must be >= reciprocity_comfortable')
        return self


class ScoringThresholdsConfig(BaseModel):
    """Thresholds the scoring terms compare against"""
    near_ideal_stops: float = Field(ge=0)
    grain_low_max: float = Field(ge=0, le=10)
    grain_medium_min: float = Field(ge=0, le=10)
    grain_medium_max: float = Field(ge=0, le=10)
    grain_high_min: float = Field(ge=0, le=10)
    grain_mismatch_min: float = Field(ge=0, le=10)
    grain_tolerance_full: float = Field(gt=0, le=3)
    contrast_low_max: float = Field(ge=0, le=10)
    contrast_medium_min: float = Field(ge=0, le=10)
    contrast_medium_max: float = Field(ge=0, le=10)
    contrast_high_min: float = Field(ge=0, le=10)
    skin_tones_min: float = Field(ge=0, le=10)
    intent_high: float = Field(ge=0, le=10)
    intent_low: float = Field(ge=0, le=10)
    intent_latitude_min: float = Field(ge=0, le=10)
    overcast_cloud_cover: float = Field(ge=0, le=100)
    clear_cloud_cover: float = Field(ge=0, le=100)
    overcast_latitude_min: float = Field(ge=0, le=10)
    clear_contrast_min: float = Field(ge=0, le=10)
    clear_saturation_min: float = Field(ge=0, le=10)
    low_visibility_km: float = Field(ge=0)
    high_visibility_km: float = Field(ge=0)
    haze_contrast_max: float = Field(ge=0, le=10)
    visibility_saturation_min: float = Field(ge=0, le=10)
    reciprocity_comfortable_seconds: float = Field(gt=0)
    reciprocity_excellent_seconds: float = Field(gt=0)

    model_config = {"extra": "forbid"}

    @model_validator(mode='after')
    def validate_ranges(self) -> 'ScoringThresholdsConfig':
        """Ensure paired thresholds are ordered"""
        if self.clear_cloud_cover >= self.overcast_cloud_cover:
            raise ValueError('clear_cloud_cover must be < overcast_cloud_cover')
        if self.low_visibility_km >= self.high_visibility_km:
            raise ValueError('low_visibility_km must be < high_visibility_km')
        if self.grain_medium_min > self.grain_medium_max:
            raise ValueError('grain_medium_min must be <= grain_medium_max')
        if self.contrast_medium_min > self.contrast_medium_max:
            raise ValueError('contrast_medium_min must be <= contrast_medium_max')
        if self.reciprocity_comfortable_seconds > self.reciprocity_excellent_seconds:
            raise ValueError('reciprocity thresholds out of order')
        return self


class EnvironmentPreferenceConfig(BaseModel):
    """What an environment asks of a film"""
    grain: PreferenceBucket
    contrast: PreferenceBucket
    skin_tones: bool = False
    sharpness_multiplier: float = Field(ge=0, le=5, default=1.0)
    latitude_multiplier: float = Field(ge=0, le=5, default=1.0)
    preferred_bias: List[ColorBiasName] = Field(default_factory=list)


class IntentModifierConfig(BaseModel):
    """Creative intent bonus vector"""
    saturation_bonus: int = Field(ge=-3, le=3)
    contrast_bonus: int = Field(ge=-3, le=3)
    grain_tolerance: int = Field(ge=0, le=3)
    latitude_bonus: int = Field(ge=0, le=3, default=0)


class ScoringConfig(BaseModel):
    """Complete scoring weight table"""
    light_bands: Dict[LightName, LightBandConfig]
    allow_pull: bool = True
    weights: ScoringWeightsConfig
    thresholds: ScoringThresholdsConfig
    warm_biases: List[ColorBiasName]
    sun_light_tags: Dict[SunPositionName, List[LightTag]]
    environments: Dict[EnvironmentName, EnvironmentPreferenceConfig]
    intents: Dict[IntentName, IntentModifierConfig]

    model_config = {"extra": "forbid"}

    @model_validator(mode='after')
    def validate_complete_tables(self) -> 'ScoringConfig':
        """Every light, environment, intent and sun position needs an entry"""
        _require_all(self.light_bands, LIGHT_CONDITIONS, 'light_bands')
        _require_all(self.environments, ENVIRONMENTS, 'environments')
        _require_all(self.intents, INTENTS, 'intents')
        _require_all(self.sun_light_tags, SUN_POSITIONS, 'sun_light_tags')
        return self


class ExposureIndexConfig(BaseModel):
    """Push/pull behaviour of the exposure-index resolver"""
    allow_pull: bool = True
    low_visibility_extra_push: bool = True
    low_visibility_km: float = Field(gt=0, le=20, default=3.0)


class BaseExposureConfig(BaseModel):
    """Sunny 16 row for one light condition"""
    aperture: float = Field(ge=1.0, le=32.0)
    shutter_divisor: float = Field(gt=0)
    note: str = Field(min_length=1)


class EnvironmentOverrideConfig(BaseModel):
    """Environment adjustment to the base exposure"""
    note: str = Field(min_length=1)
    aperture: Optional[float] = Field(default=None, ge=1.0, le=32.0)
    shutter_divisor: Optional[float] = Field(default=None, gt=0)
    applies_to: List[LightName] = Field(default_factory=list)
    max_aperture: Optional[float] = Field(default=None, ge=1.0, le=32.0)

    @model_validator(mode='after')
    def validate_override_pair(self) -> 'EnvironmentOverrideConfig':
        """aperture and shutter_divisor override together"""
        if (self.aperture is None) != (self.shutter_divisor is None):
            raise ValueError('aperture and shutter_divisor must be set together')
        return self


class WeatherNotesConfig(BaseModel):
    """Exposure notes that weather forces"""
    golden: str
    twilight: str
    low_visibility: str
    heavy_overcast: str


class WeatherNoteThresholdsConfig(BaseModel):
    low_visibility_km: float = Field(gt=0)
    heavy_overcast_cloud_cover: float = Field(ge=0, le=100)


class AdjustmentTextConfig(BaseModel):
    """Adjustment note templates"""
    push: str = Field(pattern=r'\{stops\}')
    pull: str = Field(pattern=r'\{stops\}')
    low_visibility: str
    tripod: str
    tripod_lights: List[LightName]


class ExposureConfig(BaseModel):
    """Exposure index, base table and guidance text"""
    light_bands: Dict[LightName, LightBandConfig]
    standard_shutters: List[int] = Field(min_length=1)
    standard_apertures: List[float] = Field(min_length=1)
    default_shutter: str = Field(pattern=r'^1/\d+$')
    exposure_index: ExposureIndexConfig
    base_table: Dict[LightName, BaseExposureConfig]
    environment_overrides: Dict[EnvironmentName, EnvironmentOverrideConfig] = Field(default_factory=dict)
    weather_notes: WeatherNotesConfig
    weather_thresholds: WeatherNoteThresholdsConfig
    approach: Dict[Literal["color", "bw"], Dict[LightName, str]]
    default_approach: str
    adjustments: AdjustmentTextConfig

    model_config = {"extra": "forbid"}

    @field_validator('standard_shutters')
    @classmethod
    def validate_shutters(cls, v: List[int]) -> List[int]:
        """Shutter denominators are positive and ascending"""
        if any(s <= 0 for s in v):
            raise ValueError('shutter denominators must be positive')
        if v != sorted(v):
            raise ValueError('standard_shutters must be ascending')
        return v

    @model_validator(mode='after')
    def validate_tables(self) -> 'ExposureConfig':
        """Every light has a row and every aperture is a standard full stop"""
        _require_all(self.light_bands, LIGHT_CONDITIONS, 'light_bands')
        _require_all(self.base_table, LIGHT_CONDITIONS, 'base_table')
        for film_type in ("color", "bw"):
            if film_type not in self.approach:
                raise ValueError(f'approach missing film type: {film_type}')
            _require_all(self.approach[film_type], LIGHT_CONDITIONS, f'approach.{film_type}')

        apertures = set(self.standard_apertures)
        for light, row in self.base_table.items():
            if row.aperture not in apertures:
                raise ValueError(f'base_table.{light} aperture f/{row.aperture} is not a standard stop')
        for env, override in self.environment_overrides.items():
            for value in (override.aperture, override.max_aperture):
                if value is not None and value not in apertures:
                    raise ValueError(f'{env} override aperture f/{value} is not a standard stop')

        default = int(self.default_shutter.split('/')[1])
        if default not in self.standard_shutters:
            raise ValueError(f'default_shutter {self.default_shutter} is not a standard speed')
        return self


class SecondaryTipsConfig(BaseModel):
    """Light and intent driven metering tips"""
    bright_deep_shadow: str
    bright_graphic: str
    bright_default: str
    flat_calm: str
    flat_default: str
    low_light_push: str
    low_light_default: str
    mixed: str


class MeteringConfig(BaseModel):
    """Metering tips tables"""
    primary: Dict[EnvironmentName, str]
    secondary: SecondaryTipsConfig
    deep_shadow_intents: List[IntentName] = Field(default_factory=list)
    graphic_intents: List[IntentName] = Field(default_factory=list)
    calm_intents: List[IntentName] = Field(default_factory=list)
    push_intents: List[IntentName] = Field(default_factory=list)
    weather: Dict[Literal["golden", "twilight"], str]
    disciplines: Dict[IntentName, str]

    model_config = {"extra": "forbid"}

    @model_validator(mode='after')
    def validate_complete_tables(self) -> 'MeteringConfig':
        _require_all(self.primary, ENVIRONMENTS, 'primary')
        _require_all(self.disciplines, INTENTS, 'disciplines')
        return self


class AlgorithmsConfig(BaseModel):
    """Complete algorithms domain"""
    scoring: ScoringConfig
    exposure: ExposureConfig
    metering: MeteringConfig

    model_config = {"extra": "forbid"}


# =============================================================================
# SERVICES DOMAIN VALIDATORS
# =============================================================================

class CacheTTLConfig(BaseModel):
    """Seconds each cache key-space stays fresh"""
    locations: float = Field(gt=0)
    reverse_geocode: float = Field(gt=0)
    sun_times: float = Field(gt=0)
    forecast: float = Field(gt=0)


class ThrottleConfig(BaseModel):
    min_distance_m: float = Field(ge=0, default=500)
    min_interval_s: float = Field(ge=0, default=60)


class SunPositionConfig(BaseModel):
    golden_fraction: float = Field(gt=0, lt=0.5, default=0.1)
    low_fraction: float = Field(gt=0, lt=0.5, default=0.2)
    twilight_minutes: float = Field(gt=0, le=120, default=30)

    @model_validator(mode='after')
    def validate_fractions(self) -> 'SunPositionConfig':
        if self.golden_fraction >= self.low_fraction:
            raise ValueError('golden_fraction must be < low_fraction')
        return self


class SunTimesConfig(BaseModel):
    golden_fraction: float = Field(gt=0, lt=0.5, default=0.1)
    twilight_offset_minutes: float = Field(gt=0, default=30)
    night_offset_minutes: float = Field(gt=0, default=90)


class WeatherServiceConfig(BaseModel):
    """Weather and geocoding HTTP settings"""
    forecast_url: str = Field(pattern=r'^https?://')
    geocoding_url: str = Field(pattern=r'^https?://')
    reverse_geocoding_url: str = Field(pattern=r'^https?://')
    user_agent: str = Field(min_length=1)
    timeout_s: float = Field(gt=0, le=60, default=10.0)
    search_result_count: int = Field(ge=1, le=20, default=6)
    search_min_query_length: int = Field(ge=1, default=2)
    default_location_name: str = "Current Location"
    cache_ttl_s: CacheTTLConfig
    throttle: ThrottleConfig = Field(default_factory=ThrottleConfig)
    sun_position: SunPositionConfig = Field(default_factory=SunPositionConfig)
    sun_times: SunTimesConfig = Field(default_factory=SunTimesConfig)
    location_clutter_words: List[str] = Field(default_factory=list)

    model_config = {"extra": "forbid"}


class ServicesConfig(BaseModel):
    """Complete services domain"""
    weather: WeatherServiceConfig


# =============================================================================
# SYSTEM DOMAIN VALIDATORS
# =============================================================================

class LoggingConfig(BaseModel):
    """Logging settings"""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["structured", "console"] = "console"
    console_output: bool = True
    file_path: Optional[str] = None
    max_file_size_mb: int = Field(ge=1, le=100, default=10)
    backup_count: int = Field(ge=0, le=20, default=3)


class SystemConfig(BaseModel):
    """Complete system domain"""
    logging: LoggingConfig

    model_config = {"extra": "forbid"}


# =============================================================================
# VALIDATION FUNCTIONS
# =============================================================================

def validate_catalog_config(config: Dict[str, Any]) -> CatalogConfig:
    """
    Validate catalog configuration

    Raises:
        ValidationError: If a film stock breaks its invariants
    """
    return CatalogConfig(**config)


def validate_scoring_config(config: Dict[str, Any]) -> ScoringConfig:
    """Validate scoring weight table"""
    return ScoringConfig(**config)


def validate_exposure_config(config: Dict[str, Any]) -> ExposureConfig:
    """Validate exposure tables"""
    return ExposureConfig(**config)


def validate_metering_config(config: Dict[str, Any]) -> MeteringConfig:
    """Validate metering tips"""
    return MeteringConfig(**config)


def validate_algorithms_config(config: Dict[str, Any]) -> AlgorithmsConfig:
    """Validate complete algorithms domain configuration"""
    return AlgorithmsConfig(**config)


def validate_services_config(config: Dict[str, Any]) -> ServicesConfig:
    """Validate services domain configuration"""
    return ServicesConfig(**config)


def validate_system_config(config: Dict[str, Any]) -> SystemConfig:
    """Validate system domain configuration"""
    return SystemConfig(**config)


def validate_all_domains(
        catalog: Dict[str, Any],
        algorithms: Dict[str, Any],
        services: Dict[str, Any],
        system: Dict[str, Any]
) -> Tuple[CatalogConfig, AlgorithmsConfig, ServicesConfig, SystemConfig]:
    """
    Validate all domain configurations at once

    Returns:
        Tuple of validated models: (CatalogConfig, AlgorithmsConfig, ServicesConfig, SystemConfig)

    Raises:
        ValidationError: If any configuration is invalid
    """
    cat = validate_catalog_config(catalog)
    alg = validate_algorithms_config(algorithms)
    svc = validate_services_config(services)
    sys_config = validate_system_config(system)

    return cat, alg, svc, sys_config


def validate_domain_consistency(
        catalog: CatalogConfig,
        algorithms: AlgorithmsConfig,
        services: ServicesConfig,
        system: SystemConfig
) -> bool:
    """
    Check cross-domain consistency

    Validates:
    - Scoring and exposure use the same light bands
    - Every catalog format has at least one colour or black and white stock

    Raises:
        ValueError: If cross-domain inconsistencies found
    """
    scoring_bands = {k: v.model_dump() for k, v in algorithms.scoring.light_bands.items()}
    exposure_bands = {k: v.model_dump() for k, v in algorithms.exposure.light_bands.items()}
    if scoring_bands != exposure_bands:
        raise ValueError('scoring and exposure light bands differ')

    formats = {fmt for film in catalog.films.values() for fmt in film.formats}
    for fmt in ("35mm", "120"):
        if fmt not in formats:
            raise ValueError(f'no film stock supports format {fmt}')

    return True


def get_validation_summary(
        catalog: CatalogConfig,
        algorithms: AlgorithmsConfig,
        services: ServicesConfig,
        system: SystemConfig
) -> str:
    """Get formatted validation summary"""
    colour = sum(1 for f in catalog.films.values() if f.category == "color_negative")
    bw = len(catalog.films) - colour
    return f"""
CONFIGURATION VALIDATION SUMMARY
================================

CATALOG
   Films: {len(catalog.films)} | Colour {colour} | B&W {bw}

ALGORITHMS
   Scoring: {len(algorithms.scoring.environments)} environments | {len(algorithms.scoring.intents)} intents | pull {'on' if algorithms.scoring.allow_pull else 'off'}
   Exposure: {len(algorithms.exposure.standard_shutters)} shutters | {len(algorithms.exposure.standard_apertures)} apertures

SERVICES
   Weather: {services.weather.forecast_url} | timeout {services.weather.timeout_s}s

SYSTEM
   Logging: {system.logging.level} | {system.logging.format}
"""


__all__ = [
    'CatalogConfig',
    'FilmStockConfig',
    'ScoringConfig',
    'ExposureConfig',
    'MeteringConfig',
    'AlgorithmsConfig',
    'WeatherServiceConfig',
    'ServicesConfig',
    'LoggingConfig',
    'SystemConfig',

    'validate_catalog_config',
    'validate_scoring_config',
    'validate_exposure_config',
    'validate_metering_config',
    'validate_algorithms_config',
    'validate_services_config',
    'validate_system_config',
    'validate_all_domains',
    'validate_domain_consistency',

    'get_validation_summary',
]
