
from typing import Dict, Any, Optional, Tuple
from pathlib import Path

from pydantic import ValidationError

from config.domain_loader import DomainConfigLoader
from config.validators import (
    validate_all_domains,
    CatalogConfig,
    AlgorithmsConfig,
    ServicesConfig,
    SystemConfig,
    ScoringConfig,
    ExposureConfig,
    MeteringConfig,
    WeatherServiceConfig,
    LoggingConfig,
)


class DictWrapper:
    """
    Wrapper that provides attribute-style access to dictionaries
    e.g. settings.algorithms.scoring.weights.community
    """

    def __init__(self, data: Dict[str, Any]):
        self._data = data

    def __getattr__(self, name: str) -> Any:
        if name.startswith('_'):
            return object.__getattribute__(self, name)

        if name not in self._data:
            raise AttributeError(f"Config has no attribute '{name}'")

        value = self._data[name]

        # If value is a dict, wrap it for nested access
        if isinstance(value, dict):
            return DictWrapper(value)

        # If value is a list of dicts, wrap each dict
        if isinstance(value, list) and value and isinstance(value[0], dict):
            return [DictWrapper(item) if isinstance(item, dict) else item
                    for item in value]

        return value

    def __getitem__(self, key: str) -> Any:
        """Allow dictionary-style access as well"""
        value = self._data[key]
        if isinstance(value, dict):
            return DictWrapper(value)
        return value

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Dictionary-style get with default"""
        return self._data.get(key, default)

    def keys(self):
        return self._data.keys()

    def items(self):
        return self._data.items()

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to plain dictionary"""
        return self._data


class UnifiedSettings:
    """
    Single entry point to the domain configuration.

    Raw dictionaries are available through the domain accessors and the
    attribute wrappers; the typed accessors return validated pydantic models
    and fail with ValueError when the YAML breaks an invariant.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize unified settings

        Args:
            config_dir: Path to config directory (defaults to this file's parent)
        """
        self._loader = DomainConfigLoader(config_dir)
        self._validated: Optional[Tuple[CatalogConfig, AlgorithmsConfig, ServicesConfig, SystemConfig]] = None

        self._catalog_wrapper = DictWrapper(self._loader.get_catalog_config())
        self._algorithms_wrapper = DictWrapper(self._loader.get_algorithms_config())
        self._services_wrapper = DictWrapper(self._loader.get_services_config())
        self._system_wrapper = DictWrapper(self._loader.get_system_config())
        self._shared_wrapper = DictWrapper(self._loader.get_shared_config())

    @property
    def loader(self) -> DomainConfigLoader:
        return self._loader

    # =========================================================================
    # Domain-level accessors
    # =========================================================================

    def get_catalog_config(self) -> Dict[str, Any]:
        """Get catalog domain configuration"""
        return self._loader.get_catalog_config()

    def get_algorithms_config(self) -> Dict[str, Any]:
        """Get algorithms domain configuration"""
        return self._loader.get_algorithms_config()

    def get_services_config(self) -> Dict[str, Any]:
        """Get services domain configuration"""
        return self._loader.get_services_config()

    def get_system_config(self) -> Dict[str, Any]:
        """Get system domain configuration"""
        return self._loader.get_system_config()

    def get_shared_config(self) -> Dict[str, Any]:
        """Get shared configuration"""
        return self._loader.get_shared_config()

    def get_frame_counts(self, film_format: str) -> list:
        """Frame counts offered for a format, default first"""
        return list(self._loader.shared_loader.get_frame_counts(film_format))

    # =========================================================================
    # Typed accessors (validated models)
    # =========================================================================

    def _models(self) -> Tuple[CatalogConfig, AlgorithmsConfig, ServicesConfig, SystemConfig]:
        if self._validated is None:
            try:
                self._validated = validate_all_domains(
                    self._loader.get_catalog_config(),
                    self._loader.get_algorithms_config(),
                    self._loader.get_services_config(),
                    self._loader.get_system_config(),
                )
            except ValidationError as e:
                raise ValueError(f"Configuration validation failed: {e}") from e
        return self._validated

    def get_validated_domains(self) -> Tuple[CatalogConfig, AlgorithmsConfig, ServicesConfig, SystemConfig]:
        """(catalog, algorithms, services, system) as validated models"""
        return self._models()

    def get_catalog(self) -> CatalogConfig:
        """Validated film catalog"""
        return self._models()[0]

    def get_scoring_config(self) -> ScoringConfig:
        """Validated scoring weight table"""
        return self._models()[1].scoring

    def get_exposure_config(self) -> ExposureConfig:
        """Validated exposure tables"""
        return self._models()[1].exposure

    def get_metering_config(self) -> MeteringConfig:
        """Validated metering tips"""
        return self._models()[1].metering

    def get_weather_config(self) -> WeatherServiceConfig:
        """Validated weather service settings"""
        return self._models()[2].weather

    def get_logging_config(self) -> LoggingConfig:
        """Validated logging settings"""
        return self._models()[3].logging

    # =========================================================================
    # Attribute access
    # =========================================================================

    @property
    def catalog(self) -> DictWrapper:
        """settings.catalog.films.portra_400.iso"""
        return self._catalog_wrapper

    @property
    def algorithms(self) -> DictWrapper:
        """settings.algorithms.scoring.weights"""
        return self._algorithms_wrapper

    @property
    def services(self) -> DictWrapper:
        """settings.services.weather.forecast_url"""
        return self._services_wrapper

    @property
    def system(self) -> DictWrapper:
        return self._system_wrapper

    @property
    def shared(self) -> DictWrapper:
        """settings.shared.photography.standard_shutters"""
        return self._shared_wrapper

    @property
    def logging(self) -> DictWrapper:
        """settings.logging.level"""
        return DictWrapper(self._loader.get_logging_config())

    # =========================================================================
    # Validation
    # =========================================================================

    def validate(self) -> bool:
        """Validate all configurations"""
        return self._loader.validate_all_configs()


# =============================================================================
# Module-level singleton
# =============================================================================

_settings_instance: Optional[UnifiedSettings] = None


def get_settings(config_dir: Optional[Path] = None) -> UnifiedSettings:
    """
    Get or create the unified settings singleton

    Args:
        config_dir: Path to config directory (only used on first call)

    Returns:
        UnifiedSettings instance
    """
    global _settings_instance

    if _settings_instance is None:
        _settings_instance = UnifiedSettings(config_dir)

    return _settings_instance


def reset_settings():
    """Reset settings singleton (useful for testing)"""
    global _settings_instance
    _settings_instance = None


# =============================================================================
# Convenience functions
# =============================================================================

def get_scoring_config() -> ScoringConfig:
    return get_settings().get_scoring_config()


def get_exposure_config() -> ExposureConfig:
    return get_settings().get_exposure_config()


def get_metering_config() -> MeteringConfig:
    return get_settings().get_metering_config()


def get_weather_config() -> WeatherServiceConfig:
    return get_settings().get_weather_config()


def get_logging_config() -> LoggingConfig:
    return get_settings().get_logging_config()
