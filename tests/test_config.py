"""
Configuration loading and validation
====================================
Shared references, domain loading, pydantic validators and the settings facade
"""

import copy

import pytest
from pydantic import ValidationError

from config.domain_loader import DomainConfigLoader
from config.settings import DictWrapper, UnifiedSettings, get_settings, reset_settings
from config.shared_loader import SharedConfigLoader
from config.validators import (
    get_validation_summary,
    validate_all_domains,
    validate_catalog_config,
    validate_domain_consistency,
    validate_exposure_config,
    validate_metering_config,
    validate_scoring_config,
)
from rollplanner.catalog.film_catalog import get_catalog, reset_catalog
from rollplanner.utils.exceptions import ConfigurationError


@pytest.fixture
def loader():
    return DomainConfigLoader()


class TestSharedConfigLoader:
    """Shared photography values and ${shared.x} resolution"""

    def test_standard_lists(self):
        shared = SharedConfigLoader()

        assert shared.get_standard_shutters()[0] == 1
        assert shared.get_standard_shutters()[-1] == 4000
        assert 16.0 in shared.get_standard_apertures()
        assert shared.get_frame_counts("35mm") == [36, 24]
        assert shared.get_frame_counts("120") == [12, 16]

    def test_resolve_reference(self):
        shared = SharedConfigLoader()

        band = shared.resolve_reference("photography.light_bands.harsh")

        assert band == {"min": 50, "ideal": 100, "max": 400}

    def test_invalid_reference_raises(self):
        with pytest.raises(KeyError):
            SharedConfigLoader().resolve_reference("photography.nope")

    def test_references_resolved_recursively(self):
        shared = SharedConfigLoader()
        config = {"a": ["${shared.photography.default_shutter}", "plain"], "b": {"c": 1}}

        resolved = shared.resolve_references_in_config(config)

        assert resolved == {"a": ["1/60", "plain"], "b": {"c": 1}}

    def test_missing_shared_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            SharedConfigLoader(tmp_path)


class TestDomainConfigLoader:
    """Domain directories load into nested dicts with references resolved"""

    def test_domains_loaded(self, loader):
        assert "films" in loader.get_catalog_config()
        assert set(loader.get_algorithms_config()) == {"scoring", "exposure", "metering"}
        assert "weather" in loader.get_services_config()
        assert "logging" in loader.get_system_config()

    def test_light_bands_resolved_from_shared(self, loader):
        shared_bands = loader.get_shared_config()["photography"]["light_bands"]

        assert loader.get_scoring_config()["light_bands"] == shared_bands
        assert loader.get_exposure_config()["light_bands"] == shared_bands

    def test_validate_all_configs(self, loader):
        assert loader.validate_all_configs() is True

    def test_invalid_yaml_raises_value_error(self, config_copy):
        (config_copy / "algorithms" / "metering.yaml").write_text("primary: [unclosed\n")

        with pytest.raises(ValueError):
            DomainConfigLoader(config_copy)


class TestValidators:
    """pydantic models reject tables that would break scoring invariants"""

    def test_shipped_config_validates(self, loader):
        catalog, algorithms, services, system = validate_all_domains(
            loader.get_catalog_config(),
            loader.get_algorithms_config(),
            loader.get_services_config(),
            loader.get_system_config(),
        )

        assert len(catalog.films) == 28
        assert algorithms.scoring.allow_pull is True
        assert services.weather.throttle.min_distance_m == 500
        assert system.logging.level == "INFO"
        assert validate_domain_consistency(catalog, algorithms, services, system) is True

    def test_light_band_order_enforced(self, loader):
        scoring = copy.deepcopy(loader.get_scoring_config())
        scoring["light_bands"]["dim"] = {"min": 800, "ideal": 400, "max": 3200}

        with pytest.raises(ValidationError):
            validate_scoring_config(scoring)

    def test_missing_intent_rejected(self, loader):
        scoring = copy.deepcopy(loader.get_scoring_config())
        del scoring["intents"]["travel"]

        with pytest.raises(ValidationError, match="intents missing"):
            validate_scoring_config(scoring)

    def test_positive_unreachable_weight_rejected(self, loader):
        scoring = copy.deepcopy(loader.get_scoring_config())
        scoring["weights"]["iso_push_unreachable"] = 25

        with pytest.raises(ValidationError, match="negative"):
            validate_scoring_config(scoring)

    def test_unknown_weight_rejected(self, loader):
        scoring = copy.deepcopy(loader.get_scoring_config())
        scoring["weights"]["vibes"] = 3

        with pytest.raises(ValidationError):
            validate_scoring_config(scoring)

    def test_push_text_needs_placeholder(self, loader):
        exposure = copy.deepcopy(loader.get_exposure_config())
        exposure["adjustments"]["push"] = "Push it"

        with pytest.raises(ValidationError):
            validate_exposure_config(exposure)

    def test_non_standard_aperture_rejected(self, loader):
        exposure = copy.deepcopy(loader.get_exposure_config())
        exposure["base_table"]["harsh"]["aperture"] = 13.0

        with pytest.raises(ValidationError, match="standard stop"):
            validate_exposure_config(exposure)

    def test_missing_discipline_rejected(self, loader):
        metering = copy.deepcopy(loader.get_metering_config())
        del metering["disciplines"]["travel"]

        with pytest.raises(ValidationError, match="disciplines missing"):
            validate_metering_config(metering)

    def test_film_key_must_be_lowercase(self, loader):
        catalog = copy.deepcopy(loader.get_catalog_config())
        catalog["films"]["Portra_160"] = catalog["films"].pop("portra_160")

        with pytest.raises(ValidationError):
            validate_catalog_config(catalog)

    def test_unknown_environment_tag_rejected(self, loader):
        catalog = copy.deepcopy(loader.get_catalog_config())
        catalog["films"]["portra_160"]["ideal_environment"] = ["wedding"]

        with pytest.raises(ValidationError):
            validate_catalog_config(catalog)

    def test_validation_summary(self, settings):
        summary = get_validation_summary(*settings.get_validated_domains())

        assert "Films: 28" in summary
        assert "Colour 14 | B&W 14" in summary


class TestUnifiedSettings:
    """Attribute access, typed accessors and the singleton"""

    def test_dict_wrapper_access(self):
        wrapper = DictWrapper({"a": {"b": 1}, "items": [{"c": 2}]})

        assert wrapper.a.b == 1
        assert wrapper["a"]["b"] == 1
        assert wrapper.get("items")[0] == {"c": 2}
        assert "a" in wrapper
        with pytest.raises(AttributeError):
            wrapper.missing

    def test_attribute_access(self, settings):
        assert settings.catalog.films.portra_400.iso == 400
        assert settings.shared.defaults.system.name == "roll_planner"
        assert settings.logging.level == "INFO"
        assert settings.services.weather.default_location_name == "Current Location"

    def test_typed_accessors(self, settings):
        assert settings.get_scoring_config().weights.community == 3.0
        assert settings.get_exposure_config().default_shutter == "1/60"
        assert settings.get_metering_config().primary["portrait"].startswith("Meter off")
        assert settings.get_weather_config().cache_ttl_s.forecast == 1800
        assert settings.get_logging_config().format == "console"

    def test_singleton(self):
        assert get_settings() is get_settings()
        first = get_settings()
        reset_settings()
        assert get_settings() is not first

    def test_invalid_table_surfaces_as_value_error(self, config_copy):
        scoring = config_copy / "algorithms" / "scoring.yaml"
        scoring.write_text(scoring.read_text().replace("iso_push_unreachable: -25", "iso_push_unreachable: 25"))

        settings = UnifiedSettings(config_copy)

        with pytest.raises(ValueError, match="Configuration validation failed"):
            settings.get_scoring_config()

    def test_invalid_catalog_raises_configuration_error(self, config_copy):
        films = config_copy / "catalog" / "films.yaml"
        films.write_text(films.read_text().replace("iso: 160", "iso: -160"))

        reset_settings()
        reset_catalog()
        get_settings(config_copy)

        with pytest.raises(ConfigurationError):
            get_catalog()
