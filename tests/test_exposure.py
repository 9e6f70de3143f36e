import pytest

from rollplanner.recommendation.exposure_index import ExposureIndexResolver
from rollplanner.recommendation.exposure_settings import ExposureSettingsGenerator
from rollplanner.types import Environment, LightCondition, SunPosition
from rollplanner.utils.photo_utils import (
    aperture_stop_difference,
    format_aperture,
    nearest_shutter,
    stops_between,
    whole_stops_needed,
)


@pytest.fixture
def exposure_config(settings):
    return settings.get_exposure_config()


@pytest.fixture
def resolver(exposure_config):
    return ExposureIndexResolver(exposure_config.light_bands, exposure_config.exposure_index)


@pytest.fixture
def generator(exposure_config):
    return ExposureSettingsGenerator(exposure_config)


class TestPhotoUtils:

    @pytest.mark.parametrize("target,expected", [
        (160, "1/125"),
        (2560, "1/2000"),
        (200, "1/250"),
        (0.3, "1/1"),
        (10000, "1/4000"),
    ])
    def test_nearest_shutter(self, target, expected):
        assert nearest_shutter(target) == expected

    def test_nearest_shutter_tie_goes_to_slower(self):
        # 45 is 15 from both 30 and 60
        assert nearest_shutter(45, [30, 60], "1/60") == "1/30"

    @pytest.mark.parametrize("target", [0, -5])
    def test_non_positive_target_uses_default(self, target):
        assert nearest_shutter(target) == "1/60"

    def test_format_aperture(self):
        assert format_aperture(16.0) == "f/16"
        assert format_aperture(5.6) == "f/5.6"

    def test_stop_helpers(self):
        assert stops_between(100, 400) == pytest.approx(2)
        assert stops_between(0, 400) == 0
        assert whole_stops_needed(400, 1600) == 2
        assert whole_stops_needed(400, 1000) == 2
        assert whole_stops_needed(1600, 400) == 0
        assert aperture_stop_difference(16.0, 4.0) == 4
        assert aperture_stop_difference(11.0, 4.0) == 3


class TestExposureIndexResolver:
    """EI from the light band and the stock's push/pull tolerance"""

    def test_in_band_rates_at_box_speed(self, resolver, make_film):
        index = resolver.resolve(make_film(iso=400), LightCondition.MIXED)

        assert index.ei == 400
        assert index.push_stops == 0
        assert index.pull_stops == 0

    def test_push_toward_ideal(self, resolver, make_film):
        index = resolver.resolve(make_film(iso=400, push_stops=3), LightCondition.DARK)

        assert index.push_stops == 2
        assert index.ei == 1600

    def test_push_capped_by_stock(self, resolver, make_film):
        index = resolver.resolve(make_film(iso=100, push_stops=1), LightCondition.DARK)

        assert index.ei == 200

    def test_pull_toward_ideal(self, resolver, make_film):
        index = resolver.resolve(make_film(iso=3200, pull_stops=2), LightCondition.HARSH)

        assert index.pull_stops == 2
        assert index.ei == 800

    def test_pull_disabled(self, exposure_config, make_film):
        no_pull = exposure_config.exposure_index.model_copy(update={"allow_pull": False})
        resolver = ExposureIndexResolver(exposure_config.light_bands, no_pull)

        assert resolver.resolve(make_film(iso=3200, pull_stops=2), LightCondition.HARSH).ei == 3200

    def test_ei_monotonic_as_light_falls(self, resolver, make_film):
        film = make_film(iso=400, push_stops=3, pull_stops=1)
        lights = list(LightCondition)

        eis = [resolver.resolve(film, light).ei for light in lights]

        assert eis == sorted(eis)
        assert eis[-1] >= film.iso

    def test_low_visibility_extra_push(self, resolver, make_film, make_weather):
        film = make_film(iso=400, push_stops=3)
        hazy = make_weather(visibility=1)

        index = resolver.resolve(film, LightCondition.DIM, hazy)

        assert index.extra_push is True
        assert index.push_stops == 1
        assert index.ei == 800

    def test_extra_push_respects_stock_limit(self, resolver, make_film, make_weather):
        film = make_film(iso=400, push_stops=2)

        index = resolver.resolve(film, LightCondition.DARK, make_weather(visibility=1))

        assert index.extra_push is False
        assert index.ei == 1600

    def test_clear_weather_adds_nothing(self, resolver, make_film, make_weather):
        index = resolver.resolve(make_film(iso=400), LightCondition.DIM, make_weather(visibility=20))

        assert index.extra_push is False
        assert index.ei == 400


class TestExposureSettingsGenerator:
    """Sunny 16 table, environment overrides and weather notes"""

    def test_base_table(self, generator):
        guidance = generator.generate(LightCondition.HARSH, 160, Environment.STREET)

        assert guidance.aperture == "f/16"
        assert guidance.shutter == "1/125"
        assert guidance.note == "Bright sun. Watch for harsh shadows."

    def test_low_light_divisor(self, generator):
        guidance = generator.generate(LightCondition.DIM, 800, Environment.STREET)

        assert guidance.aperture == "f/4"
        assert guidance.shutter == "1/250"

    def test_portrait_opens_up_and_compensates(self, generator):
        guidance = generator.generate(LightCondition.HARSH, 160, Environment.PORTRAIT)

        assert guidance.aperture == "f/4"
        assert guidance.shutter == "1/2000"
        assert guidance.note == "Open up for shallow depth. Meter for skin."

    def test_portrait_already_wide_is_unchanged(self, generator):
        guidance = generator.generate(LightCondition.DARK, 1600, Environment.PORTRAIT)

        assert guidance.aperture == "f/2.8"
        assert guidance.shutter == "1/250"

    def test_interiors_override_in_bright_light(self, generator):
        guidance = generator.generate(LightCondition.BRIGHT, 400, Environment.INTERIORS)

        assert guidance.aperture == "f/5.6"
        assert guidance.shutter == "1/125"
        assert guidance.note.startswith("Interior light")

    def test_interiors_override_skipped_in_dim_light(self, generator):
        guidance = generator.generate(LightCondition.DIM, 800, Environment.INTERIORS)

        assert guidance.aperture == "f/4"
        assert guidance.note.startswith("Interior light")

    @pytest.mark.parametrize("overrides,expected_start", [
        ({"sun_position": SunPosition.GOLDEN, "visibility": 1, "cloud_cover": 95}, "Golden hour"),
        ({"sun_position": SunPosition.TWILIGHT, "visibility": 1}, "Blue hour"),
        ({"visibility": 3, "cloud_cover": 95}, "Haze or fog"),
        ({"cloud_cover": 85}, "Heavy overcast"),
    ])
    def test_weather_note_precedence(self, generator, make_weather, overrides, expected_start):
        guidance = generator.generate(LightCondition.FLAT, 400, Environment.LANDSCAPE, make_weather(**overrides))

        assert guidance.note.startswith(expected_start)

    def test_unremarkable_weather_keeps_table_note(self, generator, make_weather):
        with_weather = generator.generate(LightCondition.FLAT, 400, Environment.LANDSCAPE, make_weather())
        without = generator.generate(LightCondition.FLAT, 400, Environment.LANDSCAPE)

        assert with_weather == without
        assert without.note == "Stop down for depth. Meter for midtones."
