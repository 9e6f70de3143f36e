import pytest

from rollplanner.recommendation.metering_tips import MeteringTipsGenerator
from rollplanner.types import Environment, Intent, LightCondition, SunPosition


@pytest.fixture
def generator(settings):
    return MeteringTipsGenerator(settings.get_metering_config())


class TestMeteringTips:
    """Primary tip by environment, secondary by light and intent"""

    def test_primary_follows_environment(self, generator):
        tips = generator.generate(LightCondition.MIXED, Environment.INTERIORS, Intent.CALM)

        assert tips.primary == "Meter the brightest area you want detail in, then open 2 stops."

    @pytest.mark.parametrize("light,intent,expected", [
        (LightCondition.HARSH, Intent.EMOTIONAL, "Let shadows go deep for mood. Expose for highlights."),
        (LightCondition.BRIGHT, Intent.GRAPHIC, "Meter the highlights and let shadows fall to black for shape."),
        (LightCondition.HARSH, Intent.TRAVEL, "Watch contrast. Expose for shadows on negative film."),
        (LightCondition.FLAT, Intent.CALM, "Soft light suits stillness. Trust your meter and slow down."),
        (LightCondition.FLAT, Intent.GRAPHIC, "Even light is forgiving. Trust your meter reading."),
        (LightCondition.DIM, Intent.DOCUMENTARY, "Push processing can recover 1-2 stops if needed."),
        (LightCondition.DARK, Intent.NARRATIVE, "Push processing can recover 1-2 stops if needed."),
        (LightCondition.DARK, Intent.CALM, "Bracket exposures. Err on the side of overexposure."),
        (LightCondition.MIXED, Intent.EMOTIONAL, "Take multiple readings. Expose for your subject."),
    ])
    def test_secondary_decision_table(self, generator, light, intent, expected):
        tips = generator.generate(light, Environment.STREET, intent)

        assert tips.secondary == expected

    def test_golden_weather_overrides_secondary(self, generator, make_weather):
        tips = generator.generate(
            LightCondition.HARSH, Environment.PORTRAIT, Intent.EMOTIONAL,
            make_weather(sun_position=SunPosition.GOLDEN),
        )

        assert tips.primary.startswith("Meter off the subject's face")
        assert tips.secondary.startswith("Golden light is warm and low")

    def test_twilight_weather_overrides_secondary(self, generator, make_weather):
        tips = generator.generate(
            LightCondition.DIM, Environment.STREET, Intent.DOCUMENTARY,
            make_weather(sun_position=SunPosition.TWILIGHT),
        )

        assert tips.secondary.startswith("Blue hour fades fast")

    def test_midday_weather_keeps_table(self, generator, make_weather):
        with_weather = generator.generate(LightCondition.FLAT, Environment.NATURE, Intent.CALM, make_weather())
        without = generator.generate(LightCondition.FLAT, Environment.NATURE, Intent.CALM)

        assert with_weather == without
