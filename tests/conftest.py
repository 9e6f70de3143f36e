import shutil
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from config.settings import get_settings, reset_settings
from rollplanner.catalog.film_catalog import get_catalog, reset_catalog
from rollplanner.catalog.models import ColorBias, FilmStock, PricePoint
from rollplanner.recommendation.recommender import reset_recommender
from rollplanner.types import (
    Environment,
    FilmCategory,
    FilmFormat,
    Intent,
    LightCondition,
    Recommendation,
    SunPosition,
    WeatherData,
)
from rollplanner.roll.session import RollSession


@pytest.fixture(autouse=True)
def reset_singletons():
    """Every test starts from the shipped configuration and a fresh catalog."""
    yield
    reset_recommender()
    reset_catalog()
    reset_settings()


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def catalog():
    return get_catalog()


@pytest.fixture
def config_copy(tmp_path):
    """Writable copy of the config directory"""
    target = tmp_path / "config"
    shutil.copytree(project_root / "config", target, ignore=shutil.ignore_patterns("*.py", "__pycache__"))
    return target


@pytest.fixture
def make_film():
    """Build a FilmStock with neutral defaults; override any field by keyword."""
    def _make(key="test_400", **overrides):
        values = dict(
            key=key,
            name=key.replace("_", " ").title(),
            brand="Test",
            category=FilmCategory.COLOR_NEGATIVE,
            iso=400,
            formats=frozenset({FilmFormat.SMALL, FilmFormat.MEDIUM}),
            grain=5,
            saturation=5,
            contrast=5,
            latitude=5,
            sharpness=5,
            skin_tones=5,
            color_bias=ColorBias.NEUTRAL,
            ideal_light=frozenset(),
            ideal_environment=frozenset(),
            push_stops=2,
            pull_stops=1,
            reciprocity_start=1,
            community_score=5,
            price_point=PricePoint.CONSUMER,
        )
        values.update(overrides)
        return FilmStock(**values)

    return _make


@pytest.fixture
def make_weather():
    def _make(**overrides):
        values = dict(
            conditions="Partly Cloudy",
            description="Partly cloudy",
            cloud_cover=40,
            visibility=15,
            sun_position=SunPosition.HIGH,
            location_name="Shoreditch",
        )
        values.update(overrides)
        return WeatherData(**values)

    return _make


@pytest.fixture
def recommendation():
    return Recommendation(
        film="Kodak Portra 400",
        ei=800,
        exposure="Open up and embrace the grain. Shadows can go.",
        adjustments=["Push 1 stop(s) in development"],
        film_key="portra_400",
        iso=400,
        push_stops=1,
    )


@pytest.fixture
def loaded_at():
    return datetime(2024, 6, 1, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def locked_session(recommendation, loaded_at):
    session = RollSession(
        light=LightCondition.DIM,
        environment=Environment.STREET,
        intent=Intent.DOCUMENTARY,
    )
    return session.lock(recommendation, roll_number=3, now=loaded_at)
