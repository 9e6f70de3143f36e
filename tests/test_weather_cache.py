import pytest

from rollplanner.weather.cache import WeatherCache, coordinate_key

TTLS = {"locations": 100, "reverse_geocode": 100, "sun_times": 50, "forecast": 10}


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return WeatherCache(TTLS, clock=clock)


class TestWeatherCache:
    """Per-kind TTLs with an injected clock"""

    def test_hit_within_ttl(self, cache, clock):
        cache.set("forecast", "51.51,-0.13,2024-06-01,12", "reading")
        clock.advance(9)

        assert cache.get("forecast", "51.51,-0.13,2024-06-01,12") == "reading"
        assert cache.hits == 1

    def test_expires_after_ttl(self, cache, clock):
        cache.set("forecast", "key", "reading")
        clock.advance(10)

        assert cache.get("forecast", "key") is None
        assert cache.size("forecast") == 0
        assert cache.misses == 1

    def test_kinds_have_separate_ttls(self, cache, clock):
        cache.set("forecast", "key", "forecast")
        cache.set("locations", "key", "locations")
        clock.advance(60)

        assert cache.get("forecast", "key") is None
        assert cache.get("locations", "key") == "locations"

    def test_clear(self, cache):
        cache.set("forecast", "a", 1)
        cache.set("locations", "b", 2)

        cache.clear("forecast")
        assert cache.get_stats()["entries"] == {"locations": 1, "reverse_geocode": 0, "sun_times": 0, "forecast": 0}

        cache.clear()
        assert cache.size("locations") == 0

    def test_unknown_kind(self, cache):
        with pytest.raises(KeyError):
            cache.get("tides", "key")

    def test_missing_ttl(self):
        with pytest.raises(ValueError):
            WeatherCache({"forecast": 10})

    def test_coordinate_key(self):
        assert coordinate_key(51.50735, -0.12776, 2) == "51.51,-0.13"
        assert coordinate_key(51.50735, -0.12776, 3) == "51.507,-0.128"
