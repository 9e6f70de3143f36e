import time
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

import httpx

from config.validators import WeatherServiceConfig
from ..types import WeatherData
from ..utils.exceptions import GeocodingError, WeatherFetchError
from ..utils.logger import get_logger
from .analysis import (
    SunTimes,
    clean_location_name,
    compute_sun_times,
    describe_weather_code,
    get_light_quality,
    get_shooting_note,
    get_sun_position,
    haversine_distance_m,
)
from .cache import WeatherCache, coordinate_key

logger = get_logger(__name__)


@dataclass(frozen=True)
class LocationResult:
    name: str
    display_name: str
    lat: float
    lon: float


class WeatherService:
    """
    Async client for Open-Meteo forecasts and geocoding plus Nominatim
    reverse geocoding.

    Transport and payload failures become WeatherFetchError/GeocodingError
    inside the service; the public fetchers log them and return "no data"
    (None, [] or the default location name) since the recommendation engine
    works without weather.
    """

    def __init__(
            self,
            config: WeatherServiceConfig,
            cache: Optional[WeatherCache] = None,
            client: Optional[httpx.AsyncClient] = None
    ):
        self.config = config
        self.cache = cache or WeatherCache(config.cache_ttl_s.model_dump())
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=config.timeout_s)

    async def __aenter__(self) -> 'WeatherService':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self):
        if self._owns_client:
            await self._client.aclose()

    # =========================================================================
    # HTTP
    # =========================================================================

    async def _get_json(
            self,
            url: str,
            params: Dict[str, Any],
            headers: Optional[Dict[str, str]] = None
    ) -> Any:
        try:
            response = await self._client.get(url, params=params, headers=headers)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            raise WeatherFetchError(
                f"Request to {url} failed",
                details={'url': url},
                original_error=e
            ) from e
        except ValueError as e:
            raise WeatherFetchError(
                f"Invalid JSON from {url}",
                details={'url': url},
                original_error=e
            ) from e

    def _forecast_params(self, lat: float, lon: float, **extra: str) -> Dict[str, Any]:
        params = {
            'latitude': lat,
            'longitude': lon,
            'daily': 'sunrise,sunset',
            'timezone': 'auto',
        }
        params.update(extra)
        return params

    # =========================================================================
    # Weather
    # =========================================================================

    async def fetch_weather(self, lat: float, lon: float) -> Optional[WeatherData]:
        """Current conditions, or None when the forecast cannot be read"""
        try:
            data = await self._get_json(
                self.config.forecast_url,
                self._forecast_params(lat, lon, current='cloud_cover,visibility,weather_code,is_day'),
            )
            current = data['current']
            sunrise, sunset = self._sunrise_sunset(data)
            now = self._local_now(data)

            reading = self._build_reading(
                now=now,
                sunrise=sunrise,
                sunset=sunset,
                is_day=current['is_day'] == 1,
                cloud_cover=current['cloud_cover'],
                visibility_m=current['visibility'],
                weather_code=current['weather_code'],
            )
        except WeatherFetchError as e:
            logger.error("weather_fetch_failed", lat=lat, lon=lon, exception=e)
            return None
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.error("weather_payload_invalid", lat=lat, lon=lon, exception=e)
            return None

        location_name = await self.reverse_geocode(lat, lon)
        return self._with_location(reading, location_name)

    async def fetch_forecast_weather(self, lat: float, lon: float, target: datetime) -> Optional[WeatherData]:
        """Forecast conditions for the hour of `target` (location-local time)"""
        date_str = target.date().isoformat()
        cache_key = f"{coordinate_key(lat, lon, 2)},{date_str},{target.hour}"

        cached = self.cache.get('forecast', cache_key)
        if cached is not None:
            return cached

        try:
            data = await self._get_json(
                self.config.forecast_url,
                self._forecast_params(
                    lat, lon,
                    hourly='cloud_cover,visibility,weather_code',
                    start_date=date_str,
                    end_date=date_str,
                ),
            )
            hourly = data['hourly']
            index = min(target.hour, len(hourly['time']) - 1)
            sunrise, sunset = self._sunrise_sunset(data)
            hour_time = datetime.fromisoformat(hourly['time'][index])

            reading = self._build_reading(
                now=target,
                sunrise=sunrise,
                sunset=sunset,
                is_day=sunrise <= hour_time <= sunset,
                cloud_cover=hourly['cloud_cover'][index] or 0,
                visibility_m=hourly['visibility'][index] or 10000,
                weather_code=hourly['weather_code'][index],
            )
        except WeatherFetchError as e:
            logger.error("forecast_fetch_failed", lat=lat, lon=lon, target=target.isoformat(), exception=e)
            return None
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.error("forecast_payload_invalid", lat=lat, lon=lon, exception=e)
            return None

        location_name = await self.reverse_geocode(lat, lon)
        result = self._with_location(reading, location_name)
        self.cache.set('forecast', cache_key, result)
        return result

    async def get_sun_times(self, lat: float, lon: float, day: date) -> Optional[SunTimes]:
        """Sunrise, sunset and the shooting times derived from them"""
        date_str = day.isoformat()
        cache_key = f"{coordinate_key(lat, lon, 2)},{date_str}"

        cached = self.cache.get('sun_times', cache_key)
        if cached is not None:
            return cached

        try:
            data = await self._get_json(
                self.config.forecast_url,
                self._forecast_params(lat, lon, start_date=date_str, end_date=date_str),
            )
            sunrise, sunset = self._sunrise_sunset(data)
        except WeatherFetchError as e:
            logger.error("sun_times_fetch_failed", lat=lat, lon=lon, exception=e)
            return None
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.error("sun_times_payload_invalid", lat=lat, lon=lon, exception=e)
            return None

        settings = self.config.sun_times
        result = compute_sun_times(
            sunrise,
            sunset,
            golden_fraction=settings.golden_fraction,
            twilight_offset_minutes=settings.twilight_offset_minutes,
            night_offset_minutes=settings.night_offset_minutes,
        )
        self.cache.set('sun_times', cache_key, result)
        return result

    # =========================================================================
    # Geocoding
    # =========================================================================

    async def reverse_geocode(self, lat: float, lon: float) -> str:
        """Most specific place name for the coordinates"""
        default = self.config.default_location_name
        cache_key = coordinate_key(lat, lon, 3)

        cached = self.cache.get('reverse_geocode', cache_key)
        if cached is not None:
            return cached

        try:
            data = await self._get_json(
                self.config.reverse_geocoding_url,
                {'lat': lat, 'lon': lon, 'format': 'json'},
                headers={'User-Agent': self.config.user_agent},
            )
            name = self._place_name(data)
        except (WeatherFetchError, GeocodingError) as e:
            logger.warning("reverse_geocode_failed", lat=lat, lon=lon, exception=e)
            return default

        self.cache.set('reverse_geocode', cache_key, name)
        return name

    async def search_locations(self, query: str) -> List[LocationResult]:
        """Forward geocoding, results in the API's relevance order"""
        if not query or len(query.strip()) < self.config.search_min_query_length:
            return []

        cache_key = query.strip().lower()
        cached = self.cache.get('locations', cache_key)
        if cached is not None:
            return cached

        try:
            data = await self._get_json(
                self.config.geocoding_url,
                {
                    'name': query.strip(),
                    'count': self.config.search_result_count,
                    'language': 'en',
                    'format': 'json',
                },
            )
            results = [self._location_result(item) for item in data.get('results') or []]
        except WeatherFetchError as e:
            logger.warning("location_search_failed", query=query, exception=e)
            return []
        except (KeyError, TypeError, AttributeError) as e:
            logger.warning("location_search_payload_invalid", query=query, exception=e)
            return []

        if results:
            self.cache.set('locations', cache_key, results)
        return results

    # =========================================================================
    # Payload helpers
    # =========================================================================

    def _build_reading(
            self,
            now: datetime,
            sunrise: datetime,
            sunset: datetime,
            is_day: bool,
            cloud_cover: float,
            visibility_m: float,
            weather_code: int
    ) -> WeatherData:
        bands = self.config.sun_position
        sun_position = get_sun_position(
            now, sunrise, sunset, is_day,
            golden_fraction=bands.golden_fraction,
            low_fraction=bands.low_fraction,
            twilight_minutes=bands.twilight_minutes,
        )
        visibility = visibility_m / 1000
        condition, description = describe_weather_code(weather_code)

        return WeatherData(
            conditions=condition,
            description=description,
            cloud_cover=cloud_cover,
            visibility=round(visibility, 1),
            sun_position=sun_position,
            light_quality=get_light_quality(cloud_cover, visibility, sun_position),
            shooting_note=get_shooting_note(cloud_cover, visibility, sun_position, weather_code),
            updated_at=time.time(),
        )

    @staticmethod
    def _with_location(reading: WeatherData, location_name: str) -> WeatherData:
        data = reading.to_dict()
        data['location_name'] = location_name
        return WeatherData.from_dict(data)

    @staticmethod
    def _sunrise_sunset(data: Dict[str, Any]):
        daily = data['daily']
        return datetime.fromisoformat(daily['sunrise'][0]), datetime.fromisoformat(daily['sunset'][0])

    @staticmethod
    def _local_now(data: Dict[str, Any]) -> datetime:
        """Location-local naive time, comparable with the daily sunrise/sunset"""
        current_time = data.get('current', {}).get('time')
        if current_time:
            return datetime.fromisoformat(current_time)
        offset = timedelta(seconds=data.get('utc_offset_seconds', 0))
        return (datetime.now(timezone.utc) + offset).replace(tzinfo=None)

    def _place_name(self, data: Dict[str, Any]) -> str:
        if not isinstance(data, dict) or not isinstance(data.get('address'), dict):
            raise GeocodingError("Reverse geocoding returned no address", details={'payload': str(data)[:200]})

        address = data['address']
        for field in ('neighbourhood', 'suburb', 'city_district', 'city', 'town', 'village'):
            if address.get(field):
                return address[field]
        return self.config.default_location_name

    def _location_result(self, item: Dict[str, Any]) -> LocationResult:
        clutter = self.config.location_clutter_words
        city = clean_location_name(item['name'], clutter)

        parts = [city]
        if item.get('admin1'):
            region = clean_location_name(item['admin1'], clutter)
            if region != city:
                parts.append(region)
        if item.get('country'):
            parts.append(item['country'])

        return LocationResult(
            name=city,
            display_name=', '.join(parts),
            lat=item['latitude'],
            lon=item['longitude'],
        )


class LocationThrottle:
    """
    Skip a weather refetch when the device has barely moved

    A fetch is skipped only when it is both sooner than `min_interval_s`
    and closer than `min_distance_m` to the last recorded fetch.
    """

    def __init__(
            self,
            min_distance_m: float = 500,
            min_interval_s: float = 60,
            clock: Callable[[], float] = time.monotonic
    ):
        self.min_distance_m = min_distance_m
        self.min_interval_s = min_interval_s
        self._clock = clock
        self._last: Optional[tuple] = None

    def should_fetch(self, lat: float, lon: float, force: bool = False) -> bool:
        if force or self._last is None:
            return True

        last_lat, last_lon, last_time = self._last
        elapsed = self._clock() - last_time
        distance = haversine_distance_m(last_lat, last_lon, lat, lon)
        return not (elapsed < self.min_interval_s and distance < self.min_distance_m)

    def record(self, lat: float, lon: float) -> None:
        self._last = (lat, lon, self._clock())
