from typing import Dict, Optional

from config.validators import ExposureIndexConfig, LightBandConfig
from ..catalog.models import FilmStock
from ..utils.photo_utils import whole_stops_needed
from ..types import ExposureIndex, LightCondition, WeatherData


class ExposureIndexResolver:
    """
    Resolve the rating for a stock in a given light

    Below the band minimum the stock is pushed toward the band ideal, above
    the band maximum it is pulled toward the ideal, both capped by what the
    stock tolerates. Very low visibility can add one extra push stop.
    """

    def __init__(self, light_bands: Dict[str, LightBandConfig], config: ExposureIndexConfig):
        self.light_bands = light_bands
        self.config = config

    def resolve(
            self,
            film: FilmStock,
            light: LightCondition,
            weather: Optional[WeatherData] = None
    ) -> ExposureIndex:
        band = self.light_bands[light.value]
        push = 0
        pull = 0

        if film.iso < band.min and film.push_stops > 0:
            push = min(whole_stops_needed(film.iso, band.ideal), film.push_stops)
        elif film.iso > band.max and film.pull_stops > 0 and self.config.allow_pull:
            pull = min(whole_stops_needed(band.ideal, film.iso), film.pull_stops)

        extra_push = (
            self.config.low_visibility_extra_push
            and weather is not None
            and weather.visibility < self.config.low_visibility_km
            and pull == 0
            and push < film.push_stops
        )
        if extra_push:
            push += 1

        if push:
            ei = film.iso * 2 ** push
        elif pull:
            ei = film.iso // 2 ** pull
        else:
            ei = film.iso

        return ExposureIndex(ei=ei, push_stops=push, pull_stops=pull, extra_push=extra_push)
