from .models import FilmStock, ColorBias, PricePoint
from .film_catalog import FilmCatalog, get_catalog, reset_catalog

__all__ = [
    'FilmStock',
    'ColorBias',
    'PricePoint',
    'FilmCatalog',
    'get_catalog',
    'reset_catalog',
]
