from typing import Dict, Iterator, List, Optional

from config.settings import get_settings
from config.validators import CatalogConfig
from ..types import FilmFormat, FilmType
from ..utils.exceptions import ConfigurationError, FilmNotFoundError
from ..utils.logger import get_logger
from .models import FilmStock

logger = get_logger(__name__)


class FilmCatalog:
    """
    Read-only mapping of film key to FilmStock

    Iteration follows catalog (YAML) order, which is also the tie-break
    order for equal scores.
    """

    def __init__(self, films: Dict[str, FilmStock]):
        self._films = dict(films)

    @classmethod
    def from_config(cls, config: CatalogConfig) -> 'FilmCatalog':
        films = {key: FilmStock.from_config(key, entry) for key, entry in config.films.items()}
        return cls(films)

    @classmethod
    def from_stocks(cls, stocks: List[FilmStock]) -> 'FilmCatalog':
        return cls({stock.key: stock for stock in stocks})

    def __len__(self) -> int:
        return len(self._films)

    def __contains__(self, key: str) -> bool:
        return key in self._films

    def __iter__(self) -> Iterator[FilmStock]:
        return iter(self._films.values())

    def keys(self) -> List[str]:
        return list(self._films.keys())

    def get(self, key: str) -> FilmStock:
        """
        Look up a stock by key

        Raises:
            FilmNotFoundError: unknown key
        """
        try:
            return self._films[key]
        except KeyError:
            raise FilmNotFoundError(
                f"Unknown film: {key}",
                details={'film_key': key, 'known_keys': len(self._films)}
            ) from None

    def filter(
            self,
            film_type: Optional[FilmType] = None,
            film_format: Optional[FilmFormat] = None
    ) -> List[FilmStock]:
        """Stocks of the given type that support the given format, in catalog order"""
        stocks = []
        for stock in self._films.values():
            if film_type is not None and stock.category is not film_type.category:
                continue
            if film_format is not None and not stock.supports(film_format):
                continue
            stocks.append(stock)
        return stocks

    def search(
            self,
            query: str = "",
            film_type: Optional[FilmType] = None,
            film_format: Optional[FilmFormat] = None
    ) -> List[FilmStock]:
        """
        Picker listing: filter, match name, brand or key, sort by brand then ISO

        Args:
            query: case-insensitive substring of name, brand or key, empty matches all
        """
        needle = query.strip().lower()
        stocks = [
            stock for stock in self.filter(film_type, film_format)
            if not needle or any(
                needle in text for text in (stock.name.lower(), stock.brand.lower(), stock.key)
            )
        ]
        return sorted(stocks, key=lambda s: (s.brand.lower(), s.iso))

    @staticmethod
    def group_by_brand(stocks: List[FilmStock]) -> Dict[str, List[FilmStock]]:
        groups: Dict[str, List[FilmStock]] = {}
        for stock in stocks:
            groups.setdefault(stock.brand, []).append(stock)
        return groups


_catalog_instance: Optional[FilmCatalog] = None


def get_catalog() -> FilmCatalog:
    """Load the catalog once from config/catalog/films.yaml"""
    global _catalog_instance

    if _catalog_instance is None:
        try:
            config = get_settings().get_catalog()
        except ValueError as e:
            raise ConfigurationError("Film catalog failed validation", original_error=e) from e
        _catalog_instance = FilmCatalog.from_config(config)
        logger.debug("film_catalog_loaded", films=len(_catalog_instance))

    return _catalog_instance


def reset_catalog():
    """Reset catalog singleton (useful for testing)"""
    global _catalog_instance
    _catalog_instance = None
