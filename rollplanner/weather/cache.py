import time
from typing import Any, Callable, Dict, Optional, Tuple

from ..utils.logger import get_logger

logger = get_logger(__name__)

KINDS = ("locations", "reverse_geocode", "sun_times", "forecast")


class WeatherCache:
    """
    In-memory TTL cache with one key-space per lookup kind

    Each kind has its own time-to-live. The clock is injectable so tests can
    move time forward without sleeping.
    """

    def __init__(self, ttls: Dict[str, float], clock: Callable[[], float] = time.monotonic):
        missing = [kind for kind in KINDS if kind not in ttls]
        if missing:
            raise ValueError(f"Missing cache TTL for: {missing}")

        self._ttls = dict(ttls)
        self._clock = clock
        self._entries: Dict[str, Dict[str, Tuple[float, Any]]] = {kind: {} for kind in ttls}
        self.hits = 0
        self.misses = 0

    def _space(self, kind: str) -> Dict[str, Tuple[float, Any]]:
        try:
            return self._entries[kind]
        except KeyError:
            raise KeyError(f"Unknown cache kind: {kind}") from None

    def get(self, kind: str, key: str) -> Optional[Any]:
        """Cached value, or None when absent or older than the kind's TTL"""
        space = self._space(kind)
        entry = space.get(key)

        if entry is not None:
            stored_at, value = entry
            if self._clock() - stored_at < self._ttls[kind]:
                self.hits += 1
                return value
            del space[key]
            logger.debug("cache_entry_expired", kind=kind, key=key)

        self.misses += 1
        return None

    def set(self, kind: str, key: str, value: Any) -> None:
        self._space(kind)[key] = (self._clock(), value)

    def clear(self, kind: Optional[str] = None) -> None:
        if kind is None:
            for space in self._entries.values():
                space.clear()
        else:
            self._space(kind).clear()

    def size(self, kind: str) -> int:
        return len(self._space(kind))

    def get_stats(self) -> Dict[str, Any]:
        return {
            'hits': self.hits,
            'misses': self.misses,
            'entries': {kind: len(space) for kind, space in self._entries.items()},
        }


def coordinate_key(lat: float, lon: float, precision: int) -> str:
    """Round coordinates so nearby lookups share an entry"""
    return f"{lat:.{precision}f},{lon:.{precision}f}"
