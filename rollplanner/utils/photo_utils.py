import math
from typing import List, Optional, Sequence

from config.settings import get_settings


def _shared_photography():
    return get_settings().shared.photography


def get_standard_shutters() -> List[int]:
    """Shutter denominators (1/N s) offered by most film cameras"""
    return list(_shared_photography().standard_shutters)


def get_standard_apertures() -> List[float]:
    """Full-stop f-numbers"""
    return list(_shared_photography().standard_apertures)


def get_default_shutter() -> str:
    return _shared_photography().default_shutter


def format_shutter(denominator: int) -> str:
    """30 -> '1/30'"""
    return f"1/{denominator}"


def format_aperture(f_number: float) -> str:
    """16.0 -> 'f/16', 5.6 -> 'f/5.6'"""
    return f"f/{f_number:g}"


def nearest_shutter(
        target: float,
        shutters: Optional[Sequence[int]] = None,
        default: Optional[str] = None
) -> str:
    """
    Snap a 1/N shutter target to the nearest standard speed

    Ties go to the earlier (slower) entry. Non-positive targets return the
    default shutter, and positive targets below 1 snap to 1/1.

    Args:
        target: desired shutter denominator
        shutters: ascending denominators, defaults to the shared list
        default: speed returned for target <= 0

    Returns:
        Shutter string such as '1/125'
    """
    if shutters is None:
        shutters = get_standard_shutters()
    if default is None:
        default = get_default_shutter()

    if target <= 0 or not shutters:
        return default

    nearest = shutters[0]
    for candidate in shutters[1:]:
        if abs(candidate - target) < abs(nearest - target):
            nearest = candidate

    return format_shutter(nearest)


def stops_between(from_value: float, to_value: float) -> float:
    """log2(to/from); 0 when either side is non-positive"""
    if from_value <= 0 or to_value <= 0:
        return 0.0
    return math.log2(to_value / from_value)


def whole_stops_needed(from_value: float, to_value: float) -> int:
    """
    Whole stops needed to get from one sensitivity to another

    ceil(log2(to/from)) clamped at 0. A tiny epsilon keeps exact powers of
    two from rounding up on float noise.
    """
    stops = stops_between(from_value, to_value)
    if stops <= 0:
        return 0
    return math.ceil(stops - 1e-9)


def aperture_stop_difference(from_f: float, to_f: float) -> int:
    """
    Whole stops between two f-numbers (positive when opening up)

    f/16 -> f/4 is 4 stops. Marked f-numbers are rounded (f/11 is really
    f/11.3), so the result is rounded to the nearest stop.
    """
    if from_f <= 0 or to_f <= 0:
        return 0
    return round(2 * math.log2(from_f / to_f))
