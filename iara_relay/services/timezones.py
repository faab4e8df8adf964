from functools import lru_cache

from timezonefinder import TimezoneFinder

_tf = None


def _finder() -> TimezoneFinder:
    global _tf
    if _tf is None:
        _tf = TimezoneFinder()
    return _tf


@lru_cache(maxsize=4096)
def _lookup(lat: float, lng: float) -> str | None:
    try:
        return _finder().timezone_at(lat=lat, lng=lng)
    except ValueError:
        # coordinates out of range
        return None


def get_timezone_name(lat: float | None, lng: float | None, default: str) -> str:
    """Return the timezone name for given coordinates, or `default` when unknown."""
    if lat is None or lng is None:
        return default
    # round to reduce duplicates in the cache
    return _lookup(round(lat, 4), round(lng, 4)) or default
