import logging

from geopy.exc import GeopyError
from geopy.geocoders import Nominatim

_logger = logging.getLogger(__name__)

UNKNOWN_LOCATION = "Unknown location"

STREET_KEYS = ("road", "pedestrian", "street", "neighbourhood")
LOCALITY_KEYS = ("city", "town", "village", "suburb", "municipality")
ADMIN_AREA_KEYS = ("state", "region", "county")


def _first(address, keys):
    for key in keys:
        value = (address.get(key) or "").strip()
        if value:
            return value
    return None


def reverse_geocode(latitude, longitude, geocoder=None, user_agent="face-attendance-web", timeout=10):
    """'street, locality, admin area' for a coordinate pair."""
    geocoder = geocoder or Nominatim(user_agent=user_agent, timeout=timeout)
    try:
        location = geocoder.reverse((latitude, longitude), exactly_one=True)
    except GeopyError as e:
        _logger.warning("Reverse geocoding failed for %s,%s: %s", latitude, longitude, e)
        return UNKNOWN_LOCATION

    if location is None:
        return UNKNOWN_LOCATION

    address = (getattr(location, "raw", None) or {}).get("address") or {}
    parts = [
        part for part in (
            _first(address, STREET_KEYS),
            _first(address, LOCALITY_KEYS),
            _first(address, ADMIN_AREA_KEYS),
        ) if part
    ]
    if parts:
        return ", ".join(parts)
    return UNKNOWN_LOCATION
