import math
from typing import Any, Dict, Optional

from .models import GeoLocation

EARTH_RADIUS_KM = 6371.0


class InvalidCoordinates(ValueError):
    pass


def distance_km(a: GeoLocation, b: GeoLocation) -> float:
    """
    Straight-line (great circle) distance between two points on Earth
    using the Haversine formula. Result is in kilometers.

    Inputs are not range-checked; NaN coordinates give a NaN distance.
    """
    d_lat = math.radians(b.lat - a.lat)
    d_lng = math.radians(b.lng - a.lng)

    r_lat1 = math.radians(a.lat)
    r_lat2 = math.radians(b.lat)

    h = math.sin(d_lat / 2) ** 2 + \
        math.cos(r_lat1) * math.cos(r_lat2) * \
        math.sin(d_lng / 2) ** 2

    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))

    return EARTH_RADIUS_KM * c


def parse_location(payload: Optional[Dict[str, Any]]) -> GeoLocation:
    """
    Build a GeoLocation from request JSON (``lat``/``lng``, with ``latitude``/
    ``longitude`` accepted as aliases). Raises InvalidCoordinates for missing,
    non-numeric, NaN or out-of-range values.
    """
    payload = payload or {}
    raw_lat = payload.get("lat", payload.get("latitude"))
    raw_lng = payload.get("lng", payload.get("longitude"))
    if raw_lat is None or raw_lng is None:
        raise InvalidCoordinates("lat and lng are required")

    try:
        lat = float(raw_lat)
        lng = float(raw_lng)
    except (TypeError, ValueError):
        raise InvalidCoordinates(f"Coordinates must be numeric, got {raw_lat!r}, {raw_lng!r}")

    if math.isnan(lat) or math.isnan(lng):
        raise InvalidCoordinates("Coordinates must not be NaN")
    if not -90.0 <= lat <= 90.0:
        raise InvalidCoordinates(f"Latitude {lat} outside [-90, 90]")
    if not -180.0 <= lng <= 180.0:
        raise InvalidCoordinates(f"Longitude {lng} outside [-180, 180]")

    return GeoLocation(lat=lat, lng=lng)
