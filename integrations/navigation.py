from typing import Any, Dict, Optional
from urllib.parse import urlencode

from floodguard_config import DIRECTIONS_URL, MAX_NAVIGATION_RADIUS_KM
from risk_engine.geo_distance import distance_km
from risk_engine.models import GeoLocation


def build_directions_url(target: GeoLocation) -> str:
    query = urlencode({"api": 1, "destination": f"{target.lat},{target.lng}"}, safe=",")
    return f"{DIRECTIONS_URL}?{query}"


def plan_navigation(target: GeoLocation, user_location: Optional[GeoLocation]) -> Dict[str, Any]:
    """
    Directions link to ``target`` plus the user's distance to it.
    Beyond MAX_NAVIGATION_RADIUS_KM navigation is flagged too far.
    """
    dist = distance_km(user_location, target) if user_location else None
    return {
        "url": build_directions_url(target),
        "destination": target.to_dict(),
        "distance_km": round(dist, 2) if dist is not None else None,
        "too_far": dist is not None and dist > MAX_NAVIGATION_RADIUS_KM,
    }
