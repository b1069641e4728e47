from typing import Iterable, Optional, Union

from floodguard_config import SAFE_POINT_RADIUS_KM
from .geo_distance import distance_km
from .models import FloodReport, GeoLocation, NearestMatch, RiskLevel


def nearest_safe_point(
    origin: Union[FloodReport, GeoLocation],
    candidates: Iterable[FloodReport],
    max_radius_km: float = SAFE_POINT_RADIUS_KM,
) -> Optional[NearestMatch]:
    """
    Closest Low-risk report (a verified safe point) strictly inside
    ``max_radius_km`` of ``origin``.

    Returns None when nothing qualifies, or when the origin report is already
    Low risk (no routing from a safe point). Equal distances keep the first
    candidate seen.
    """
    if isinstance(origin, FloodReport):
        if origin.risk == RiskLevel.LOW:
            return None
        origin_id = origin.id
        origin_loc = origin.location
    else:
        origin_id = None
        origin_loc = origin

    closest = None
    for r in candidates:
        if r.risk != RiskLevel.LOW or r.id == origin_id:
            continue
        dist = distance_km(origin_loc, r.location)
        # Must be walkable
        if dist < max_radius_km:
            if closest is None or dist < closest.distance_km:
                closest = NearestMatch(report=r, distance_km=dist)
    return closest
