"""
Danger scan around the user's position.

Local truth priority: if the newest report within 50m of the user says
Low risk, the user has confirmed they are safe where they stand, and every
warning within 1km is silenced, High risk included. Outside that bubble the
usual rule applies: a High risk or Rising forecast within 2km is a threat.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from floodguard_config import (
    ALERT_RADIUS_KM,
    LOCAL_TRUTH_RADIUS_KM,
    OVERRIDE_SUPPRESSION_RADIUS_KM,
)
from .geo_distance import distance_km
from .models import DangerState, FloodReport, ForecastTrend, GeoLocation, NearestMatch, RiskLevel


@dataclass(frozen=True)
class DangerScan:
    state: DangerState
    # Any Rising report in range while the user is not overridden safe.
    sound_alarm: bool = False


def most_recent_local_report(
    user_location: GeoLocation, reports: Sequence[FloodReport]
) -> Optional[FloodReport]:
    local = [r for r in reports if distance_km(user_location, r.location) < LOCAL_TRUTH_RADIUS_KM]
    if not local:
        return None
    # sorted() is stable, so same-timestamp reports keep store order
    local = sorted(local, key=lambda r: r.timestamp, reverse=True)
    return local[0]


def is_threat(report: FloodReport) -> bool:
    return report.risk == RiskLevel.HIGH or report.trend == ForecastTrend.RISING


def scan_danger(user_location: GeoLocation, reports: Sequence[FloodReport]) -> DangerScan:
    # A. Local truth
    latest_local = most_recent_local_report(user_location, reports)
    user_is_safe = latest_local is not None and latest_local.risk == RiskLevel.LOW

    # B. Threat scan over the full, unfiltered report set
    closest = None
    sound_alarm = False
    for r in reports:
        dist = distance_km(user_location, r.location)

        if user_is_safe and dist < OVERRIDE_SUPPRESSION_RADIUS_KM:
            continue

        if dist < ALERT_RADIUS_KM and is_threat(r):
            if closest is None or dist < closest.distance_km:
                closest = NearestMatch(report=r, distance_km=dist)
            if r.trend == ForecastTrend.RISING and not user_is_safe:
                sound_alarm = True

    return DangerScan(
        state=DangerState(is_user_safe_override=user_is_safe, nearest_threat=closest),
        sound_alarm=sound_alarm,
    )
