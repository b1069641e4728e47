"""
Time-window filtering for the live report feed.

``urgent`` and ``day`` share one rule (age <= window, inclusive); they only
differ in the slider default and bounds. ``history`` has no time bound.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, List, Optional, Union

from floodguard_config import TIME_MODES
from .models import FloodReport, RiskLevel

ALL_RISKS = "All"


class TimeMode(str, Enum):
    URGENT = "urgent"
    DAY = "day"
    HISTORY = "history"


@dataclass(frozen=True)
class TimeWindowPolicy:
    mode: TimeMode
    default_minutes: int
    min_minutes: int
    max_minutes: int
    step_minutes: int

    def check(self, minutes: int) -> int:
        """
        Window in minutes if it lies inside the mode's slider range.

        The step only drives the slider; any whole minute inside the range
        is filtered as given (the day default of 720 is itself off its grid).
        """
        minutes = int(minutes)
        if not self.min_minutes <= minutes <= self.max_minutes:
            raise ValueError(
                f"window for {self.mode.value} must be between {self.min_minutes} and {self.max_minutes} minutes"
            )
        return minutes

    def to_dict(self):
        return {
            "mode": self.mode.value,
            "default": self.default_minutes,
            "min": self.min_minutes,
            "max": self.max_minutes,
            "step": self.step_minutes,
        }


def get_policy(mode: Union[TimeMode, str]) -> Optional[TimeWindowPolicy]:
    """Slider policy for a mode; None for history (no slider)."""
    mode = TimeMode(mode)
    cfg = TIME_MODES.get(mode.value)
    if not cfg:
        return None
    return TimeWindowPolicy(
        mode=mode,
        default_minutes=cfg["default"],
        min_minutes=cfg["min"],
        max_minutes=cfg["max"],
        step_minutes=cfg["step"],
    )


def parse_risk_filter(value: Optional[str]) -> Union[RiskLevel, str]:
    if value is None or value == "" or value == ALL_RISKS:
        return ALL_RISKS
    return RiskLevel(value)


def age_minutes(report: FloodReport, now: datetime) -> float:
    return (now - report.timestamp).total_seconds() / 60.0


def select_active(
    reports: Iterable[FloodReport],
    mode: Union[TimeMode, str],
    window_minutes: int,
    risk_filter: Union[RiskLevel, str] = ALL_RISKS,
    now: Optional[datetime] = None,
) -> List[FloodReport]:
    """
    Reports active under the given risk filter and time window, in the
    order they were given (the store keeps them newest first).
    """
    mode = TimeMode(mode)
    if risk_filter != ALL_RISKS:
        risk_filter = RiskLevel(risk_filter)
    now = now or datetime.now(timezone.utc)

    active = []
    for r in reports:
        if risk_filter != ALL_RISKS and r.risk != risk_filter:
            continue
        if mode is TimeMode.HISTORY:
            active.append(r)
            continue
        if age_minutes(r, now) <= window_minutes:
            active.append(r)
    return active
