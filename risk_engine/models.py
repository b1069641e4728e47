"""
Flood report domain objects.

Everything here is a plain value: reports are frozen once created and the
only field that ever changes (``status``) is swapped by building a new
report, so snapshots handed out by the store never move under a reader.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class RiskLevel(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    # Low also marks a verified safe point (evacuation target).
    LOW = "Low"


class ForecastTrend(str, Enum):
    RISING = "Rising"
    RECEDING = "Receding"
    STABLE = "Stable"


class RescueStatus(str, Enum):
    PENDING = "Pending"
    ACKNOWLEDGED = "Acknowledged"
    RESCUED = "Rescued"


@dataclass(frozen=True)
class GeoLocation:
    lat: float
    lng: float

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class FloodForecast:
    trend: ForecastTrend
    predicted_change: str
    estimated_clearance_time: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "trend": self.trend.value,
            "predictedChange": self.predicted_change,
            "estimatedClearanceTime": self.estimated_clearance_time,
        }


@dataclass(frozen=True)
class HistoricalPeak:
    year: int
    level: str
    date: str

    def to_dict(self) -> Dict[str, Any]:
        return {"year": self.year, "level": self.level, "date": self.date}


@dataclass(frozen=True)
class AnalysisResult:
    """What the image classifier hands back for one photo."""
    depth: str
    risk: RiskLevel
    objects_detected: List[str] = field(default_factory=list)
    vulnerable_people: List[str] = field(default_factory=list)
    advice: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisResult":
        return cls(
            depth=str(data["depth"]),
            risk=RiskLevel(data["risk"]),
            objects_detected=[str(o) for o in data.get("objectsDetected") or []],
            vulnerable_people=[str(v) for v in data.get("vulnerablePeople") or []],
            advice=str(data.get("advice") or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "depth": self.depth,
            "risk": self.risk.value,
            "objectsDetected": list(self.objects_detected),
            "vulnerablePeople": list(self.vulnerable_people),
            "advice": self.advice,
        }


@dataclass(frozen=True)
class FloodReport:
    id: str
    location: GeoLocation
    risk: RiskLevel
    depth: str
    timestamp: datetime
    forecast: Optional[FloodForecast] = None
    vulnerable_people: Tuple[str, ...] = ()
    objects_detected: Tuple[str, ...] = ()
    advice: str = ""
    image_url: str = ""
    address: Optional[str] = None
    is_sos: bool = False
    status: Optional[RescueStatus] = None
    historical_peaks: Tuple[HistoricalPeak, ...] = ()

    @property
    def trend(self) -> Optional[ForecastTrend]:
        return self.forecast.trend if self.forecast else None

    @property
    def needs_priority_rescue(self) -> bool:
        return bool(self.vulnerable_people)

    def with_status(self, status: RescueStatus) -> "FloodReport":
        return replace(self, status=status)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "location": self.location.to_dict(),
            "imageUrl": self.image_url,
            "depth": self.depth,
            "risk": self.risk.value,
            "objectsDetected": list(self.objects_detected),
            "vulnerablePeople": list(self.vulnerable_people),
            "advice": self.advice,
            "timestamp": self.timestamp.isoformat(),
            "address": self.address,
            "isSOS": self.is_sos,
            "status": self.status.value if self.status else None,
            "forecast": self.forecast.to_dict() if self.forecast else None,
            "historicalPeaks": [p.to_dict() for p in self.historical_peaks],
        }


@dataclass(frozen=True)
class NearestMatch:
    report: FloodReport
    distance_km: float

    def to_dict(self) -> Dict[str, Any]:
        return {"report": self.report.to_dict(), "distance_km": round(self.distance_km, 3)}


@dataclass(frozen=True)
class DangerState:
    is_user_safe_override: bool = False
    nearest_threat: Optional[NearestMatch] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_user_safe_override": self.is_user_safe_override,
            "nearest_threat": self.nearest_threat.to_dict() if self.nearest_threat else None,
        }
