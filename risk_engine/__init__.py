"""
FloodGuard Geospatial Risk Alerting Engine.
Distances, time-window feed filtering, safe-point routing and danger scans
over the in-memory report feed.
"""

from .models import (
    AnalysisResult,
    DangerState,
    FloodForecast,
    FloodReport,
    ForecastTrend,
    GeoLocation,
    HistoricalPeak,
    NearestMatch,
    RescueStatus,
    RiskLevel,
)
from .geo_distance import InvalidCoordinates, distance_km, parse_location
from .time_window import ALL_RISKS, TimeMode, get_policy, select_active
from .safe_point import nearest_safe_point
from .danger_scanner import DangerScan, scan_danger
from .report_store import ReportNotFound, ReportStore
from .session import FloodWatchSession

__all__ = [
    "AnalysisResult",
    "DangerState",
    "FloodForecast",
    "FloodReport",
    "ForecastTrend",
    "GeoLocation",
    "HistoricalPeak",
    "NearestMatch",
    "RescueStatus",
    "RiskLevel",
    "InvalidCoordinates",
    "distance_km",
    "parse_location",
    "ALL_RISKS",
    "TimeMode",
    "get_policy",
    "select_active",
    "nearest_safe_point",
    "DangerScan",
    "scan_danger",
    "ReportNotFound",
    "ReportStore",
    "FloodWatchSession",
]
