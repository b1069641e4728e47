"""
FloodWatchSession: the one owner of the report feed, the user's position and
the last danger state.

Every mutation goes through here and is followed by an explicit rescan; the
store and the scanner never call each other. One lock serialises inserts and
rescans so the newest-first order and the danger state stay consistent when
Flask serves requests on several threads.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, List, Optional, Union

from floodguard_config import MAP_CENTER, SAFE_POINT_RADIUS_KM
from .danger_scanner import scan_danger
from .demo_data import build_demo_reports
from .models import (
    AnalysisResult,
    DangerState,
    FloodForecast,
    FloodReport,
    ForecastTrend,
    GeoLocation,
    NearestMatch,
    RescueStatus,
    RiskLevel,
)
from .report_store import ReportNotFound, ReportStore
from .safe_point import nearest_safe_point
from .stats import compute_rescue_stats
from .time_window import ALL_RISKS, TimeMode, select_active

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FloodWatchSession:
    def __init__(self, classifier=None, siren=None, store: Optional[ReportStore] = None,
                 seed_demo: bool = False, clock: Callable[[], datetime] = _utcnow):
        self.classifier = classifier
        self.siren = siren
        self.clock = clock
        self.store = store if store is not None else ReportStore()
        if seed_demo:
            for r in build_demo_reports(now=self.clock()):
                self.store.insert(r)

        self._lock = threading.Lock()
        self._user_location: Optional[GeoLocation] = None
        self._danger = DangerState()
        self._alarm_thread: Optional[threading.Thread] = None

    # --- Read side (snapshots) ---

    @property
    def user_location(self) -> Optional[GeoLocation]:
        return self._user_location

    @property
    def danger_state(self) -> DangerState:
        return self._danger

    def reports(self):
        return self.store.all()

    def get_report(self, report_id: str) -> FloodReport:
        report = self.store.get(report_id)
        if report is None:
            raise ReportNotFound(report_id)
        return report

    def active_reports(self, mode: Union[TimeMode, str] = TimeMode.URGENT, window_minutes: int = 240,
                       risk_filter=ALL_RISKS) -> List[FloodReport]:
        return select_active(self.store.all(), mode, window_minutes, risk_filter, now=self.clock())

    def rescue_stats(self, mode=TimeMode.URGENT, window_minutes: int = 240, risk_filter=ALL_RISKS):
        return compute_rescue_stats(self.active_reports(mode, window_minutes, risk_filter))

    def safe_point_for(self, report_id: str, max_radius_km: float = SAFE_POINT_RADIUS_KM) -> Optional[NearestMatch]:
        report = self.get_report(report_id)
        return nearest_safe_point(report, self.store.all(), max_radius_km)

    # --- Write side ---

    def update_location(self, location: GeoLocation) -> DangerState:
        with self._lock:
            self._user_location = location
            state, sound_alarm = self._rescan_locked()
        self._maybe_sound(sound_alarm, state)
        return state

    def clear_location(self) -> DangerState:
        """GPS fix lost. The last danger state stays on screen until a new fix arrives."""
        with self._lock:
            self._user_location = None
            return self._danger

    def add_report(self, report: FloodReport) -> FloodReport:
        with self._lock:
            self.store.insert(report)
            state, sound_alarm = self._rescan_locked()
        self._maybe_sound(sound_alarm, state)
        return report

    def create_report(self, result: AnalysisResult, image_url: str = "") -> FloodReport:
        """Turn a finished photo analysis into a report pinned at the user (or map center)."""
        now = self.clock()
        with self._lock:
            report_id = self.store.next_id(now)
            location, address = self._pin_locked()
        report = FloodReport(
            id=report_id,
            location=location,
            image_url=image_url,
            depth=result.depth,
            risk=result.risk,
            objects_detected=tuple(result.objects_detected),
            vulnerable_people=tuple(result.vulnerable_people),
            advice=result.advice,
            timestamp=now,
            address=address,
            forecast=FloodForecast(trend=ForecastTrend.RISING, predicted_change="+?",
                                   estimated_clearance_time="Unknown"),
        )
        return self.add_report(report)

    def submit_photo(self, image_bytes: bytes, mime_type: str = "image/jpeg", image_url: str = "") -> FloodReport:
        # Classifier runs outside the lock; it may take seconds.
        result = self.classifier.classify(image_bytes, mime_type)
        return self.create_report(result, image_url=image_url)

    def raise_sos(self, note: str = "") -> FloodReport:
        now = self.clock()
        with self._lock:
            report_id = self.store.next_id(now)
            location, address = self._pin_locked()
        report = FloodReport(
            id=f"sos-{report_id}",
            location=location,
            risk=RiskLevel.HIGH,
            depth="Unknown",
            timestamp=now,
            advice=note or "URGENT: RESCUE REQUESTED",
            address=address,
            is_sos=True,
            status=RescueStatus.PENDING,
        )
        logger.warning(f"SOS beacon {report.id} at {location.lat:.4f},{location.lng:.4f}")
        return self.add_report(report)

    def set_status(self, report_id: str, status: Union[RescueStatus, str]) -> FloodReport:
        with self._lock:
            return self.store.set_status(report_id, RescueStatus(status))

    def status_counts(self):
        with self._lock:
            return self.store.counts_by_status()

    def wait_for_alarm(self, timeout: Optional[float] = None) -> bool:
        """Block until the last siren dispatch finishes; True if nothing is still playing."""
        thread = self._alarm_thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    # --- Internals ---

    def _pin_locked(self):
        if self._user_location is None:
            return GeoLocation(lat=MAP_CENTER[0], lng=MAP_CENTER[1]), "Map Center (No GPS)"
        return self._user_location, "My Current Location"

    def _rescan_locked(self):
        if self._user_location is None:
            # No fix yet: keep whatever was shown before.
            return self._danger, False

        previous = self._danger
        scan = scan_danger(self._user_location, self.store.all())
        self._danger = scan.state
        self._log_transition(previous, scan.state)
        return scan.state, scan.sound_alarm

    def _maybe_sound(self, sound_alarm: bool, state: DangerState):
        if not sound_alarm or self.siren is None:
            return
        threat = state.nearest_threat
        reason = f"Rising flood {threat.distance_km:.1f} km away" if threat else "Rising flood nearby"
        # The request thread never waits on the speaker.
        thread = threading.Thread(target=self._play_siren, args=(reason,), name="siren", daemon=True)
        self._alarm_thread = thread
        thread.start()

    def _play_siren(self, reason: str):
        try:
            self.siren.play(reason)
        except Exception as e:
            logger.debug(f"Siren play blocked: {e}")

    @staticmethod
    def _log_transition(previous: DangerState, current: DangerState):
        if current.is_user_safe_override and not previous.is_user_safe_override:
            logger.info("Safety confirmed by local report; nearby warnings silenced")
        prev_id = previous.nearest_threat.report.id if previous.nearest_threat else None
        cur_id = current.nearest_threat.report.id if current.nearest_threat else None
        if cur_id != prev_id:
            if current.nearest_threat:
                logger.info(f"Danger zone: report {cur_id} at {current.nearest_threat.distance_km:.2f} km")
            else:
                logger.info("No active threat near user")
