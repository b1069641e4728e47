#!/usr/bin/env python3
"""
Test the coordinating session: report creation, rescans and the siren
"""

import os
import sys
import threading
from datetime import datetime, timezone

import pytest

sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from floodguard_config import MAP_CENTER
from risk_engine.models import AnalysisResult, DangerState, ForecastTrend, GeoLocation, RescueStatus, RiskLevel
from risk_engine.report_store import ReportNotFound, ReportStore
from risk_engine.session import FloodWatchSession

NOW = datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc)
CENTER = GeoLocation(*MAP_CENTER)


class FakeClassifier:
    available = True

    def __init__(self, result):
        self.result = result
        self.calls = []

    def classify(self, image_bytes, mime_type="image/jpeg"):
        self.calls.append((image_bytes, mime_type))
        return self.result


class FakeSiren:
    def __init__(self):
        self.reasons = []

    def play(self, reason=""):
        self.reasons.append(reason)
        return True


def make_session(result=None, seed_demo=True):
    result = result or AnalysisResult(depth="0.1m", risk=RiskLevel.LOW, advice="Khô ráo")
    return FloodWatchSession(classifier=FakeClassifier(result), siren=FakeSiren(),
                             seed_demo=seed_demo, clock=lambda: NOW)


def test_no_location_means_no_scan():
    session = make_session()
    assert session.user_location is None
    assert session.danger_state == DangerState()
    session.raise_sos()
    assert session.danger_state == DangerState()
    assert session.siren.reasons == []


def test_location_update_finds_threat_and_sounds_siren():
    session = make_session()
    state = session.update_location(CENTER)
    assert state.nearest_threat.report.id == "rep-0"
    assert state.nearest_threat.distance_km == pytest.approx(0.0, abs=1e-9)
    assert session.wait_for_alarm(timeout=2)
    assert len(session.siren.reasons) == 1


def test_safe_photo_at_user_position_overrides_warnings():
    session = make_session()
    session.update_location(CENTER)

    report = session.submit_photo(b"jpeg-bytes", "image/jpeg", image_url="data:image/jpeg;base64,AA==")
    assert session.classifier.calls == [(b"jpeg-bytes", "image/jpeg")]
    assert report.location == CENTER
    assert report.address == "My Current Location"
    assert report.forecast.trend == ForecastTrend.RISING
    assert session.reports()[0].id == report.id

    state = session.danger_state
    assert state.is_user_safe_override is True
    # rep-0 and rep-2 sit inside 1km and are silenced; rep-4 (~1.04km) still counts
    assert state.nearest_threat.report.id == "rep-4"
    # Override is on, so only the earlier location update sounded
    assert session.wait_for_alarm(timeout=2)
    assert len(session.siren.reasons) == 1


def test_report_without_gps_pins_to_map_center():
    session = make_session(seed_demo=False)
    report = session.create_report(AnalysisResult(depth="1.1m", risk=RiskLevel.HIGH))
    assert report.location == CENTER
    assert report.address == "Map Center (No GPS)"
    assert report.id == str(int(NOW.timestamp() * 1000))
    # Same instant, still a fresh id
    second = session.create_report(AnalysisResult(depth="1.1m", risk=RiskLevel.HIGH))
    assert second.id != report.id


def test_lost_fix_freezes_danger_state():
    session = make_session()
    before = session.update_location(CENTER)
    frozen = session.clear_location()
    assert frozen == before

    session.create_report(AnalysisResult(depth="0m", risk=RiskLevel.LOW))
    assert session.danger_state == before
    assert session.user_location is None


def test_siren_failure_is_ignored():
    class BrokenSiren:
        def play(self, reason=""):
            raise RuntimeError("audio blocked until interaction")

    session = FloodWatchSession(siren=BrokenSiren(), seed_demo=True, clock=lambda: NOW)
    state = session.update_location(CENTER)
    assert state.nearest_threat is not None
    assert session.wait_for_alarm(timeout=2)


def test_slow_siren_does_not_hold_up_location_updates():
    release = threading.Event()

    class StuckSpeaker:
        def __init__(self):
            self.started = threading.Event()

        def play(self, reason=""):
            self.started.set()
            release.wait(5)
            return True

    siren = StuckSpeaker()
    session = FloodWatchSession(siren=siren, seed_demo=True, clock=lambda: NOW)
    try:
        state = session.update_location(CENTER)
        # Returned while the speaker is still blocked
        assert state.nearest_threat.report.id == "rep-0"
        assert siren.started.wait(2)
        assert session.wait_for_alarm(timeout=0) is False
    finally:
        release.set()
    assert session.wait_for_alarm(timeout=2)


def test_session_writes_into_the_given_empty_store():
    store = ReportStore()
    session = FloodWatchSession(store=store, clock=lambda: NOW)
    report = session.create_report(AnalysisResult(depth="0.5m", risk=RiskLevel.MEDIUM))

    assert session.store is store
    assert len(store) == 1
    assert store.get(report.id) == report


def test_report_location_and_address_come_from_the_same_fix():
    session = make_session(seed_demo=False)
    here = GeoLocation(10.9, 106.8)
    session.update_location(here)
    pinned = session.raise_sos()
    assert (pinned.location, pinned.address) == (here, "My Current Location")

    session.clear_location()
    fallback = session.create_report(AnalysisResult(depth="0m", risk=RiskLevel.LOW))
    assert (fallback.location, fallback.address) == (CENTER, "Map Center (No GPS)")


def test_status_counts():
    session = make_session()
    sos = session.raise_sos()
    session.raise_sos()
    session.set_status(sos.id, RescueStatus.RESCUED)
    assert session.status_counts() == {"Rescued": 1, "Pending": 1}


def test_active_view_and_stats():
    session = make_session()
    assert [r.id for r in session.active_reports("urgent", 240)] == ["rep-0", "rep-1", "rep-2"]
    assert len(session.active_reports("history", 0)) == 6
    stats = session.rescue_stats("day", 720)
    assert stats["total"] == 4
    assert stats["vulnerable"] == 2


def test_safe_point_and_status():
    session = make_session()
    match = session.safe_point_for("rep-0")
    assert match.report.id == "rep-5"
    assert session.safe_point_for("rep-3") is None
    with pytest.raises(ReportNotFound):
        session.safe_point_for("nope")

    sos = session.raise_sos("Kẹt trên mái nhà")
    assert sos.is_sos and sos.status == RescueStatus.PENDING
    updated = session.set_status(sos.id, "Acknowledged")
    assert updated.status == RescueStatus.ACKNOWLEDGED
    with pytest.raises(ValueError):
        session.set_status(sos.id, "Lost")


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
