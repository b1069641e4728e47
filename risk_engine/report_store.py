import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Set, Tuple

from .models import FloodReport, RescueStatus

logger = logging.getLogger(__name__)


class ReportNotFound(KeyError):
    pass


class ReportStore:
    """
    In-memory flood reports, always ordered newest first.

    Not thread-safe on its own; FloodWatchSession holds the lock around
    every mutation. Mutations never trigger a danger scan here.
    """

    def __init__(self, reports=None):
        self._reports: List[FloodReport] = []
        self._issued_ids: Set[str] = set()
        for r in reports or []:
            self.insert(r)

    def insert(self, report: FloodReport) -> None:
        if self.get(report.id) is not None:
            raise ValueError(f"Duplicate report id {report.id}")
        self._issued_ids.add(report.id)
        self._reports.append(report)
        self._reports.sort(key=lambda r: r.timestamp, reverse=True)
        logger.info(f"Report {report.id} stored ({report.risk.value}), {len(self._reports)} total")

    def all(self) -> Tuple[FloodReport, ...]:
        return tuple(self._reports)

    def get(self, report_id: str) -> Optional[FloodReport]:
        for r in self._reports:
            if r.id == report_id:
                return r
        return None

    def next_id(self, now: Optional[datetime] = None) -> str:
        """Creation-time id (epoch ms); bumped until unused within this session."""
        now = now or datetime.now(timezone.utc)
        candidate = int(now.timestamp() * 1000)
        while str(candidate) in self._issued_ids:
            candidate += 1
        report_id = str(candidate)
        self._issued_ids.add(report_id)
        return report_id

    def set_status(self, report_id: str, status: RescueStatus) -> FloodReport:
        """Responder workflow hook: the only field that changes after creation."""
        for idx, r in enumerate(self._reports):
            if r.id == report_id:
                updated = r.with_status(status)
                self._reports[idx] = updated
                return updated
        raise ReportNotFound(report_id)

    def counts_by_status(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for r in self._reports:
            if r.status:
                counts[r.status.value] = counts.get(r.status.value, 0) + 1
        return counts

    def __len__(self):
        return len(self._reports)
