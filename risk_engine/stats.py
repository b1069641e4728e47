from typing import Any, Dict, Sequence

from .models import FloodReport, RiskLevel

PRIORITY_LIST_SIZE = 5


def compute_rescue_stats(reports: Sequence[FloodReport]) -> Dict[str, Any]:
    """Rescue coordination numbers over the currently active reports."""
    total = len(reports)
    high_risk = sum(1 for r in reports if r.risk == RiskLevel.HIGH)
    vulnerable = [r for r in reports if r.needs_priority_rescue]
    sos = sum(1 for r in reports if r.is_sos)

    return {
        "total": total,
        "high_risk": high_risk,
        "vulnerable": len(vulnerable),
        "sos": sos,
        "priority_rescue": [
            {
                "id": r.id,
                "address": r.address,
                "vulnerable_people": list(r.vulnerable_people),
                "depth": r.depth,
                "status": r.status.value if r.status else None,
            }
            for r in vulnerable[:PRIORITY_LIST_SIZE]
        ],
    }
