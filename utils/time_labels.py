from datetime import datetime, timezone
from typing import Optional


def render_time_label(mode: str, window_minutes: int) -> str:
    """Slider caption: 'All History', 'Last 45 mins', 'Last 4h', 'Last 2h 30m'."""
    if mode == "history":
        return "All History"
    if window_minutes < 60:
        return f"Last {window_minutes} mins"
    h, m = divmod(window_minutes, 60)
    return f"Last {h}h {m}m" if m > 0 else f"Last {h}h"


def format_time_ago(timestamp: datetime, now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    diff = (now - timestamp).total_seconds()
    if diff < 60:
        return "Just now"
    if diff < 3600:
        return f"{int(diff // 60)}m ago"
    return f"{int(diff // 3600)}h ago"
