"""Weekly goal statistics for components (habits with a weekly frequency)."""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from analytics.day_series import to_utc_datetime


def get_week_bounds(ref: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """Monday 00:00 to Sunday 23:59:59.999999 of the week containing `ref`."""
    ref = to_utc_datetime(ref) if ref is not None else datetime.now(timezone.utc)
    start = (ref - timedelta(days=ref.weekday())).replace(
        hour=0, minute=0, second=0, microsecond=0
    )
    end = (start + timedelta(days=6)).replace(
        hour=23, minute=59, second=59, microsecond=999999
    )
    return start, end


def calculate_success_rate(current_logs: int, min_weekly_freq: int) -> float:
    """Percent of the weekly goal reached, 1 decimal, capped at 100."""
    if min_weekly_freq <= 0:
        return 0
    rate = current_logs / min_weekly_freq * 100
    return min(math.floor(rate * 10 + 0.5) / 10, 100)


def weekly_goal_progress(
    components: Iterable[Dict[str, Any]],
    records: Iterable[Dict[str, Any]],
    ref: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    start, end = get_week_bounds(ref)

    counts: Dict[str, int] = {}
    for record in records:
        when = to_utc_datetime(record["date"])
        if start <= when <= end:
            cid = str(record["componentId"])
            counts[cid] = counts.get(cid, 0) + 1

    out = []
    for c in components:
        cid = str(c["id"])
        logs = counts.get(cid, 0)
        out.append({
            "id": cid,
            "name": c.get("name"),
            "minWeeklyFreq": c["minWeeklyFreq"],
            "currentWeekLogs": logs,
            "successRate": calculate_success_rate(logs, c["minWeeklyFreq"]),
        })
    return out
