"""Loads the trailing-window inputs for the insight engine from PostgreSQL."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

from analytics.day_series import to_utc_datetime
from constants import DEFAULT_EFFORT
from routes.helpers import _fetch_all, _int, _text

log = logging.getLogger("pipeline.loader")

DEFAULT_WINDOW_DAYS = 30


def window_start(now: Optional[datetime] = None, days: int = DEFAULT_WINDOW_DAYS) -> datetime:
    """UTC midnight of the day `days` days before `now`."""
    now = to_utc_datetime(now) if now is not None else datetime.now(timezone.utc)
    start = now - timedelta(days=days)
    return start.replace(hour=0, minute=0, second=0, microsecond=0)


def load_insight_inputs(
    days: int = DEFAULT_WINDOW_DAYS,
    now: Optional[datetime] = None,
) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]], List[Dict[str, Any]]]:
    """Return (pulse_checks, activity_records, components) for the window.

    Rows come back in the engine's input shape; component ids are flat
    strings.
    """
    start = window_start(now, days).date()

    pulse_rows = _fetch_all(
        """
        SELECT date, energy_level, mood_level
        FROM pulse_checks
        WHERE date >= %s
        ORDER BY date ASC
        """,
        (start,),
    )
    record_rows = _fetch_all(
        """
        SELECT component_id, date, effort_level
        FROM records
        WHERE date >= %s
        """,
        (start,),
    )
    component_rows = _fetch_all("SELECT id, name FROM components")

    pulse_checks = [
        {
            "date": row["date"],
            "energyLevel": _int(row.get("energy_level")),
            "moodLevel": _int(row.get("mood_level")),
        }
        for row in pulse_rows
        if row.get("date")
    ]
    records = [
        {
            "componentId": _text(row.get("component_id")),
            "date": row["date"],
            "effortLevel": row.get("effort_level") or DEFAULT_EFFORT,
        }
        for row in record_rows
        if row.get("date")
    ]
    components = [
        {"id": _text(row.get("id")), "name": _text(row.get("name"))}
        for row in component_rows
    ]

    log.info(
        "   Loaded %d pulse checks, %d records, %d components since %s",
        len(pulse_checks), len(records), len(components), start,
    )
    return pulse_checks, records, components


def load_components_with_goals() -> List[Dict[str, Any]]:
    rows = _fetch_all(
        """
        SELECT id, name, min_weekly_freq
        FROM components
        ORDER BY created_at DESC
        """
    )
    return [
        {
            "id": _text(row.get("id")),
            "name": _text(row.get("name")),
            "minWeeklyFreq": _int(row.get("min_weekly_freq")),
        }
        for row in rows
    ]


def load_week_records(start: datetime, end: datetime) -> List[Dict[str, Any]]:
    rows = _fetch_all(
        """
        SELECT component_id, date
        FROM records
        WHERE date >= %s AND date <= %s
        """,
        (start.date(), end.date()),
    )
    return [
        {"componentId": _text(row.get("component_id")), "date": row["date"]}
        for row in rows
        if row.get("date")
    ]
