"""Day-series builder: merges pulse checks and activity records per UTC day."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from typing import Any, Dict, Iterable, List

from constants import HIGH_EFFORT

log = logging.getLogger("insight_engine.day_series")


@dataclass
class ComponentActivity:
    count: int = 0
    high_effort_count: int = 0

    def add(self, effort_level: Any) -> None:
        self.count += 1
        if effort_level == HIGH_EFFORT:
            self.high_effort_count += 1


@dataclass
class DaySeriesEntry:
    """Aggregated view of one calendar day that has a pulse check.

    `date` is UTC midnight of that day.
    """

    date: datetime
    energy_level: int
    mood_level: int
    activity_count: int = 0
    high_effort_count: int = 0
    component_activity: Dict[str, ComponentActivity] = field(default_factory=dict)

    @property
    def day_key(self) -> str:
        return day_key(self.date)

    @property
    def weekday(self) -> int:
        """UTC weekday with Sunday = 0 .. Saturday = 6."""
        return (self.date.weekday() + 1) % 7

    def add_record(self, component_id: str, effort_level: Any) -> None:
        self.activity_count += 1
        if effort_level == HIGH_EFFORT:
            self.high_effort_count += 1
        self.component_activity.setdefault(component_id, ComponentActivity()).add(effort_level)

    def component_count(self, component_id: str) -> int:
        activity = self.component_activity.get(component_id)
        return activity.count if activity else 0


def to_utc_datetime(value: Any) -> datetime:
    """Coerce a date, datetime or ISO string to an aware UTC datetime.

    Naive datetimes are taken to already be in UTC.
    """
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        value = datetime.fromisoformat(text)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    raise TypeError(f"Unsupported date value: {value!r}")


def start_of_day(value: Any) -> datetime:
    """UTC midnight of the calendar day containing `value`."""
    return datetime.combine(to_utc_datetime(value).date(), time.min, tzinfo=timezone.utc)


def day_key(value: Any) -> str:
    """YYYY-MM-DD of the UTC calendar day."""
    return to_utc_datetime(value).date().isoformat()


def build_day_series(
    pulse_checks: Iterable[Dict[str, Any]],
    activity_records: Iterable[Dict[str, Any]],
) -> List[DaySeriesEntry]:
    """Build the ordered day-series from window-filtered inputs.

    Only days with a pulse check get an entry.  Records on any other day
    have nothing to attach to and are dropped.
    """
    by_day: Dict[str, DaySeriesEntry] = {}

    for pc in pulse_checks:
        when = start_of_day(pc["date"])
        by_day[day_key(when)] = DaySeriesEntry(
            date=when,
            energy_level=pc["energyLevel"],
            mood_level=pc["moodLevel"],
        )

    dropped = 0
    for record in activity_records:
        entry = by_day.get(day_key(record["date"]))
        if entry is None:
            dropped += 1
            continue
        entry.add_record(str(record["componentId"]), record.get("effortLevel"))

    if dropped:
        log.debug("   Dropped %d records on days without a pulse check", dropped)

    return sorted(by_day.values(), key=lambda e: e.date)
