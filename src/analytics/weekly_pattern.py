"""Weekday rhythm layer: mean energy/mood per UTC weekday."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from analytics.correlation_math import round2
from analytics.day_series import DaySeriesEntry


@dataclass
class WeeklyPatternEntry:
    weekday: int
    average_energy: float
    average_mood: float
    sample_size: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dayOfWeek": self.weekday,
            "avgEnergy": round2(self.average_energy),
            "avgMood": round2(self.average_mood),
            "count": self.sample_size,
        }


@dataclass
class WeeklyPattern:
    rows: List[WeeklyPatternEntry]
    best_weekday: Optional[int] = None
    best_mood: float = 0.0
    worst_weekday: Optional[int] = None
    worst_mood: float = 5.0

    @property
    def total_samples(self) -> int:
        return sum(r.sample_size for r in self.rows)

    @property
    def mood_range(self) -> float:
        return self.best_mood - self.worst_mood


def compute_weekly_pattern(
    series: Sequence[DaySeriesEntry],
    *,
    best_baseline: float = 0.0,
    worst_baseline: float = 5.0,
) -> WeeklyPattern:
    """Bucket the day-series by weekday and locate the best/worst mood days.

    Weekdays are scanned in index order with strict comparisons, so on a
    tie the lowest weekday index wins.  The worst-day scan starts from the
    top of the mood scale; a series that averages 5 everywhere has no
    worst day.
    """
    pattern = WeeklyPattern(rows=[], best_mood=best_baseline, worst_mood=worst_baseline)
    if not series:
        return pattern

    frame = pd.DataFrame({
        "weekday": [e.weekday for e in series],
        "energy": [e.energy_level for e in series],
        "mood": [e.mood_level for e in series],
    })
    grouped = frame.groupby("weekday", sort=True).agg(
        avg_energy=("energy", "mean"),
        avg_mood=("mood", "mean"),
        count=("mood", "size"),
    )

    for weekday, row in grouped.iterrows():
        entry = WeeklyPatternEntry(
            weekday=int(weekday),
            average_energy=float(row["avg_energy"]),
            average_mood=float(row["avg_mood"]),
            sample_size=int(row["count"]),
        )
        pattern.rows.append(entry)

        if entry.average_mood > pattern.best_mood:
            pattern.best_weekday = entry.weekday
            pattern.best_mood = entry.average_mood
        if entry.average_mood < pattern.worst_mood:
            pattern.worst_weekday = entry.weekday
            pattern.worst_mood = entry.average_mood

    return pattern
