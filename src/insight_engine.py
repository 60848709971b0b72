"""
Insight Engine
==============
Mines a trailing window of pulse checks (daily energy/mood) and activity
records for behavioural correlations.

Architecture (4 layers over one ordered day-series):
  Layer 0 - Day-series:  one entry per UTC day with a pulse check;
            records on other days are dropped.
  Layer 1 - Same-day:  activity count vs mood and vs energy.
  Layer 2 - Next-day:  previous day's high-effort count vs today's
            mood/energy, consecutive calendar days only.
  Layer 3 - Per-component next-day:  each component's previous-day count
            vs today's mood.
  Layer 4 - Weekly pattern:  mean energy/mood per weekday plus a
            best/worst day insight when the mood range is wide enough.

Every call recomputes from scratch; the engine keeps no state besides its
configuration.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from dotenv import load_dotenv

from analytics.correlation_math import (
    confidence_label,
    direction_label,
    pearson_correlation,
    round2,
)
from analytics.day_series import DaySeriesEntry, build_day_series
from analytics.weekly_pattern import WeeklyPattern, WeeklyPatternEntry, compute_weekly_pattern
from constants import UNKNOWN_COMPONENT_LABEL, WEEKDAY_NAMES

load_dotenv()

log = logging.getLogger("insight_engine")

ONE_DAY = timedelta(days=1)


# ═══════════════════════════════════════════════════════════════
#  CONFIGURATION
# ═══════════════════════════════════════════════════════════════

@dataclass
class InsightConfig:
    min_data_points: int = 5
    correlation_threshold: float = 0.3
    # Direction band is fixed, independent of the emission threshold
    direction_threshold: float = 0.3
    window_days: int = 30
    weekly_min_mood_range: float = 0.5
    weekly_high_confidence_samples: int = 20
    # Confidence tiers (independent of the emission threshold)
    high_confidence_samples: int = 20
    high_confidence_r: float = 0.6
    medium_confidence_samples: int = 10
    medium_confidence_r: float = 0.4

    @classmethod
    def from_env(cls) -> "InsightConfig":
        """Defaults, overridden by INSIGHT_* environment variables when valid."""
        cfg = cls()
        cfg.min_data_points = _env_number("INSIGHT_MIN_DATA_POINTS", cfg.min_data_points, int)
        cfg.correlation_threshold = _env_number(
            "INSIGHT_CORRELATION_THRESHOLD", cfg.correlation_threshold, float
        )
        cfg.window_days = _env_number("INSIGHT_WINDOW_DAYS", cfg.window_days, int)
        return cfg


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw.strip())
    except ValueError:
        log.warning("Ignoring invalid %s=%r, using default %s", name, raw, default)
        return default
    if value <= 0:
        log.warning("Ignoring non-positive %s=%r, using default %s", name, raw, default)
        return default
    return value


# ═══════════════════════════════════════════════════════════════
#  REPORT TYPES
# ═══════════════════════════════════════════════════════════════

@dataclass
class Insight:
    kind: str
    text: str
    confidence: str
    sample_size: int
    correlation: float
    direction: str
    component_label: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        details: Dict[str, Any] = {
            "correlation": round2(self.correlation),
            "direction": self.direction,
        }
        if self.component_label is not None:
            details["activityType"] = self.component_label
        return {
            "type": self.kind,
            "insight": self.text,
            "confidence": self.confidence,
            "dataPoints": self.sample_size,
            "details": details,
        }


@dataclass
class ReportSummary:
    average_energy: float = 0.0
    average_mood: float = 0.0
    best_weekday: Optional[int] = None
    worst_weekday: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "averageEnergy": round2(self.average_energy),
            "averageMood": round2(self.average_mood),
            "bestDayOfWeek": WEEKDAY_NAMES[self.best_weekday] if self.best_weekday is not None else None,
            "worstDayOfWeek": WEEKDAY_NAMES[self.worst_weekday] if self.worst_weekday is not None else None,
        }


@dataclass
class InsightReport:
    insights: List[Insight] = field(default_factory=list)
    summary: ReportSummary = field(default_factory=ReportSummary)
    weekly_pattern: List[WeeklyPatternEntry] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.insights and not self.weekly_pattern

    def to_dict(self) -> Dict[str, Any]:
        return {
            "correlations": [i.to_dict() for i in self.insights],
            "summary": self.summary.to_dict(),
            "weeklyPattern": [
                row.to_dict() for row in sorted(self.weekly_pattern, key=lambda r: r.weekday)
            ],
        }


# ═══════════════════════════════════════════════════════════════
#  ENGINE
# ═══════════════════════════════════════════════════════════════

def component_name_map(components: Iterable[Dict[str, Any]]) -> Dict[str, str]:
    """{component id -> display name} for labelling component insights."""
    return {str(c["id"]): c.get("name") for c in components}


def consecutive_pairs(series: Sequence[DaySeriesEntry]) -> List[Tuple[DaySeriesEntry, DaySeriesEntry]]:
    """Adjacent (previous, current) entries exactly one day apart.

    A gap in pulse-check logging breaks the chain; nothing is interpolated.
    """
    pairs = []
    for i in range(1, len(series)):
        prev, curr = series[i - 1], series[i]
        if curr.date - prev.date == ONE_DAY:
            pairs.append((prev, curr))
    return pairs


class InsightEngine:
    """
    Runs the fixed battery of correlation tests over a day-series.
    Pure computation: inputs are already loaded, output is a fresh report.
    """

    def __init__(self, config: Optional[InsightConfig] = None):
        self.config = config or InsightConfig()

    # ─── MAIN ENTRY ─────────────────────────────────────────────

    def analyze(
        self,
        pulse_checks: Iterable[Dict[str, Any]],
        activity_records: Iterable[Dict[str, Any]],
        components: Iterable[Dict[str, Any]] = (),
    ) -> InsightReport:
        """Build the day-series from raw collections and analyse it."""
        series = build_day_series(pulse_checks, activity_records)
        return self.analyze_series(series, component_name_map(components))

    def analyze_series(
        self,
        series: Sequence[DaySeriesEntry],
        component_names: Optional[Dict[str, str]] = None,
    ) -> InsightReport:
        cfg = self.config
        if len(series) < cfg.min_data_points:
            log.info(
                "   Not enough data for insights (%d days, need >= %d).",
                len(series), cfg.min_data_points,
            )
            return InsightReport()

        names = component_names or {}
        pairs = consecutive_pairs(series)

        same_day = self._layer1_same_day(series)
        next_day = self._layer2_next_day(pairs)
        per_component = self._layer3_components(series, pairs, names)
        weekly = compute_weekly_pattern(series)
        weekly_insights = self._layer4_weekly(weekly)

        insights = [*same_day, *next_day, *per_component, *weekly_insights]
        summary = ReportSummary(
            average_energy=sum(e.energy_level for e in series) / len(series),
            average_mood=sum(e.mood_level for e in series) / len(series),
            best_weekday=weekly.best_weekday,
            worst_weekday=weekly.worst_weekday,
        )

        log.info(
            "\n   INSIGHT DIGEST (%s -> %s, %d days, %d consecutive pairs)\n"
            "   Layer 1 Same-day        : %d insights\n"
            "   Layer 2 Next-day        : %d insights\n"
            "   Layer 3 Components      : %d insights\n"
            "   Layer 4 Weekly pattern  : %d weekdays, %d insights",
            series[0].day_key,
            series[-1].day_key,
            len(series),
            len(pairs),
            len(same_day),
            len(next_day),
            len(per_component),
            len(weekly.rows),
            len(weekly_insights),
        )

        return InsightReport(
            insights=insights,
            summary=summary,
            weekly_pattern=list(weekly.rows),
        )

    # ─── Helpers ────────────────────────────────────────────────

    def _crosses(self, r: float) -> bool:
        return abs(r) >= self.config.correlation_threshold

    def _insight(
        self,
        kind: str,
        r: float,
        n: int,
        positive_text: str,
        negative_text: str,
        component_label: Optional[str] = None,
    ) -> Insight:
        cfg = self.config
        return Insight(
            kind=kind,
            text=positive_text if r > 0 else negative_text,
            confidence=confidence_label(
                r,
                n,
                high_samples=cfg.high_confidence_samples,
                high_r=cfg.high_confidence_r,
                medium_samples=cfg.medium_confidence_samples,
                medium_r=cfg.medium_confidence_r,
            ),
            sample_size=n,
            correlation=r,
            direction=direction_label(r, cfg.direction_threshold),
            component_label=component_label,
        )

    # ─── LAYER 1: Same-day ──────────────────────────────────────

    def _layer1_same_day(self, series: Sequence[DaySeriesEntry]) -> List[Insight]:
        activity = [e.activity_count for e in series]
        mood = [e.mood_level for e in series]
        energy = [e.energy_level for e in series]
        n = len(series)

        out: List[Insight] = []
        r_mood = pearson_correlation(activity, mood)
        if self._crosses(r_mood):
            out.append(self._insight(
                "same_day", r_mood, n,
                "More activities correlate with better mood on the same day",
                "More activities correlate with lower mood on the same day",
            ))

        r_energy = pearson_correlation(activity, energy)
        if self._crosses(r_energy):
            out.append(self._insight(
                "same_day", r_energy, n,
                "More activities correlate with higher energy on the same day",
                "More activities correlate with lower energy on the same day",
            ))
        return out

    # ─── LAYER 2: Next-day high effort ──────────────────────────

    def _layer2_next_day(self, pairs: Sequence[Tuple[DaySeriesEntry, DaySeriesEntry]]) -> List[Insight]:
        n = len(pairs)
        if n < self.config.min_data_points:
            return []

        prev_high_effort = [prev.high_effort_count for prev, _ in pairs]
        next_mood = [curr.mood_level for _, curr in pairs]
        next_energy = [curr.energy_level for _, curr in pairs]

        out: List[Insight] = []
        r_mood = pearson_correlation(prev_high_effort, next_mood)
        if self._crosses(r_mood):
            out.append(self._insight(
                "next_day", r_mood, n,
                "High-effort exercise correlates with better mood the next day",
                "High-effort exercise correlates with lower mood the next day",
            ))

        r_energy = pearson_correlation(prev_high_effort, next_energy)
        if self._crosses(r_energy):
            out.append(self._insight(
                "next_day", r_energy, n,
                "High-effort activities correlate with higher energy the next day",
                "High-effort activities correlate with lower energy the next day",
            ))
        return out

    # ─── LAYER 3: Per-component next-day ────────────────────────

    def _layer3_components(
        self,
        series: Sequence[DaySeriesEntry],
        pairs: Sequence[Tuple[DaySeriesEntry, DaySeriesEntry]],
        names: Dict[str, str],
    ) -> List[Insight]:
        n = len(pairs)
        if n < self.config.min_data_points:
            return []

        # first-seen order across the day-series
        component_ids = list(dict.fromkeys(
            cid for entry in series for cid in entry.component_activity
        ))
        next_mood = [curr.mood_level for _, curr in pairs]

        out: List[Insight] = []
        for cid in component_ids:
            label = names.get(cid) or UNKNOWN_COMPONENT_LABEL
            prev_counts = [prev.component_count(cid) for prev, _ in pairs]
            r = pearson_correlation(prev_counts, next_mood)
            if self._crosses(r):
                out.append(self._insight(
                    "next_day", r, n,
                    f"{label} correlates with better mood the next day",
                    f"{label} correlates with lower mood the next day",
                    component_label=label,
                ))
        return out

    # ─── LAYER 4: Weekly pattern ────────────────────────────────

    def _layer4_weekly(self, weekly: WeeklyPattern) -> List[Insight]:
        cfg = self.config
        if len(weekly.rows) < 3:
            return []
        if weekly.best_weekday is None or weekly.worst_weekday is None:
            return []
        if weekly.best_weekday == weekly.worst_weekday:
            return []
        mood_range = weekly.mood_range
        if mood_range < cfg.weekly_min_mood_range:
            return []

        total = weekly.total_samples
        return [Insight(
            kind="weekly_pattern",
            text=(
                f"{WEEKDAY_NAMES[weekly.best_weekday]} tends to be your best day; "
                f"{WEEKDAY_NAMES[weekly.worst_weekday]} tends to be your lowest"
            ),
            confidence="high" if total >= cfg.weekly_high_confidence_samples else "medium",
            sample_size=total,
            correlation=mood_range,
            direction="pattern",
        )]


def generate_insights(
    pulse_checks: Iterable[Dict[str, Any]],
    activity_records: Iterable[Dict[str, Any]],
    components: Iterable[Dict[str, Any]] = (),
    config: Optional[InsightConfig] = None,
) -> Dict[str, Any]:
    """Convenience wrapper returning the JSON-ready report."""
    return InsightEngine(config).analyze(pulse_checks, activity_records, components).to_dict()
