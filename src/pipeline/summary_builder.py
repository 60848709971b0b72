"""Helpers for building plain-text insight digests (CLI and notifications)."""

from __future__ import annotations

from typing import Any, Dict


def build_insight_digest(report: Dict[str, Any], limit: int = 280) -> str:
    """Render a JSON-ready insight report as short text lines."""
    correlations = (report or {}).get("correlations") or []
    weekly = (report or {}).get("weeklyPattern") or []
    summary = (report or {}).get("summary") or {}

    if not correlations and not weekly:
        return (
            "- Not enough data yet: log a daily pulse check for at least 5 days "
            "to unlock insights."
        )

    def clip(s: str) -> str:
        s = s.replace("\n", " ").strip()
        if len(s) <= limit:
            return s
        return s[: limit - 3].rstrip() + "..."

    lines = []
    for item in correlations:
        lines.append(clip(
            f"- [{item.get('confidence', 'low')}] {item.get('insight', '')} "
            f"(n={item.get('dataPoints', 0)})"
        ))
    if not correlations:
        lines.append("- No strong patterns found in this window.")

    lines.append(
        f"- Averages: energy {summary.get('averageEnergy', 0):.2f}, "
        f"mood {summary.get('averageMood', 0):.2f}"
    )
    best = summary.get("bestDayOfWeek")
    worst = summary.get("worstDayOfWeek")
    if best or worst:
        lines.append(f"- Best day: {best or 'n/a'}; lowest day: {worst or 'n/a'}")
    return "\n".join(lines)
