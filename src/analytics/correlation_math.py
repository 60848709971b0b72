"""Pearson correlation, confidence tiers and presentation rounding."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """Closed-form Pearson r.

    r = (n*Sxy - Sx*Sy) / sqrt((n*Sxx - Sx^2) * (n*Syy - Sy^2))

    Returns 0.0 for mismatched lengths, fewer than two points, or a
    constant series on either side.
    """
    if len(x) != len(y) or len(x) < 2:
        return 0.0

    xs = np.asarray(x, dtype=np.float64)
    ys = np.asarray(y, dtype=np.float64)
    n = len(xs)

    sum_x = float(xs.sum())
    sum_y = float(ys.sum())
    sum_xy = float((xs * ys).sum())
    sum_x2 = float((xs * xs).sum())
    sum_y2 = float((ys * ys).sum())

    numerator = n * sum_xy - sum_x * sum_y
    spread = (n * sum_x2 - sum_x * sum_x) * (n * sum_y2 - sum_y * sum_y)
    # float noise on a constant series can leave spread slightly negative
    if spread <= 0:
        return 0.0
    denominator = math.sqrt(spread)
    if denominator == 0:
        return 0.0
    return numerator / denominator


def confidence_label(
    correlation: float,
    data_points: int,
    *,
    high_samples: int = 20,
    high_r: float = 0.6,
    medium_samples: int = 10,
    medium_r: float = 0.4,
) -> str:
    abs_r = abs(correlation)
    if data_points >= high_samples and abs_r >= high_r:
        return "high"
    if data_points >= medium_samples and abs_r >= medium_r:
        return "medium"
    return "low"


def direction_label(correlation: float, threshold: float = 0.3) -> str:
    if correlation >= threshold:
        return "positive"
    if correlation <= -threshold:
        return "negative"
    return "neutral"


def round2(value: float) -> float:
    """Round half up to 2 decimals (0.125 -> 0.13, -0.125 -> -0.12)."""
    return math.floor(value * 100 + 0.5) / 100
