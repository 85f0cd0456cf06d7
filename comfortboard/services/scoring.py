"""Comfort score and synthetic temperature trend.

Both functions are pure: identical inputs give identical outputs within and
across process runs. The trend is a visualization aid shaped around the
current temperature; it carries no predictive information.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

IDEAL_TEMPERATURE_C = 22.0
IDEAL_HUMIDITY_PCT = 45.0

TEMPERATURE_WEIGHT = 0.5
HUMIDITY_WEIGHT = 0.3
VISIBILITY_WEIGHT = 0.2

TREND_DAYS = 7
TREND_MIN_C = -10.0
TREND_MAX_C = 45.0


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def round_one_decimal(value: float) -> float:
    # Floats this large carry no fractional digits.
    if not math.isfinite(value) or abs(value) >= 1e15:
        return float(value)
    return float(Decimal(repr(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def comfort_score(temp_c: float, humidity_pct: float, visibility_m: float) -> int:
    """Weighted comfort score in [0, 100].

    Temperature contributes 50%, humidity 30% and visibility 20%. Ideal
    conditions are 22 °C, 45% humidity and at least 10 km visibility.
    """
    t_score = max(0.0, 100 - abs(IDEAL_TEMPERATURE_C - temp_c) * 3)
    h_score = max(0.0, 100 - abs(IDEAL_HUMIDITY_PCT - humidity_pct) * 1.5)
    v_score = min(100.0, max(0.0, (visibility_m / 1000) * 10))

    weighted = (
        t_score * TEMPERATURE_WEIGHT
        + h_score * HUMIDITY_WEIGHT
        + v_score * VISIBILITY_WEIGHT
    )
    return round_half_up(weighted)


def comfort_level(score: int) -> str:
    if score >= 80:
        return "Excellent"
    if score >= 60:
        return "Good"
    if score >= 40:
        return "Moderate"
    return "Poor"


def name_seed(city_name: str) -> int:
    return sum(ord(ch) for ch in city_name) % 100


def temperature_trend(current_temp_c: float, city_name: str) -> list[float]:
    """Seven synthetic daily temperatures seeded by the city name."""
    seed = name_seed(city_name)
    values: list[float] = []
    for day in range(TREND_DAYS):
        base_pattern = math.sin(day * 0.8) * 3
        city_variation = (seed * 0.01 * day) % 4 - 2
        daily_fluctuation = math.sin(seed + day) * 1.5
        raw = current_temp_c + base_pattern + city_variation + daily_fluctuation
        values.append(round_one_decimal(min(TREND_MAX_C, max(TREND_MIN_C, raw))))
    return values
