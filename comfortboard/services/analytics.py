from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from comfortboard.models.weather import CityWeatherRecord
from comfortboard.services.scoring import comfort_level

COMFORT_LEVELS = ("Excellent", "Good", "Moderate", "Poor")

COLD_BELOW_C = 15.0
HOT_ABOVE_C = 25.0
IDEAL_RANGE_C = (20.0, 24.0)


class SortKey(str, Enum):
    SCORE = "score"
    TEMPERATURE = "temperature"
    NAME = "name"


def select_records(
    records: Sequence[CityWeatherRecord],
    *,
    sort_by: SortKey = SortKey.SCORE,
    query: str | None = None,
) -> list[CityWeatherRecord]:
    rows = list(records)
    if query:
        needle = query.strip().casefold()
        rows = [r for r in rows if needle in r.name.casefold()]

    if sort_by is SortKey.TEMPERATURE:
        rows.sort(key=lambda r: r.temperature, reverse=True)
    elif sort_by is SortKey.NAME:
        rows.sort(key=lambda r: r.name.casefold())
    else:
        rows.sort(key=lambda r: r.comfort_score, reverse=True)
    return rows


@dataclass(frozen=True)
class ComfortBucket:
    level: str
    count: int
    percentage: float


@dataclass(frozen=True)
class TemperatureRanges:
    cold: int
    warm: int
    hot: int
    ideal: int


@dataclass(frozen=True)
class WeatherAnalytics:
    city_count: int
    comfort_distribution: list[ComfortBucket]
    temperature_ranges: TemperatureRanges
    average_temperature: float | None
    average_comfort_score: float | None
    most_comfortable: CityWeatherRecord | None
    least_comfortable: CityWeatherRecord | None


def summarize(records: Sequence[CityWeatherRecord]) -> WeatherAnalytics:
    total = len(records)

    counts = dict.fromkeys(COMFORT_LEVELS, 0)
    for r in records:
        counts[comfort_level(r.comfort_score)] += 1
    distribution = [
        ComfortBucket(
            level=level,
            count=count,
            percentage=round(count / total * 100, 1) if total else 0.0,
        )
        for level, count in counts.items()
    ]

    temps = [r.temperature for r in records]
    ranges = TemperatureRanges(
        cold=sum(1 for t in temps if t < COLD_BELOW_C),
        warm=sum(1 for t in temps if COLD_BELOW_C <= t <= HOT_ABOVE_C),
        hot=sum(1 for t in temps if t > HOT_ABOVE_C),
        ideal=sum(1 for t in temps if IDEAL_RANGE_C[0] <= t <= IDEAL_RANGE_C[1]),
    )

    if not records:
        return WeatherAnalytics(
            city_count=0,
            comfort_distribution=distribution,
            temperature_ranges=ranges,
            average_temperature=None,
            average_comfort_score=None,
            most_comfortable=None,
            least_comfortable=None,
        )

    # max/min return the first of equal elements, matching score-descending order
    return WeatherAnalytics(
        city_count=total,
        comfort_distribution=distribution,
        temperature_ranges=ranges,
        average_temperature=round(sum(temps) / total, 1),
        average_comfort_score=round(sum(r.comfort_score for r in records) / total, 1),
        most_comfortable=max(records, key=lambda r: r.comfort_score),
        least_comfortable=min(records, key=lambda r: r.comfort_score),
    )
