from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class CacheStatus(str, Enum):
    HIT = "HIT"
    MISS = "MISS"


@dataclass(frozen=True)
class CityEntry:
    code: str
    name: str | None = None


@dataclass(frozen=True)
class CurrentConditions:
    temperature: float
    humidity: float

    name: str | None = None
    description: str | None = None
    feels_like: float | None = None
    pressure: float | None = None
    visibility: float | None = None
    wind_speed: float | None = None
    wind_direction: float | None = None
    cloud_cover: float | None = None


@dataclass(frozen=True)
class CityWeatherRecord:
    id: str
    name: str
    description: str
    temperature: float
    feels_like: float
    humidity: int
    pressure: int
    visibility: int
    wind_speed: float
    wind_direction: float
    cloud_cover: float
    comfort_score: int
    temperature_trend: tuple[float, ...]


@dataclass(frozen=True)
class AggregatedResult:
    records: tuple[CityWeatherRecord, ...]
    generated_at: datetime

    @property
    def count(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class CacheStats:
    hit_count: int
    miss_count: int
    currently_present: bool
