from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol

from comfortboard.core.errors import InsufficientDataError, UpstreamFetchError
from comfortboard.models.weather import (
    AggregatedResult,
    CacheStats,
    CacheStatus,
    CityEntry,
    CityWeatherRecord,
    CurrentConditions,
)
from comfortboard.repositories.cities import CityRepository
from comfortboard.services.scoring import (
    comfort_score,
    round_half_up,
    round_one_decimal,
    temperature_trend,
)

logger = logging.getLogger(__name__)

WEATHER_CACHE_KEY = "weather_results"
WEATHER_CACHE_TTL_SECONDS = 300
MIN_CITIES = 10
DEFAULT_VISIBILITY_M = 10_000
DEFAULT_DESCRIPTION = "Clear sky"


class WeatherClient(Protocol):
    def fetch_current(self, city_code: str) -> CurrentConditions: ...


class WeatherResultCache:
    """Single-slot store for the aggregated result with passive expiry."""

    def __init__(
        self,
        *,
        ttl_seconds: float = WEATHER_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl_seconds = float(ttl_seconds)
        self._clock = clock
        self._lock = threading.Lock()
        self._value: AggregatedResult | None = None
        self._expires_at: float | None = None
        self._hits = 0
        self._misses = 0

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    def _live_value(self) -> AggregatedResult | None:
        # Caller holds the lock.
        if self._value is None or self._expires_at is None:
            return None
        if self._clock() >= self._expires_at:
            self._value = None
            self._expires_at = None
            return None
        return self._value

    def get(self) -> AggregatedResult | None:
        with self._lock:
            value = self._live_value()
            if value is None:
                self._misses += 1
            else:
                self._hits += 1
            return value

    def peek(self) -> AggregatedResult | None:
        with self._lock:
            return self._live_value()

    def set(self, value: AggregatedResult) -> None:
        with self._lock:
            self._value = value
            self._expires_at = self._clock() + self._ttl_seconds

    def keys(self) -> list[str]:
        with self._lock:
            return [WEATHER_CACHE_KEY] if self._live_value() is not None else []

    def remaining_ttl(self) -> float | None:
        with self._lock:
            if self._live_value() is None or self._expires_at is None:
                return None
            return max(self._expires_at - self._clock(), 0.0)

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                hit_count=self._hits,
                miss_count=self._misses,
                currently_present=self._live_value() is not None,
            )


@dataclass(frozen=True)
class FetchOutcome:
    city: CityEntry
    record: CityWeatherRecord | None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.record is not None


def build_record(city: CityEntry, conditions: CurrentConditions) -> CityWeatherRecord:
    name = conditions.name or city.name or f"City {city.code}"
    visibility = max(conditions.visibility or DEFAULT_VISIBILITY_M, 0.0)
    feels_like = (
        conditions.feels_like
        if conditions.feels_like is not None
        else conditions.temperature
    )
    return CityWeatherRecord(
        id=city.code,
        name=name,
        description=conditions.description or DEFAULT_DESCRIPTION,
        temperature=round_one_decimal(conditions.temperature),
        feels_like=round_one_decimal(feels_like),
        humidity=round_half_up(conditions.humidity),
        pressure=round_half_up(conditions.pressure or 0),
        visibility=round_half_up(visibility),
        wind_speed=conditions.wind_speed or 0,
        wind_direction=conditions.wind_direction or 0,
        cloud_cover=conditions.cloud_cover or 0,
        comfort_score=comfort_score(
            conditions.temperature, conditions.humidity, visibility
        ),
        temperature_trend=tuple(temperature_trend(conditions.temperature, name)),
    )


class WeatherAggregationService:
    def __init__(
        self,
        *,
        client: WeatherClient,
        cache: WeatherResultCache,
        cities: CityRepository | None = None,
        min_cities: int = MIN_CITIES,
        max_workers: int = 10,
    ) -> None:
        self._client = client
        self._cache = cache
        self._cities = cities
        self._min_cities = min_cities
        self._max_workers = max(int(max_workers), 1)

    def get_weather(self) -> tuple[AggregatedResult, CacheStatus]:
        cached = self._cache.get()
        if cached is not None:
            logger.debug("Serving %d cities from cache", cached.count)
            return cached, CacheStatus.HIT

        if self._cities is None:
            raise RuntimeError("No city repository configured")
        result = self.refresh(self._cities.list_cities())
        return result, CacheStatus.MISS

    def refresh(self, cities: Sequence[CityEntry]) -> AggregatedResult:
        if len(cities) < self._min_cities:
            raise InsufficientDataError(available=len(cities), required=self._min_cities)

        logger.info("Fetching fresh weather data for %d cities", len(cities))
        outcomes = self._fetch_all(cities)

        fetched = [o for o in outcomes if o.ok]
        if len(fetched) < self._min_cities:
            raise InsufficientDataError(
                available=len(fetched), required=self._min_cities, fetched=True
            )

        records = [o.record for o in fetched if o.record is not None]
        records.sort(key=lambda r: r.comfort_score, reverse=True)

        result = AggregatedResult(
            records=tuple(records),
            generated_at=datetime.now(tz=timezone.utc),
        )
        self._cache.set(result)
        logger.info(
            "Cached %d cities (%d failed)", result.count, len(outcomes) - len(fetched)
        )
        return result

    def _fetch_all(self, cities: Sequence[CityEntry]) -> list[FetchOutcome]:
        workers = min(self._max_workers, len(cities))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="weather-fetch") as pool:
            # map() yields in input order once every fetch has settled
            return list(pool.map(self._fetch_one, cities))

    def _fetch_one(self, city: CityEntry) -> FetchOutcome:
        try:
            record = build_record(city, self._client.fetch_current(city.code))
        except UpstreamFetchError as e:
            logger.warning("%s", e)
            return FetchOutcome(city=city, record=None, error=e)
        except Exception as e:  # noqa: BLE001 - one city never aborts the batch
            logger.warning("Failed to fetch weather for city %s", city.code, exc_info=True)
            return FetchOutcome(city=city, record=None, error=e)
        return FetchOutcome(city=city, record=record)
