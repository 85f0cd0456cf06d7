from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends

from comfortboard.api.deps import WeatherReader, get_weather_cache
from comfortboard.core.config import APP_VERSION
from comfortboard.schemas.weather import (
    CacheCounters,
    CacheDebugResponse,
    HealthResponse,
    SampleCity,
    WeatherCacheInfo,
)
from comfortboard.services.weather import WeatherResultCache

SERVICE_NAME = "Weather Analytics API"

ENDPOINTS = [
    "/api/weather - Main weather data with comfort scores",
    "/api/weather/analytics - Comfort and temperature distribution",
    "/api/cache-debug - Cache status information",
    "/api/health - Service health check",
]

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(
        status="OK",
        service=SERVICE_NAME,
        timestamp=datetime.now(tz=timezone.utc),
        version=APP_VERSION,
        endpoints=ENDPOINTS,
    )


@router.get("/cache-debug", response_model=CacheDebugResponse)
def cache_debug(
    _: WeatherReader,
    cache: Annotated[WeatherResultCache, Depends(get_weather_cache)],
) -> CacheDebugResponse:
    stats = cache.stats()
    keys = cache.keys()
    cached = cache.peek()

    sample = None
    if cached is not None and cached.records:
        first = cached.records[0]
        sample = SampleCity(
            name=first.name,
            score=first.comfort_score,
            trend_length=len(first.temperature_trend),
        )

    return CacheDebugResponse(
        cache_status=CacheCounters(
            keys=keys,
            hits=stats.hit_count,
            misses=stats.miss_count,
            keysize=len(keys),
        ),
        weather_cache=WeatherCacheInfo(
            has_data=cached is not None,
            item_count=cached.count if cached is not None else 0,
            ttl=cache.remaining_ttl(),
            sample_city=sample,
        ),
    )
