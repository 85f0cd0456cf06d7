from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from comfortboard.api.deps import WeatherReader, get_weather_service
from comfortboard.schemas.weather import (
    CityHighlight,
    CityWeather,
    ComfortBucket,
    ErrorResponse,
    TemperatureRanges,
    WeatherAnalyticsResponse,
    WeatherResponse,
)
from comfortboard.services.analytics import SortKey, select_records, summarize
from comfortboard.services.weather import WeatherAggregationService

router = APIRouter(prefix="/weather")

ERROR_RESPONSES = {500: {"model": ErrorResponse}}


@router.get("", response_model=WeatherResponse, responses=ERROR_RESPONSES)
def get_weather(
    _: WeatherReader,
    service: Annotated[WeatherAggregationService, Depends(get_weather_service)],
    sort_by: SortKey = SortKey.SCORE,
    q: Annotated[str | None, Query(max_length=64)] = None,
) -> WeatherResponse:
    result, cache_status = service.get_weather()
    rows = select_records(result.records, sort_by=sort_by, query=q)
    return WeatherResponse(
        cache_status=cache_status,
        data=[CityWeather.model_validate(r) for r in rows],
        timestamp=datetime.now(tz=timezone.utc),
        generated_at=result.generated_at,
        count=len(rows),
        message=f"Processed {result.count} cities",
    )


@router.get(
    "/analytics", response_model=WeatherAnalyticsResponse, responses=ERROR_RESPONSES
)
def weather_analytics(
    _: WeatherReader,
    service: Annotated[WeatherAggregationService, Depends(get_weather_service)],
) -> WeatherAnalyticsResponse:
    result, cache_status = service.get_weather()
    summary = summarize(result.records)
    return WeatherAnalyticsResponse(
        cache_status=cache_status,
        city_count=summary.city_count,
        comfort_distribution=[
            ComfortBucket.model_validate(b) for b in summary.comfort_distribution
        ],
        temperature_ranges=TemperatureRanges.model_validate(summary.temperature_ranges),
        average_temperature=summary.average_temperature,
        average_comfort_score=summary.average_comfort_score,
        most_comfortable=(
            CityHighlight.model_validate(summary.most_comfortable)
            if summary.most_comfortable
            else None
        ),
        least_comfortable=(
            CityHighlight.model_validate(summary.least_comfortable)
            if summary.least_comfortable
            else None
        ),
    )
