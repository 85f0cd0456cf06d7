from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from comfortboard.models.weather import CacheStatus


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class CityWeather(CamelModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str
    temperature: float
    feels_like: float
    humidity: int
    pressure: int
    visibility: int = Field(ge=0)
    wind_speed: float
    wind_direction: float
    cloud_cover: float
    comfort_score: int = Field(ge=0, le=100)
    temperature_trend: list[float] = Field(min_length=7, max_length=7)


class WeatherResponse(CamelModel):
    cache_status: CacheStatus
    data: list[CityWeather]
    timestamp: datetime
    generated_at: datetime
    count: int = Field(ge=0)
    message: str


class ErrorResponse(BaseModel):
    error: str
    message: str


class ComfortBucket(CamelModel):
    level: str
    count: int = Field(ge=0)
    percentage: float = Field(ge=0, le=100)


class TemperatureRanges(CamelModel):
    cold: int = Field(ge=0)
    warm: int = Field(ge=0)
    hot: int = Field(ge=0)
    ideal: int = Field(ge=0)


class CityHighlight(CamelModel):
    id: str
    name: str
    comfort_score: int
    temperature: float


class WeatherAnalyticsResponse(CamelModel):
    cache_status: CacheStatus
    city_count: int = Field(ge=0)
    comfort_distribution: list[ComfortBucket]
    temperature_ranges: TemperatureRanges
    average_temperature: float | None = None
    average_comfort_score: float | None = None
    most_comfortable: CityHighlight | None = None
    least_comfortable: CityHighlight | None = None


class CacheCounters(BaseModel):
    keys: list[str]
    hits: int = Field(ge=0)
    misses: int = Field(ge=0)
    keysize: int = Field(ge=0)


class SampleCity(CamelModel):
    name: str
    score: int
    trend_length: int


class WeatherCacheInfo(CamelModel):
    has_data: bool
    item_count: int = Field(ge=0)
    ttl: float | None = None
    sample_city: SampleCity | None = None


class CacheDebugResponse(CamelModel):
    cache_status: CacheCounters
    weather_cache: WeatherCacheInfo


class HealthResponse(BaseModel):
    status: str
    service: str
    timestamp: datetime
    version: str
    endpoints: list[str]
