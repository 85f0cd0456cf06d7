from __future__ import annotations

import math
from typing import Any

import httpx

from comfortboard.core.errors import UpstreamFetchError
from comfortboard.models.weather import CurrentConditions

OPENWEATHER_CURRENT_URL = "https://api.openweathermap.org/data/2.5/weather"

# Outside these ranges a reading is treated as a malformed payload.
TEMPERATURE_BOUNDS = {
    "metric": (-100.0, 70.0),
    "imperial": (-150.0, 160.0),
    "standard": (170.0, 345.0),
}
MAX_PRESSURE_HPA = 1100.0


class OpenWeatherClient:
    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: float,
        base_url: str = OPENWEATHER_CURRENT_URL,
        units: str = "metric",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._units = units
        self._client = httpx.Client(
            timeout=timeout_seconds,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def fetch_current(self, city_code: str) -> CurrentConditions:
        try:
            resp = self._client.get(
                self._base_url,
                params={"id": city_code, "units": self._units, "appid": self._api_key},
            )
            resp.raise_for_status()
            payload = resp.json()
        except httpx.HTTPStatusError as e:
            raise UpstreamFetchError(
                city_code, f"HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamFetchError(city_code, f"{type(e).__name__}: {e}") from e
        except ValueError as e:
            raise UpstreamFetchError(city_code, "response was not valid JSON") from e

        return parse_current_conditions(city_code, payload, units=self._units)


def parse_current_conditions(
    city_code: str, payload: Any, *, units: str = "metric"
) -> CurrentConditions:
    if not isinstance(payload, dict) or not payload:
        raise UpstreamFetchError(city_code, "empty or non-object payload")

    main = payload.get("main")
    if not isinstance(main, dict):
        raise UpstreamFetchError(city_code, "payload is missing the 'main' block")

    temperature = _float_or_none(main.get("temp"))
    humidity = _float_or_none(main.get("humidity"))
    if temperature is None or humidity is None:
        raise UpstreamFetchError(city_code, "payload is missing temperature or humidity")

    weather = payload.get("weather")
    first: dict[str, Any] = {}
    if isinstance(weather, list) and weather and isinstance(weather[0], dict):
        first = weather[0]

    wind: dict[str, Any] = payload.get("wind") or {}
    if not isinstance(wind, dict):
        wind = {}
    clouds: dict[str, Any] = payload.get("clouds") or {}
    if not isinstance(clouds, dict):
        clouds = {}

    conditions = CurrentConditions(
        temperature=temperature,
        humidity=humidity,
        name=_str_or_none(payload.get("name")),
        description=_str_or_none(first.get("description")),
        feels_like=_float_or_none(main.get("feels_like")),
        pressure=_float_or_none(main.get("pressure")),
        visibility=_float_or_none(payload.get("visibility")),
        wind_speed=_float_or_none(wind.get("speed")),
        wind_direction=_float_or_none(wind.get("deg")),
        cloud_cover=_float_or_none(clouds.get("all")),
    )
    _check_plausible(city_code, conditions, units)
    return conditions


def _check_plausible(city_code: str, c: CurrentConditions, units: str) -> None:
    low, high = TEMPERATURE_BOUNDS.get(units, TEMPERATURE_BOUNDS["metric"])
    checks = [
        ("temp", c.temperature, low, high),
        ("feels_like", c.feels_like, low, high),
        ("humidity", c.humidity, 0.0, 100.0),
        ("pressure", c.pressure, 0.0, MAX_PRESSURE_HPA),
        ("visibility", c.visibility, 0.0, None),
        ("wind speed", c.wind_speed, 0.0, None),
        ("cloud cover", c.cloud_cover, 0.0, 100.0),
    ]
    for label, value, lower, upper in checks:
        if value is None:
            continue
        if value < lower or (upper is not None and value > upper):
            raise UpstreamFetchError(city_code, f"implausible {label} {value!r}")


def _float_or_none(v: Any) -> float | None:
    if v is None or isinstance(v, bool):
        return None
    try:
        value = float(v)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def _str_or_none(v: Any) -> str | None:
    if v is None:
        return None
    if isinstance(v, str):
        return v or None
    return str(v)
