from __future__ import annotations

import json
import threading
from pathlib import Path

from comfortboard.core.errors import UpstreamFetchError
from comfortboard.models.weather import CityEntry, CurrentConditions

CITY_NAMES = [
    "Colombo",
    "Tokyo",
    "Liverpool",
    "Paris",
    "Sydney",
    "Boston",
    "Shanghai",
    "Oslo",
    "London",
    "New York",
    "Berlin",
    "Moscow",
]


def make_cities(count: int) -> list[CityEntry]:
    return [CityEntry(code=str(1000 + i)) for i in range(count)]


def write_city_file(path: Path, count: int) -> Path:
    rows = [{"CityCode": str(1000 + i)} for i in range(count)]
    path.write_text(json.dumps({"List": rows}), encoding="utf-8")
    return path


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeWeatherClient:
    """Serves canned conditions keyed by city code; unknown codes get defaults."""

    def __init__(
        self,
        *,
        failing: set[str] | None = None,
        broken: set[str] | None = None,
        conditions: dict[str, CurrentConditions] | None = None,
    ) -> None:
        self.failing = set(failing or ())
        self.broken = set(broken or ())
        self.conditions = dict(conditions or {})
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def close(self) -> None:
        return None

    def fetch_current(self, city_code: str) -> CurrentConditions:
        with self._lock:
            self.calls.append(city_code)
        if city_code in self.failing:
            raise UpstreamFetchError(city_code, "HTTP 503")
        if city_code in self.broken:
            raise RuntimeError(f"unexpected client failure for {city_code}")
        if city_code in self.conditions:
            return self.conditions[city_code]

        index = int(city_code) % len(CITY_NAMES)
        return CurrentConditions(
            temperature=8.0 + index * 2.5,
            humidity=40.0 + index,
            name=CITY_NAMES[index],
            description="scattered clouds",
            feels_like=7.0 + index * 2.5,
            pressure=1012.0,
            visibility=10000.0,
            wind_speed=3.6,
            wind_direction=220.0,
            cloud_cover=40.0,
        )
