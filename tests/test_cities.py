from __future__ import annotations

from pathlib import Path

import pytest

from comfortboard.core.errors import MalformedConfigurationError
from comfortboard.models.weather import CityEntry
from comfortboard.repositories.cities import JsonCityRepository


def test_reads_codes_in_file_order(tmp_path: Path) -> None:
    path = tmp_path / "cities.json"
    path.write_text(
        '{"List": [{"CityCode": 1248991, "CityName": "Colombo"}, {"CityCode": "1850147"}]}',
        encoding="utf-8",
    )
    assert JsonCityRepository(path).list_cities() == [
        CityEntry(code="1248991", name="Colombo"),
        CityEntry(code="1850147", name=None),
    ]


def test_bundled_city_list_has_enough_cities() -> None:
    path = Path(__file__).resolve().parents[1] / "cities.json"
    assert len(JsonCityRepository(path).list_cities()) >= 10


@pytest.mark.parametrize(
    "content",
    [
        "not json",
        "[]",
        '{"List": []}',
        '{"Cities": [{"CityCode": "1"}]}',
        '{"List": ["1"]}',
        '{"List": [{"CityName": "Nowhere"}]}',
    ],
)
def test_malformed_lists_are_rejected(tmp_path: Path, content: str) -> None:
    path = tmp_path / "cities.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(MalformedConfigurationError):
        JsonCityRepository(path).list_cities()


def test_missing_file_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(MalformedConfigurationError):
        JsonCityRepository(tmp_path / "nope.json").list_cities()
