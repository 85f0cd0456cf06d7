from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Protocol

from comfortboard.core.errors import MalformedConfigurationError
from comfortboard.models.weather import CityEntry


class CityRepository(Protocol):
    def list_cities(self) -> list[CityEntry]: ...


class JsonCityRepository:
    """Reads the static city list, e.g. ``{"List": [{"CityCode": "1248991"}]}``."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def list_cities(self) -> list[CityEntry]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise MalformedConfigurationError(
                f"City list {self._path} could not be read: {e}"
            ) from e

        try:
            document = json.loads(raw)
        except ValueError as e:
            raise MalformedConfigurationError(
                f"City list {self._path} is not valid JSON"
            ) from e

        rows = document.get("List") if isinstance(document, dict) else None
        if not isinstance(rows, list) or not rows:
            raise MalformedConfigurationError(
                f"City list {self._path} has no 'List' entries"
            )
        return [_parse_entry(self._path, row) for row in rows]


def _parse_entry(path: Path, row: Any) -> CityEntry:
    if not isinstance(row, dict):
        raise MalformedConfigurationError(f"City list {path} contains a non-object entry")
    code = row.get("CityCode")
    if code is None or isinstance(code, bool) or str(code).strip() == "":
        raise MalformedConfigurationError(f"City list {path} has an entry without CityCode")
    name = row.get("CityName")
    return CityEntry(
        code=str(code).strip(),
        name=str(name) if name else None,
    )
