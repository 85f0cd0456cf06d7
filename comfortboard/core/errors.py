from __future__ import annotations


class WeatherServiceError(RuntimeError):
    """Aggregate-level failure surfaced to the caller of a weather request."""


class InsufficientDataError(WeatherServiceError):
    def __init__(self, *, available: int, required: int, fetched: bool = False) -> None:
        self.available = available
        self.required = required
        self.fetched = fetched
        if fetched:
            message = (
                f"Failed to fetch minimum {required} cities. Success: {available}"
            )
        else:
            message = f"Minimum {required} cities required. Found only {available}"
        super().__init__(message)


class MalformedConfigurationError(WeatherServiceError):
    """The static city list is missing, unreadable or empty."""


class UpstreamFetchError(RuntimeError):
    # Per-city failure; absorbed by the aggregation service, never surfaced.
    def __init__(self, city_code: str, reason: str) -> None:
        self.city_code = city_code
        self.reason = reason
        super().__init__(f"Failed to fetch city {city_code}: {reason}")
