"""
Error taxonomy for the weather proxy.

Every failure that the request handler can report with a specific status is a
WeatherAPIError. Anything else is an internal error and becomes a 500.
"""

from __future__ import annotations

from typing import Any

REQUIRED_LOCATION_MESSAGE = "City name or coordinates (lat/lon) are required"


class WeatherAPIError(Exception):
    """Base class for errors surfaced to the caller with a status code."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.code = code

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message}
        if self.code is not None:
            body["code"] = self.code
        return body


class ValidationError(WeatherAPIError):
    """The request body does not describe a usable location or data type."""

    status_code = 400


class UpstreamError(WeatherAPIError):
    """OpenWeatherMap answered the primary fetch with a non-success status."""


class ResolutionError(WeatherAPIError):
    """A city could not be turned into coordinates for an air-quality lookup."""

    @classmethod
    def from_upstream(cls, exc: UpstreamError) -> "ResolutionError":
        return cls(exc.message, status_code=exc.status_code, code=exc.code)
