"""Typed errors surfaced by the birth chart engine."""

from __future__ import annotations

from typing import Any, Dict, Optional


class ChartError(Exception):
    """Base class for user-facing chart errors.

    ``code`` is a stable identifier for API clients, ``message`` is meant to be
    shown to the person who filled in the form.
    """

    code = "chart_error"

    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.message, "field": self.field}


class EmptyInputError(ChartError):
    code = "empty_input"


class LocationNotFoundError(ChartError):
    code = "location_not_found"


class MissingTimezoneError(ChartError):
    code = "missing_timezone"


class InvalidTimeError(ChartError):
    code = "invalid_time"


class InvalidDateError(ChartError):
    code = "invalid_date"


class UnsupportedHouseSystemError(ChartError):
    code = "unsupported_house_system"


class PositionProviderDegraded(ChartError):
    """Notice that a position layer failed and the next one took over.

    Only ever logged and attached to provider results, never raised.
    """

    code = "position_provider_degraded"

    def __init__(self, layer: str, reason: str) -> None:
        super().__init__(f"{layer}: {reason}")
        self.layer = layer
        self.reason = reason


__all__ = [
    "ChartError",
    "EmptyInputError",
    "InvalidDateError",
    "InvalidTimeError",
    "LocationNotFoundError",
    "MissingTimezoneError",
    "PositionProviderDegraded",
    "UnsupportedHouseSystemError",
]
