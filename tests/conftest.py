"""Shared fixtures and helpers for climatestats tests."""

from collections.abc import Iterator

import pytest
import structlog


def fahrenheit_to_kelvin(fahrenheit: float) -> float:
    return (fahrenheit + 459.67) * 5.0 / 9.0


def tdv_line(
    code: str = "WA",
    timestamp_ms: int = 1428300000000,
    humidity: float = 50.0,
    snow: float = 0.0,
    cloud: float = 20.0,
    lightning: float = 0.0,
    kelvin: float = 284.0,
    geohash: str = "c23n",
    pressure: float = 101325.0,
) -> str:
    """Build one newline-terminated TDV record."""
    fields = [code, timestamp_ms, geohash, humidity, snow, cloud, lightning, pressure, kelvin]
    return "\t".join(str(f) for f in fields) + "\n"


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Undo any structlog configuration a CLI invocation bound to its own streams."""
    yield
    structlog.reset_defaults()
