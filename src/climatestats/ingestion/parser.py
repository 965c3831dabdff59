"""Parsing of NOAA tab-delimited (TDV) climate records.

Each record is one line of nine tab-separated fields::

    CA  1428300000000  9prc  93.0  0.0  100.0  0.0  95644.0  277.58716

state code, timestamp (ms since epoch), geohash, humidity (%), snow flag,
cloud cover (%), lightning flag, pressure (Pa), surface temperature (K).
"""

import math

from climatestats.exceptions import MalformedLineError
from climatestats.models import Observation

FIELD_COUNT = 9

# Positional field indexes
STATE_CODE = 0
TIMESTAMP_MS = 1
GEOHASH = 2
HUMIDITY = 3
SNOW = 4
CLOUD_COVER = 5
LIGHTNING = 6
PRESSURE = 7  # read but unused
SURFACE_TEMP_K = 8


def kelvin_to_fahrenheit(kelvin: float) -> float:
    return kelvin * 9.0 / 5.0 - 459.67


def millis_to_seconds(millis: int) -> int:
    """Whole seconds, truncated toward zero (pre-1970 values included)."""
    if millis < 0:
        return -(-millis // 1000)
    return millis // 1000


def _parse_float(fields: list[str], index: int, name: str) -> float:
    raw = fields[index]
    try:
        value = float(raw)
    except ValueError:
        raise MalformedLineError(f"{name} is not a number: {raw!r}") from None
    if not math.isfinite(value):
        raise MalformedLineError(f"{name} is not finite: {raw!r}")
    return value


def _parse_int(fields: list[str], index: int, name: str) -> int:
    raw = fields[index]
    try:
        return int(raw)
    except ValueError:
        raise MalformedLineError(f"{name} is not an integer: {raw!r}") from None


def parse_line(line: str) -> Observation:
    """Parse one TDV line into an Observation.

    Args:
        line: Raw line, with or without its trailing newline

    Returns:
        The parsed observation, temperature converted to Fahrenheit

    Raises:
        MalformedLineError: Fewer than nine fields, an empty state code or a
            required numeric field that does not parse
    """
    fields = line.rstrip("\r\n").split("\t")
    if len(fields) < FIELD_COUNT:
        raise MalformedLineError(
            f"expected {FIELD_COUNT} fields, found {len(fields)}", line
        )

    state_code = fields[STATE_CODE].strip()
    if not state_code:
        raise MalformedLineError("missing state code", line)

    try:
        return Observation(
            state_code=state_code,
            timestamp=millis_to_seconds(_parse_int(fields, TIMESTAMP_MS, "timestamp")),
            geohash=fields[GEOHASH].strip(),
            humidity_pct=_parse_float(fields, HUMIDITY, "humidity"),
            # Snow is a count of records with cover, so fractional flags truncate
            snow=int(_parse_float(fields, SNOW, "snow")),
            cloud_cover_pct=_parse_float(fields, CLOUD_COVER, "cloud cover"),
            lightning=_parse_float(fields, LIGHTNING, "lightning"),
            temperature_f=kelvin_to_fahrenheit(
                _parse_float(fields, SURFACE_TEMP_K, "surface temperature")
            ),
        )
    except MalformedLineError as e:
        raise MalformedLineError(e.reason, line) from None
