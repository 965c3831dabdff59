"""TDV record parsing and file access."""

from climatestats.ingestion.parser import kelvin_to_fahrenheit, millis_to_seconds, parse_line
from climatestats.ingestion.source import read_lines

__all__ = ["parse_line", "kelvin_to_fahrenheit", "millis_to_seconds", "read_lines"]
