"""Per-state summaries of NOAA tab-delimited climate observations."""

__version__ = "0.1.0"
