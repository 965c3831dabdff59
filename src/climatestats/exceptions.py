"""
Exceptions for climatestats ingestion.
"""


class ClimateStatsError(Exception):
    """Base exception for climatestats errors."""

    pass


class MalformedLineError(ClimateStatsError):
    """A TDV line that cannot be parsed into an observation."""

    def __init__(self, reason: str, line: str = "") -> None:
        super().__init__(reason, line)
        self.reason = reason
        self.line = line

    def __str__(self) -> str:
        return self.reason


class SourceUnavailableError(ClimateStatsError):
    """An input file that cannot be opened or read."""

    def __init__(self, path: str, reason: str, kind: str = "open") -> None:
        # Keep every arg on the exception so it survives pickling across workers
        super().__init__(path, reason, kind)
        self.path = path
        self.reason = reason
        self.kind = kind  # "open" or "read"

    def __str__(self) -> str:
        return f"{self.path}: {self.reason}"
