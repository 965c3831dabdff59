"""Data models for the climatestats pipeline."""

from datetime import datetime, timezone
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field


class QualityStatus(str, Enum):
    """Quality check result status."""

    PASS = "pass"
    FAIL = "fail"
    WARN = "warn"


class Observation(BaseModel):
    """Single climate observation parsed from one TDV line."""

    model_config = ConfigDict(frozen=True)

    state_code: str = Field(min_length=1)
    timestamp: int  # unix seconds
    geohash: str = ""
    humidity_pct: float
    snow: int
    cloud_cover_pct: float
    lightning: float
    temperature_f: float

    @property
    def observed_at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)


class StateAggregate(BaseModel):
    """Running statistics for one state code."""

    code: str
    record_count: int = Field(ge=1)
    humidity_sum: float
    cloud_cover_sum: float
    temperature_sum: float
    snow_count: int
    lightning_count: float
    max_temp: float
    max_temp_timestamp: int
    min_temp: float
    min_temp_timestamp: int

    @classmethod
    def from_observation(cls, obs: Observation) -> "StateAggregate":
        """Start a new aggregate seeded with a single observation."""
        return cls(
            code=obs.state_code,
            record_count=1,
            humidity_sum=obs.humidity_pct,
            cloud_cover_sum=obs.cloud_cover_pct,
            temperature_sum=obs.temperature_f,
            snow_count=obs.snow,
            lightning_count=obs.lightning,
            max_temp=obs.temperature_f,
            max_temp_timestamp=obs.timestamp,
            min_temp=obs.temperature_f,
            min_temp_timestamp=obs.timestamp,
        )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def avg_humidity(self) -> float:
        return self.humidity_sum / self.record_count

    @computed_field  # type: ignore[prop-decorator]
    @property
    def avg_temperature(self) -> float:
        return self.temperature_sum / self.record_count

    @computed_field  # type: ignore[prop-decorator]
    @property
    def avg_cloud_cover(self) -> float:
        return self.cloud_cover_sum / self.record_count

    def fold(self, obs: Observation) -> None:
        """Fold one more observation for this state into the running totals.

        Extrema are replaced only on a strictly greater/lower temperature, so
        ties keep the first-seen value and its timestamp.
        """
        self.record_count += 1
        self.humidity_sum += obs.humidity_pct
        self.cloud_cover_sum += obs.cloud_cover_pct
        self.temperature_sum += obs.temperature_f
        self.snow_count += obs.snow
        self.lightning_count += obs.lightning

        if obs.temperature_f > self.max_temp:
            self.max_temp = obs.temperature_f
            self.max_temp_timestamp = obs.timestamp
        if obs.temperature_f < self.min_temp:
            self.min_temp = obs.temperature_f
            self.min_temp_timestamp = obs.timestamp

    def merge(self, other: "StateAggregate") -> None:
        """Merge a partial aggregate whose records came after this one's."""
        if other.code != self.code:
            raise ValueError(f"Cannot merge state {other.code} into {self.code}")

        self.record_count += other.record_count
        self.humidity_sum += other.humidity_sum
        self.cloud_cover_sum += other.cloud_cover_sum
        self.temperature_sum += other.temperature_sum
        self.snow_count += other.snow_count
        self.lightning_count += other.lightning_count

        if other.max_temp > self.max_temp:
            self.max_temp = other.max_temp
            self.max_temp_timestamp = other.max_temp_timestamp
        if other.min_temp < self.min_temp:
            self.min_temp = other.min_temp
            self.min_temp_timestamp = other.min_temp_timestamp


class IngestStats(BaseModel):
    """Line counters for one ingested source."""

    source: str
    lines_read: int = 0
    records_ingested: int = 0
    lines_skipped: int = 0
    blank_lines: int = 0


class FileFailure(BaseModel):
    """A source that could not be opened, or failed part way through a read."""

    source: str
    reason: str
    kind: Literal["open", "read"] = "open"


class RunSummary(BaseModel):
    """Outcome of ingesting every file named on a run."""

    files: list[IngestStats] = Field(default_factory=list)
    failures: list[FileFailure] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def files_read(self) -> int:
        return len(self.files)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def lines_read(self) -> int:
        return sum(f.lines_read for f in self.files)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def records_ingested(self) -> int:
        return sum(f.records_ingested for f in self.files)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def lines_skipped(self) -> int:
        return sum(f.lines_skipped for f in self.files)


class QualityCheckResult(BaseModel):
    """Result of a data quality check."""

    check_name: str
    status: QualityStatus
    metric_value: float | None = None
    threshold: float | None = None
    message: str
    checked_at: datetime = Field(default_factory=datetime.now)
