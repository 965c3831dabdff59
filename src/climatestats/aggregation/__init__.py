"""Per-state aggregation of climate observations."""

from climatestats.aggregation.aggregator import Aggregator
from climatestats.aggregation.pipeline import aggregate_paths

__all__ = ["Aggregator", "aggregate_paths"]
