"""Data quality checks for ingestion runs."""

from climatestats.quality.checks import QualityChecker

__all__ = ["QualityChecker"]
