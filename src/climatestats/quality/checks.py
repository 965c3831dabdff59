"""Data quality checks over a completed ingestion run."""

import structlog

from climatestats.aggregation import Aggregator
from climatestats.models import QualityCheckResult, QualityStatus, RunSummary

log = structlog.get_logger()

# Share of malformed lines (percent) tolerated before a run is flagged as failing
MAX_SKIPPED_PCT = 5.0


class QualityChecker:
    """Runs data quality checks on an ingestion run.

    Checks only report; they never reject records that were ingested.
    """

    def check_run(
        self, summary: RunSummary, aggregator: Aggregator
    ) -> list[QualityCheckResult]:
        """Run all quality checks on a run summary and its aggregate."""
        results = []

        results.append(self._check_files_readable(summary))
        results.append(self._check_malformed_lines(summary))
        results.append(self._check_completeness(summary))
        results.append(self._check_percentage_range(aggregator, "humidity", "avg_humidity"))
        results.append(
            self._check_percentage_range(aggregator, "cloud_cover", "avg_cloud_cover")
        )

        passed = sum(1 for r in results if r.status == QualityStatus.PASS)
        log.info("run_quality_complete", passed=passed, total=len(results))

        return results

    def _check_files_readable(self, summary: RunSummary) -> QualityCheckResult:
        total = summary.files_read + len(summary.failures)
        failed = len(summary.failures)

        if failed == 0:
            status = QualityStatus.PASS
            message = f"All {total} files were readable"
        elif failed < total:
            status = QualityStatus.WARN
            names = ", ".join(f.source for f in summary.failures)
            message = f"{failed} of {total} files could not be read: {names}"
        else:
            status = QualityStatus.FAIL
            message = f"None of the {total} files could be read"

        return QualityCheckResult(
            check_name="files_readable",
            status=status,
            metric_value=failed,
            threshold=0,
            message=message,
        )

    def _check_malformed_lines(self, summary: RunSummary) -> QualityCheckResult:
        data_lines = summary.records_ingested + summary.lines_skipped
        if not data_lines:
            return QualityCheckResult(
                check_name="malformed_lines",
                status=QualityStatus.FAIL,
                message="No lines to check",
            )

        skipped = summary.lines_skipped
        pct = skipped / data_lines * 100

        if skipped == 0:
            status = QualityStatus.PASS
            message = f"All {data_lines} lines parsed"
        elif pct <= MAX_SKIPPED_PCT:
            status = QualityStatus.WARN
            message = f"Skipped {skipped} malformed lines ({pct:.1f}%)"
        else:
            status = QualityStatus.FAIL
            message = f"Skipped {skipped} malformed lines ({pct:.1f}%, threshold: {MAX_SKIPPED_PCT}%)"

        return QualityCheckResult(
            check_name="malformed_lines",
            status=status,
            metric_value=pct,
            threshold=MAX_SKIPPED_PCT,
            message=message,
        )

    def _check_completeness(self, summary: RunSummary) -> QualityCheckResult:
        count = summary.records_ingested

        if count > 0:
            status = QualityStatus.PASS
            message = f"Ingested {count} records"
        else:
            status = QualityStatus.FAIL
            message = "No records were ingested"

        return QualityCheckResult(
            check_name="completeness",
            status=status,
            metric_value=count,
            threshold=1,
            message=message,
        )

    def _check_percentage_range(
        self, aggregator: Aggregator, name: str, attr: str
    ) -> QualityCheckResult:
        check_name = f"{name}_range"
        if not len(aggregator):
            return QualityCheckResult(
                check_name=check_name,
                status=QualityStatus.FAIL,
                message="No states to check",
            )

        out_of_range = [
            s.code for s in aggregator if not (0.0 <= getattr(s, attr) <= 100.0)
        ]

        if not out_of_range:
            status = QualityStatus.PASS
            message = f"All {len(aggregator)} state averages within [0, 100]%"
        else:
            status = QualityStatus.WARN
            message = f"Average {name} outside [0, 100]% for: {' '.join(out_of_range)}"

        return QualityCheckResult(
            check_name=check_name,
            status=status,
            metric_value=len(out_of_range),
            threshold=0,
            message=message,
        )
