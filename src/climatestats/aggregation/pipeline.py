"""Multi-file ingestion into a single run-wide aggregate."""

import multiprocessing as mp
from collections.abc import Callable, Sequence
from pathlib import Path

import structlog

from climatestats.aggregation.aggregator import Aggregator
from climatestats.exceptions import SourceUnavailableError
from climatestats.ingestion import read_lines
from climatestats.logging_config import configure_logging
from climatestats.models import FileFailure, IngestStats, RunSummary

log = structlog.get_logger()


def _failure(e: SourceUnavailableError) -> FileFailure:
    return FileFailure(source=e.path, reason=e.reason, kind=e.kind)


def _aggregate_file(path: str) -> tuple[Aggregator, IngestStats | None, FileFailure | None]:
    """Build a partial aggregate for one file (runs in a worker process)."""
    partial = Aggregator()
    try:
        stats = partial.ingest_file(path)
    except SourceUnavailableError as e:
        return partial, None, _failure(e)
    return partial, stats, None


def aggregate_paths(
    paths: Sequence[Path | str],
    workers: int = 1,
    verbose: bool = False,
    start_method: str | None = None,
    on_open: Callable[[str], None] | None = None,
    on_failure: Callable[[FileFailure], None] | None = None,
) -> tuple[Aggregator, RunSummary]:
    """Ingest every file into one aggregate, in the order given.

    Statistics accumulate across all files; nothing resets between them. A
    file that cannot be read is recorded as a failure and the run continues.

    With workers > 1 each file is parsed into its own partial aggregate and
    the partials are merged back in path order. Counts and extrema match a
    sequential run exactly; floating sums are grouped per file and can differ
    in the last bits.

    Args:
        paths: TDV files to ingest
        workers: Number of worker processes (1 = sequential, in-process)
        verbose: Debug logging in worker processes
        start_method: multiprocessing start method for workers (platform default if None)
        on_open: Called with each source once it has been opened; sequential
            runs call it before the file's lines are read
        on_failure: Called with each open or read failure, in path order

    Returns:
        The run-wide aggregate and a summary of what was read
    """
    if workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers}")

    sources = [str(p) for p in paths]
    summary = RunSummary()
    log.info("run_started", files=len(sources), workers=workers)

    def record_failure(failure: FileFailure) -> None:
        summary.failures.append(failure)
        if on_failure is not None:
            on_failure(failure)

    aggregator = Aggregator()
    if workers == 1 or len(sources) < 2:
        for source in sources:
            try:
                lines = read_lines(source)
            except SourceUnavailableError as e:
                record_failure(_failure(e))
                continue
            if on_open is not None:
                on_open(source)
            try:
                summary.files.append(aggregator.ingest_lines(lines, source=source))
            except SourceUnavailableError as e:
                # Records folded before the failure stay in the aggregate
                record_failure(_failure(e))
    else:
        ctx = mp.get_context(start_method)
        with ctx.Pool(
            min(workers, len(sources)),
            initializer=configure_logging,
            initargs=(verbose,),
        ) as pool:
            results = pool.map(_aggregate_file, sources)

        for source, (partial, stats, failure) in zip(sources, results, strict=True):
            if on_open is not None and (failure is None or failure.kind == "read"):
                on_open(source)
            # Records read before a mid-file failure still count
            aggregator.merge(partial)
            if stats is not None:
                summary.files.append(stats)
            if failure is not None:
                record_failure(failure)

    log.info(
        "run_complete",
        files_read=summary.files_read,
        files_failed=len(summary.failures),
        records=summary.records_ingested,
        states=len(aggregator),
    )
    return aggregator, summary
