"""Streaming per-state aggregation of climate observations."""

from collections.abc import Iterable, Iterator
from pathlib import Path

import structlog

from climatestats.exceptions import MalformedLineError
from climatestats.ingestion import parse_line, read_lines
from climatestats.models import IngestStats, Observation, StateAggregate

log = structlog.get_logger()


class Aggregator:
    """Folds observations into running statistics keyed by state code.

    States are kept in first-seen order, which is also the order they are
    reported in. Sums accumulate in encounter order, so a fixed input order
    always produces identical results.
    """

    def __init__(self) -> None:
        self._states: dict[str, StateAggregate] = {}

    def ingest(self, observation: Observation) -> None:
        state = self._states.get(observation.state_code)
        if state is None:
            self._states[observation.state_code] = StateAggregate.from_observation(observation)
        else:
            state.fold(observation)

    def _fold_line(self, line: str, **context: object) -> bool | None:
        """Parse and fold one line; None for blank, False for malformed."""
        if not line.strip():
            return None
        try:
            observation = parse_line(line)
        except MalformedLineError as e:
            log.debug("line_skipped", reason=e.reason, **context)
            return False
        self.ingest(observation)
        return True

    def ingest_line(self, line: str) -> bool:
        """Parse and fold a single line.

        Returns:
            True if the line was folded, False if it was blank or malformed
        """
        return bool(self._fold_line(line))

    def ingest_lines(self, lines: Iterable[str], source: str = "<stream>") -> IngestStats:
        """Fold a stream of lines, skipping any that do not parse.

        Args:
            lines: Raw TDV lines in encounter order
            source: Name used in logs and the returned stats

        Returns:
            Counters for the lines consumed
        """
        stats = IngestStats(source=source)
        for line in lines:
            stats.lines_read += 1
            folded = self._fold_line(line, source=source, line_number=stats.lines_read)
            if folded is None:
                stats.blank_lines += 1
            elif folded:
                stats.records_ingested += 1
            else:
                stats.lines_skipped += 1

        if stats.lines_skipped:
            log.warning(
                "source_ingested",
                source=source,
                records=stats.records_ingested,
                skipped=stats.lines_skipped,
            )
        else:
            log.info("source_ingested", source=source, records=stats.records_ingested)
        return stats

    def ingest_file(self, path: Path | str) -> IngestStats:
        """Fold every line of a TDV file.

        Raises:
            SourceUnavailableError: The file cannot be opened or read
        """
        return self.ingest_lines(read_lines(path), source=str(path))

    def merge(self, other: "Aggregator") -> None:
        """Merge another aggregator whose input came after this one's."""
        for code, partial in other._states.items():
            state = self._states.get(code)
            if state is None:
                self._states[code] = partial.model_copy()
            else:
                state.merge(partial)

    @property
    def states(self) -> list[StateAggregate]:
        return list(self._states.values())

    @property
    def codes(self) -> list[str]:
        return list(self._states)

    def get(self, code: str) -> StateAggregate | None:
        return self._states.get(code)

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, code: object) -> bool:
        return code in self._states

    def __iter__(self) -> Iterator[StateAggregate]:
        return iter(self._states.values())
