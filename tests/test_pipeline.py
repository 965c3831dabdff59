"""Tests for multi-file ingestion."""

from collections.abc import Iterator
from pathlib import Path

import pytest

from climatestats.aggregation import aggregate_paths, pipeline
from climatestats.exceptions import SourceUnavailableError
from climatestats.models import FileFailure

from conftest import tdv_line


@pytest.fixture
def file_a(tmp_path: Path) -> Path:
    path = tmp_path / "data_a.tdv"
    path.write_text(
        tdv_line(code="WA", timestamp_ms=1000, humidity=40.0, kelvin=280.0)
        + tdv_line(code="TN", timestamp_ms=2000, humidity=70.0, kelvin=290.0, snow=1.0)
        + "WA\tbroken\n"
        + tdv_line(code="WA", timestamp_ms=3000, humidity=60.0, kelvin=300.0)
    )
    return path


@pytest.fixture
def file_b(tmp_path: Path) -> Path:
    path = tmp_path / "data_b.tdv"
    path.write_text(
        tdv_line(code="TN", timestamp_ms=4000, humidity=30.0, kelvin=290.0, lightning=1.0)
        + tdv_line(code="CA", timestamp_ms=5000, humidity=90.0, kelvin=295.0)
        + tdv_line(code="WA", timestamp_ms=6000, humidity=50.0, kelvin=270.0)
    )
    return path


class TestAggregatePaths:
    def test_accumulates_across_files(self, file_a: Path, file_b: Path) -> None:
        aggregator, summary = aggregate_paths([file_a, file_b])

        assert aggregator.codes == ["WA", "TN", "CA"]
        wa = aggregator.get("WA")
        assert wa is not None
        assert wa.record_count == 3
        assert wa.min_temp_timestamp == 6
        assert wa.max_temp_timestamp == 3
        assert summary.files_read == 2
        assert summary.records_ingested == 6
        assert summary.lines_skipped == 1

    def test_matches_concatenated_file(self, file_a: Path, file_b: Path, tmp_path: Path) -> None:
        combined = tmp_path / "combined.tdv"
        combined.write_text(file_a.read_text() + file_b.read_text())

        separate, _ = aggregate_paths([file_a, file_b])
        together, _ = aggregate_paths([combined])

        assert [s.model_dump() for s in separate] == [s.model_dump() for s in together]

    def test_missing_file_does_not_stop_run(self, file_a: Path, tmp_path: Path) -> None:
        missing = tmp_path / "missing.tdv"
        aggregator, summary = aggregate_paths([missing, file_a])

        assert len(summary.failures) == 1
        assert summary.failures[0].source == str(missing)
        assert summary.files_read == 1
        assert aggregator.codes == ["WA", "TN"]

    def test_tie_across_files_keeps_earlier_file(self, file_a: Path, file_b: Path) -> None:
        # TN is 290 K in both files
        aggregator, _ = aggregate_paths([file_a, file_b])
        tn = aggregator.get("TN")
        assert tn is not None
        assert tn.max_temp_timestamp == 2
        assert tn.min_temp_timestamp == 2

    def test_parallel_matches_sequential(
        self, file_a: Path, file_b: Path, tmp_path: Path
    ) -> None:
        missing = tmp_path / "missing.tdv"
        paths = [file_a, missing, file_b]

        sequential, seq_summary = aggregate_paths(paths, workers=1)
        parallel, par_summary = aggregate_paths(paths, workers=3)

        assert parallel.codes == sequential.codes
        for code in sequential.codes:
            a, b = sequential.get(code), parallel.get(code)
            assert a is not None and b is not None
            assert a.record_count == b.record_count
            assert a.snow_count == b.snow_count
            assert a.lightning_count == b.lightning_count
            assert (a.max_temp, a.max_temp_timestamp) == (b.max_temp, b.max_temp_timestamp)
            assert (a.min_temp, a.min_temp_timestamp) == (b.min_temp, b.min_temp_timestamp)
            assert a.avg_temperature == pytest.approx(b.avg_temperature)
            assert a.avg_humidity == pytest.approx(b.avg_humidity)
        assert par_summary.failures == seq_summary.failures
        assert par_summary.records_ingested == seq_summary.records_ingested

    def test_undecodable_bytes_skipped_not_failed(self, tmp_path: Path) -> None:
        path = tmp_path / "data_latin.tdv"
        path.write_bytes(
            tdv_line(code="WA").encode()
            + tdv_line(code="WA").encode().replace(b"50.0", b"\xff\xfe")
        )

        aggregator, summary = aggregate_paths([path])

        assert summary.failures == []
        assert summary.lines_skipped == 1
        wa = aggregator.get("WA")
        assert wa is not None
        assert wa.record_count == 1

    def test_read_failure_keeps_earlier_records(
        self, file_b: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        flaky = tmp_path / "flaky.tdv"
        real_read_lines = pipeline.read_lines

        def read_lines(path: Path | str) -> Iterator[str]:
            if str(path) != str(flaky):
                return real_read_lines(path)

            def lines() -> Iterator[str]:
                yield tdv_line(code="NV", timestamp_ms=1000)
                raise SourceUnavailableError(
                    str(path), "read failed: Input/output error", kind="read"
                )

            return lines()

        monkeypatch.setattr(pipeline, "read_lines", read_lines)
        opened: list[str] = []
        failed: list[FileFailure] = []

        aggregator, summary = aggregate_paths(
            [flaky, file_b], on_open=opened.append, on_failure=failed.append
        )

        assert aggregator.codes == ["NV", "TN", "CA", "WA"]
        nv = aggregator.get("NV")
        assert nv is not None
        assert nv.record_count == 1
        assert summary.failures == failed
        assert [(f.source, f.kind) for f in failed] == [(str(flaky), "read")]
        assert opened == [str(flaky), str(file_b)]
        assert summary.files_read == 1

    def test_open_failure_not_reported_as_opened(self, file_a: Path, tmp_path: Path) -> None:
        missing = tmp_path / "missing.tdv"
        opened: list[str] = []
        failed: list[FileFailure] = []

        aggregate_paths([missing, file_a], on_open=opened.append, on_failure=failed.append)

        assert opened == [str(file_a)]
        assert [f.kind for f in failed] == ["open"]

    def test_spawned_workers_log_to_stderr(
        self, file_a: Path, file_b: Path, capfd: pytest.CaptureFixture[str]
    ) -> None:
        aggregator, _ = aggregate_paths([file_a, file_b], workers=2, start_method="spawn")

        captured = capfd.readouterr()
        assert aggregator.codes == ["WA", "TN", "CA"]
        # Per-file events are only logged inside the workers
        assert "source_ingested" not in captured.out
        assert "source_ingested" in captured.err
        assert "source_opened" not in captured.err

    def test_invalid_worker_count(self, file_a: Path) -> None:
        with pytest.raises(ValueError, match="workers"):
            aggregate_paths([file_a], workers=0)
