"""Line-oriented access to TDV files on disk."""

from collections.abc import Iterator
from pathlib import Path
from typing import TextIO

import structlog

from climatestats.exceptions import SourceUnavailableError

log = structlog.get_logger()


def read_lines(path: Path | str) -> Iterator[str]:
    """Open a TDV file and return an iterator over its lines.

    The file is opened immediately, so an open failure is raised by this call
    rather than on first iteration. Undecodable bytes are replaced rather than
    raised, so they surface later as malformed lines instead of aborting the
    file.

    Raises:
        SourceUnavailableError: The file cannot be opened (kind "open"); raised
            while iterating if a read fails part way through (kind "read"),
            lines already yielded stay yielded
    """
    path = Path(path)
    try:
        fh = path.open("r", encoding="utf-8", errors="replace")
    except OSError as e:
        log.error("source_open_failed", source=str(path), error=e.strerror or str(e))
        raise SourceUnavailableError(str(path), e.strerror or str(e), kind="open") from e

    log.debug("source_opened", source=str(path))
    return _iter_lines(fh, str(path))


def _iter_lines(fh: TextIO, source: str) -> Iterator[str]:
    with fh:
        try:
            yield from fh
        except OSError as e:
            log.error("source_read_failed", source=source, error=e.strerror or str(e))
            raise SourceUnavailableError(
                source, f"read failed: {e.strerror or e}", kind="read"
            ) from e
