"""Dual-destination report sink (console + log file).

The sink installs two handlers on the root logger:

    - ``StreamHandler(sys.stdout)`` for the console
    - ``FileHandler(log_path, mode="w")`` for the combined log file

The log file is truncated when the sink is configured and appended to
for the rest of the run. Because the handlers sit on the root logger,
every record emitted through standard ``logging`` (not only report
blocks) reaches both destinations.

Severities:
    - :meth:`ReportSink.report` writes report lines at ``INFO``.
    - :meth:`ReportSink.diagnostic` writes soft, non-fatal findings
      (e.g. a reloaded record count mismatch) at ``WARNING``.

    Fatal errors never pass through the sink; they are exceptions,
    logged once by the runner's ``main()``.

Example:
    >>> from pathlib import Path
    >>> with configure_report_sink(Path("benchmark.txt")) as sink:
    ...     sink.report(["msgpack", "Serialization time: 3 ms"])
"""

import logging
import sys
from pathlib import Path
from types import TracebackType
from typing import Iterable

from core.errors import ArtifactIOError

REPORT_LOGGER_NAME: str = "serialization_benchmark.report"

LOG_FORMAT: str = "%(asctime)s [%(levelname)s] %(message)s"


class ReportSink:
    """Writes report blocks and diagnostics to console and log file.

    Args:
        handlers: Handlers to attach to the root logger. Ownership
            passes to the sink; :meth:`close` detaches and closes them.
        level: Root logger level while the sink is open.
    """

    def __init__(self, handlers: list[logging.Handler], level: int = logging.INFO) -> None:
        self._handlers: list[logging.Handler] = handlers
        self._root: logging.Logger = logging.getLogger()
        self._previous_level: int = self._root.level
        self._logger: logging.Logger = logging.getLogger(REPORT_LOGGER_NAME)
        self._closed: bool = False

        for handler in self._handlers:
            self._root.addHandler(handler)
        self._root.setLevel(level)
        self._logger.setLevel(level)

    def report(self, lines: Iterable[str]) -> None:
        """Write a report block, one log record per line."""
        for line in lines:
            self._logger.info(line)

    def diagnostic(self, message: str) -> None:
        """Write a soft diagnostic. Never interrupts the run."""
        self._logger.warning(message)

    def close(self) -> None:
        """Flush and detach all handlers. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        for handler in self._handlers:
            self._root.removeHandler(handler)
            handler.flush()
            handler.close()
        self._root.setLevel(self._previous_level)

    def __enter__(self) -> "ReportSink":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def configure_report_sink(log_path: Path, level: int = logging.INFO) -> ReportSink:
    """Create a sink writing to stdout and to a truncated log file.

    Args:
        log_path: Combined log file. Created or truncated.
        level: Minimum level written to both destinations.

    Returns:
        An open :class:`ReportSink`.

    Raises:
        ArtifactIOError: If the log file cannot be opened.
    """
    formatter: logging.Formatter = logging.Formatter(LOG_FORMAT)

    try:
        file_handler: logging.Handler = logging.FileHandler(
            log_path, mode="w", encoding="utf-8",
        )
    except OSError as exc:
        raise ArtifactIOError(codec="log", operation="open", path=log_path) from exc
    console_handler: logging.Handler = logging.StreamHandler(sys.stdout)

    for handler in (console_handler, file_handler):
        handler.setFormatter(formatter)
        handler.setLevel(level)

    return ReportSink(handlers=[console_handler, file_handler], level=level)
