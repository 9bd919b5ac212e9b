"""Unit tests for infra.report_sink and infra.artifacts.

Tests cover:
    - Report lines duplicated to stdout and the log file
    - Log file truncation at configuration time
    - Standard logging records reaching the log file
    - Diagnostic severity
    - Handler cleanup and idempotent close
    - ArtifactIOError on unopenable paths
"""

import logging
from pathlib import Path

import pytest

from core.errors import ArtifactIOError
from infra.artifacts import artifact_path, read_artifact, write_artifact
from infra.report_sink import ReportSink, configure_report_sink


# ---------------------------------------------------------------------------
# Report Sink
# ---------------------------------------------------------------------------


class TestReportSink:
    """Tests for the console + file sink."""

    def test_report_goes_to_both_destinations(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        log_path: Path = tmp_path / "benchmark.txt"
        with configure_report_sink(log_path=log_path) as sink:
            sink.report(["MSGPACK", "Serialization time: 3 ms"])

        console: str = capsys.readouterr().out
        logged: str = log_path.read_text(encoding="utf-8")
        for text in (console, logged):
            assert "MSGPACK" in text
            assert "Serialization time: 3 ms" in text

    def test_one_line_per_entry(self, tmp_path: Path) -> None:
        log_path: Path = tmp_path / "benchmark.txt"
        with configure_report_sink(log_path=log_path) as sink:
            sink.report(["a", "b", "c"])
        assert len(log_path.read_text(encoding="utf-8").splitlines()) == 3

    def test_log_file_truncated_at_start(self, tmp_path: Path) -> None:
        log_path: Path = tmp_path / "benchmark.txt"
        log_path.write_text("stale content from a previous run\n", encoding="utf-8")
        with configure_report_sink(log_path=log_path) as sink:
            sink.report(["fresh"])
        logged: str = log_path.read_text(encoding="utf-8")
        assert "stale content" not in logged
        assert "fresh" in logged

    def test_standard_logging_is_duplicated(self, tmp_path: Path) -> None:
        log_path: Path = tmp_path / "benchmark.txt"
        with configure_report_sink(log_path=log_path):
            logging.getLogger("some.module").info("from elsewhere")
        assert "from elsewhere" in log_path.read_text(encoding="utf-8")

    def test_diagnostic_is_warning(self, tmp_path: Path) -> None:
        log_path: Path = tmp_path / "benchmark.txt"
        with configure_report_sink(log_path=log_path) as sink:
            sink.diagnostic("record count mismatch")
        logged: str = log_path.read_text(encoding="utf-8")
        assert "[WARNING] record count mismatch" in logged

    def test_close_detaches_handlers(self, tmp_path: Path) -> None:
        root: logging.Logger = logging.getLogger()
        before: list[logging.Handler] = list(root.handlers)
        level_before: int = root.level

        sink: ReportSink = configure_report_sink(log_path=tmp_path / "benchmark.txt")
        assert len(root.handlers) == len(before) + 2
        sink.close()
        sink.close()

        assert root.handlers == before
        assert root.level == level_before

    def test_nothing_written_after_close(self, tmp_path: Path) -> None:
        log_path: Path = tmp_path / "benchmark.txt"
        sink: ReportSink = configure_report_sink(log_path=log_path)
        sink.close()
        logging.getLogger("some.module").warning("late")
        assert "late" not in log_path.read_text(encoding="utf-8")

    def test_unopenable_log_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ArtifactIOError, match="log artifact open failed"):
            configure_report_sink(log_path=tmp_path / "missing" / "benchmark.txt")


# ---------------------------------------------------------------------------
# Artifacts
# ---------------------------------------------------------------------------


class TestArtifacts:
    """Tests for artifact persistence helpers."""

    def test_path_uses_codec_name(self, tmp_path: Path) -> None:
        assert artifact_path(output_dir=tmp_path, codec_name="json") == tmp_path / "json.txt"

    def test_write_then_read(self, tmp_path: Path) -> None:
        path: Path = tmp_path / "msgpack.txt"
        write_artifact(path=path, data=b"\x90\x01", codec_name="msgpack")
        assert read_artifact(path=path, codec_name="msgpack") == b"\x90\x01"

    def test_write_truncates(self, tmp_path: Path) -> None:
        path: Path = tmp_path / "xml.txt"
        write_artifact(path=path, data=b"a much longer first payload", codec_name="xml")
        write_artifact(path=path, data=b"short", codec_name="xml")
        assert path.read_bytes() == b"short"

    def test_write_failure_raises(self, tmp_path: Path) -> None:
        path: Path = tmp_path / "missing" / "json.txt"
        with pytest.raises(ArtifactIOError) as exc_info:
            write_artifact(path=path, data=b"[]", codec_name="json")
        assert exc_info.value.operation == "write"
        assert exc_info.value.codec == "json"
        assert exc_info.value.path == path

    def test_read_failure_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ArtifactIOError, match="json artifact read failed"):
            read_artifact(path=tmp_path / "absent.txt", codec_name="json")
