"""Unit tests for timestamped CLI output."""

import io
import re

import pytest

from pkgscope import output


@pytest.fixture
def stream(monkeypatch):
    """Route output to a StringIO with fresh module state."""
    buffer = io.StringIO()
    monkeypatch.setattr(output, "_state", output._OutputState(stream=buffer))
    return buffer


TIMESTAMP = r"\d{2}:\d{2}\.\d{2}"


class TestOutput:
    def test_timestamp_format(self, stream):
        assert re.fullmatch(TIMESTAMP, output.format_timestamp())

    def test_init_timer_switches_stream(self, stream, capsys):
        output.init_timer()
        output.log("to stdout")
        assert "to stdout" in capsys.readouterr().out
        assert stream.getvalue() == ""

    def test_log_phase_and_detail(self, stream):
        output.log_phase(1, 2, "Loading metadata...")
        output.log_detail("Package: foo-1.0")
        lines = stream.getvalue().splitlines()
        assert re.fullmatch(TIMESTAMP + r" \[1/2\] Loading metadata\.\.\.", lines[0])
        assert lines[1].endswith("      Package: foo-1.0")

    def test_verbose_only_suppressed(self, stream):
        output.set_verbose(False)
        output.log("hidden", verbose_only=True)
        output.log_phase(1, 1, "hidden", verbose_only=True)
        output.log("shown")
        assert stream.getvalue().count("\n") == 1
        assert "shown" in stream.getvalue()

    def test_error_and_warning(self, stream):
        output.log_error("boom")
        output.log_warning("careful")
        text = stream.getvalue()
        assert "ERROR: boom" in text
        assert "WARNING: careful" in text

    def test_header(self, stream):
        output.log_header("pkgscope", "0.1.0")
        assert "pkgscope v0.1.0" in stream.getvalue()

    @pytest.mark.parametrize(
        "counts,expected",
        [
            ((4, 1, 12), "Resolved foo-1.0: 4 dependencies, 1 tool, 12 files"),
            ((1, 0, 1), "Resolved foo-1.0: 1 dependency, 0 tools, 1 file"),
        ],
    )
    def test_summary(self, stream, counts, expected):
        output.log_summary("foo", "1.0", *counts)
        assert stream.getvalue().rstrip("\n").endswith(expected)


class TestTimedLogger:
    def test_logs_done_on_success(self, stream):
        with output.TimedLogger("Resolving package", phase=(2, 2)) as timer:
            timer.detail("3 files")
        lines = stream.getvalue().splitlines()
        assert "[2/2] Resolving package..." in lines[0]
        assert "3 files" in lines[1]
        assert re.search(r"Done \(\d+\.\d{2}s\)", lines[2])

    def test_no_done_on_failure(self, stream):
        with pytest.raises(RuntimeError):
            with output.TimedLogger("Scanning"):
                raise RuntimeError("fail")
        assert "Scanning..." in stream.getvalue()
        assert "Done" not in stream.getvalue()

    def test_verbose_only(self, stream):
        output.set_verbose(False)
        with output.TimedLogger("Quiet", verbose_only=True) as timer:
            timer.detail("nothing")
        assert stream.getvalue() == ""
