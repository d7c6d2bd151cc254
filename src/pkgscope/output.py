"""
Console output for the pkgscope command line.

Every line is prefixed with the time elapsed since the CLI started, as
MM:SS.cc, so a slow glob over a large package root stands out:

    00:00.01 pkgscope v0.1.0
    00:00.01 [1/2] Loading metadata...
    00:00.02       Package: foo-1.2.0
    00:00.02       Done (0.01s)
    00:00.02 [2/2] Resolving package...
    00:00.09       Done (0.07s)
    00:00.09 Resolved foo-1.2.0: 4 dependencies, 1 tool, 12 files

Library modules report through ``logging``; only the CLI writes here.
"""

import sys
import time
from dataclasses import dataclass, field
from types import TracebackType
from typing import Optional, TextIO


@dataclass
class _OutputState:
    started: float = field(default_factory=time.monotonic)
    stream: Optional[TextIO] = None  # None means the current sys.stdout
    verbose: bool = True


_state = _OutputState()


def init_timer(output_stream: Optional[TextIO] = None) -> None:
    """
    Restart the elapsed-time clock.

    Args:
        output_stream: Stream for all further output (defaults to sys.stdout)
    """
    _state.started = time.monotonic()
    _state.stream = output_stream


def set_verbose(verbose: bool) -> None:
    """Show (True) or hide (False) messages marked verbose_only."""
    _state.verbose = verbose


def get_elapsed() -> float:
    """Seconds since init_timer (or module import)."""
    return time.monotonic() - _state.started


def format_timestamp() -> str:
    minutes, seconds = divmod(get_elapsed(), 60)
    return f"{int(minutes):02d}:{seconds:05.2f}"


def _emit(message: str, verbose_only: bool = False) -> None:
    if verbose_only and not _state.verbose:
        return
    stream = _state.stream if _state.stream is not None else sys.stdout
    stream.write(f"{format_timestamp()} {message}\n")
    stream.flush()


def log(message: str, verbose_only: bool = False) -> None:
    """Write one timestamped line."""
    _emit(message, verbose_only)


def log_phase(phase: int, total: int, message: str, verbose_only: bool = False) -> None:
    """Write a "[phase/total] message" line."""
    _emit(f"[{phase}/{total}] {message}", verbose_only)


def log_detail(message: str, indent: int = 6, verbose_only: bool = False) -> None:
    _emit(" " * indent + message, verbose_only)


def log_header(title: str, version: str) -> None:
    _emit(f"{title} v{version}")


def log_error(message: str) -> None:
    _emit(f"ERROR: {message}")


def log_warning(message: str) -> None:
    _emit(f"WARNING: {message}")


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def log_summary(name: str, version: str, dependencies: int, tools: int, files: int, verbose_only: bool = False) -> None:
    """Write the one-line result of a resolution.

    Example:
        Resolved foo-1.2.0: 4 dependencies, 1 tool, 12 files
    """
    counts = ", ".join(
        [
            f"{dependencies} dependency" if dependencies == 1 else f"{dependencies} dependencies",
            _plural(tools, "tool"),
            _plural(files, "file"),
        ]
    )
    _emit(f"Resolved {name}-{version}: {counts}", verbose_only)


class TimedLogger:
    """
    Announce a phase, then report how long it took.

    Usage:
        with TimedLogger("Resolving package", phase=(2, 2)) as timer:
            descriptor = assemble(...)
            timer.detail(f"{len(descriptor.files)} files")
        # "Done (0.07s)" is written only if the block did not raise
    """

    def __init__(self, operation: str, phase: Optional[tuple[int, int]] = None, verbose_only: bool = False):
        self.operation = operation
        self.phase = phase
        self.verbose_only = verbose_only
        self.start_time = 0.0

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.start_time

    def __enter__(self) -> "TimedLogger":
        self.start_time = time.monotonic()
        if self.phase is None:
            log(f"{self.operation}...", self.verbose_only)
        else:
            log_phase(*self.phase, f"{self.operation}...", verbose_only=self.verbose_only)
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        if exc_type is None:
            self.detail(f"Done ({self.elapsed:.2f}s)")

    def detail(self, message: str) -> None:
        """Write an indented line belonging to this phase."""
        log_detail(message, verbose_only=self.verbose_only)
