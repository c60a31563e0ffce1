"""
Structured console logging for checks and the API server.

Lines are timestamped, coloured and tagged with the module context
and, inside a worker attempt, the id of the job being checked.
Set ``WRITE_TO_FILE=true`` to also copy each check's lines into a
file under ``.logs/``.

Timers, the job tag and the log-file handle live in
``contextvars`` so concurrent checks keep separate state.
"""

from __future__ import annotations

import contextlib
import contextvars
import io
import os
import pathlib
import re
import sys
import time
from collections.abc import Iterator
from datetime import UTC, datetime

_timers_var: contextvars.ContextVar[dict[str, tuple[float, str]] | None] = contextvars.ContextVar(
    "_timers_var", default=None
)
_job_var: contextvars.ContextVar[str | None] = contextvars.ContextVar("_job_var", default=None)
_log_file_var: contextvars.ContextVar[io.TextIOWrapper | None] = contextvars.ContextVar("_log_file_var", default=None)

_ANSI = re.compile(r"\033\[[0-9;]*m")

_RESET = "\033[0m"
_BOLD = "\033[1m"
_DIM = "\033[2m"
_GRAY = "\033[90m"
_RED = "\033[31m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_BLUE = "\033[34m"
_MAGENTA = "\033[35m"
_CYAN = "\033[36m"

# level -> (colour, symbol)
_LEVELS: dict[str, tuple[str, str]] = {
    "info": (_CYAN, "ℹ"),
    "success": (_GREEN, "✓"),
    "warn": (_YELLOW, "⚠"),
    "error": (_RED, "✗"),
    "debug": (_GRAY, "•"),
    "timing": (_MAGENTA, "⏱"),
}


def _paint(colour: str, text: str) -> str:
    return f"{colour}{text}{_RESET}"


# ============================================================================
# Per-check log files
# ============================================================================


def _file_logging_enabled() -> bool:
    return os.environ.get("WRITE_TO_FILE", "").lower() == "true"


def start_log_file(domain: str) -> str | None:
    """Open a log file for the check of *domain*.

    Returns:
        Path of the new file, or ``None`` when file logging is
        off or the file cannot be created.
    """
    if not _file_logging_enabled():
        return None
    end_log_file()

    now = datetime.now(UTC)
    safe = re.sub(r"[^A-Za-z0-9.-]", "_", domain.removeprefix("www."))[:50]
    path = pathlib.Path.cwd() / ".logs" / f"{safe}_{now:%Y-%m-%d_%H-%M-%S}.log"
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        stream = open(path, "a", encoding="utf-8")  # noqa: SIM115
    except OSError as exc:
        print(_paint(_RED, f"✗ [Logger] Cannot open log file {path}: {exc}"), file=sys.stderr)
        return None

    stream.write(f"{'=' * 80}\n  Privacy check of {domain}\n  Started {now.isoformat()}\n{'=' * 80}\n")
    _log_file_var.set(stream)
    return str(path)


def end_log_file() -> None:
    """Close the current check's log file, if one is open."""
    stream = _log_file_var.get()
    if stream is None:
        return
    _log_file_var.set(None)
    try:
        stream.close()
    except OSError:
        print(_paint(_YELLOW, "⚠ [Logger] Failed to close log file"), file=sys.stderr)


@contextlib.contextmanager
def job_scope(job_id: str, domain: str) -> Iterator[str | None]:
    """Tag log lines with *job_id* and open a log file for *domain*.

    Yields the log file path, or ``None`` when file logging is off.
    """
    token = _job_var.set(job_id)
    try:
        yield start_log_file(domain)
    finally:
        end_log_file()
        _job_var.reset(token)


# ============================================================================
# Formatting
# ============================================================================


def _timestamp() -> str:
    now = datetime.now(UTC)
    return f"{now:%H:%M:%S}.{now.microsecond // 1000:03d}"


def _format_duration(ms: float) -> str:
    if ms < 1000:
        return f"{int(ms)}ms"
    if ms < 60_000:
        return f"{ms / 1000:.2f}s"
    return f"{int(ms // 60_000)}m {(ms % 60_000) / 1000:.1f}s"


def _format_value(value: object) -> str:
    if value is None or isinstance(value, bool):
        colour = _DIM if value is None else (_GREEN if value else _RED)
        return _paint(colour, str(value))
    if isinstance(value, (int, float)):
        return _paint(_YELLOW, str(value))
    if isinstance(value, str):
        shown = value if len(value) <= 200 else value[:197] + "..."
        return _paint(_GREEN, f'"{shown}"')
    if isinstance(value, (list, tuple, set)):
        return _paint(_CYAN, f"[{len(value)} items]")
    if isinstance(value, dict):
        return _paint(_CYAN, f"{{{len(value)} keys}}")
    return str(value)


# ============================================================================
# Logger
# ============================================================================


class Logger:
    """Logger that prefixes every line with a module context."""

    def __init__(self, context: str = "Server") -> None:
        self._context = context

    def _emit(self, line: str) -> None:
        print(line, file=sys.stderr)
        stream = _log_file_var.get()
        if stream is not None:
            stream.write(_ANSI.sub("", line) + "\n")
            stream.flush()

    def _log(self, level: str, message: str, data: dict[str, object] | None = None) -> None:
        colour, symbol = _LEVELS.get(level, _LEVELS["info"])
        parts = [_paint(_GRAY, f"[{_timestamp()}]"), _paint(colour, symbol), _paint(_BOLD, f"[{self._context}]")]
        job_id = _job_var.get()
        if job_id:
            parts.append(_paint(_DIM, f"job={job_id[:8]}"))
        parts.append(message)
        if data:
            parts.extend(f"{_paint(_DIM, f'{key}=')}{_format_value(value)}" for key, value in data.items())
        self._emit(" ".join(parts))

    def info(self, message: str, data: dict[str, object] | None = None) -> None:
        self._log("info", message, data)

    def success(self, message: str, data: dict[str, object] | None = None) -> None:
        self._log("success", message, data)

    def warn(self, message: str, data: dict[str, object] | None = None) -> None:
        self._log("warn", message, data)

    def error(self, message: str, data: dict[str, object] | None = None) -> None:
        self._log("error", message, data)

    def debug(self, message: str, data: dict[str, object] | None = None) -> None:
        self._log("debug", message, data)

    def start_timer(self, label: str) -> None:
        """Start the timer *label* for the current task."""
        timers = _timers_var.get()
        if timers is None:
            timers = {}
            _timers_var.set(timers)
        timers[f"{self._context}:{label}"] = (time.monotonic() * 1000, _timestamp())
        self._log("timing", f"Starting: {label}")

    def end_timer(self, label: str, message: str | None = None) -> float:
        """Stop the timer *label* and log how long it ran.

        Returns:
            The elapsed milliseconds, or ``0.0`` if the timer was
            never started.
        """
        entry = (_timers_var.get() or {}).pop(f"{self._context}:{label}", None)
        if entry is None:
            self.warn(f'Timer "{label}" was not started')
            return 0.0
        started_ms, started_at = entry
        elapsed = time.monotonic() * 1000 - started_ms
        took = _paint(_MAGENTA, _format_duration(elapsed))
        self._log("timing", f"{message or f'Completed: {label}'} took {took} (started {started_at})")
        return elapsed

    def section(self, title: str) -> None:
        """Print a banner line with *title*."""
        rule = _paint(_BLUE, "─" * 60)
        for line in ("", rule, _paint(_BLUE + _BOLD, f"  {title}"), rule, ""):
            self._emit(line)


def create_logger(context: str) -> Logger:
    """Create a logger for a specific module."""
    return Logger(context)
