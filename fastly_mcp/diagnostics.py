"""Diagnostic log channel.

Every structlog event is rendered to one JSON line and handed to a
``DiagnosticSink``. The sink appends the line to a persistent log file and
mirrors it to stderr (stdout carries the MCP framing). Writes happen on a
dedicated background thread, so a slow or failing disk never stalls a tool
call, and a failed write is dropped rather than raised.

Usage::

    sink = configure_logging(settings.credential, settings.log_file)
    logger = structlog.get_logger()
    logger.info("server_starting", version="0.1.0")
    ...
    sink.close()
"""

from __future__ import annotations

import queue
import sys
import threading
from typing import IO, Any

import structlog

from fastly_mcp.config import Credential


class DiagnosticSink:
    """Append-only, fire-and-forget line writer usable as a structlog logger."""

    def __init__(self, path: str | None, console: IO[str] | None = None):
        self._path = path
        self._console = console
        self._file: IO[str] | None = None
        self._queue: queue.SimpleQueue[str | None] = queue.SimpleQueue()
        self._closed = False
        self._thread = threading.Thread(
            target=self._drain, name="fastly-mcp-diagnostics", daemon=True
        )
        self._thread.start()

    # structlog calls the factory with the logger name; one sink serves all.
    def __call__(self, *args: Any) -> DiagnosticSink:
        return self

    def msg(self, message: str) -> None:
        """Queue one rendered line. Never blocks and never raises."""
        if not self._closed:
            self._queue.put(message)

    log = debug = info = warn = warning = msg
    fatal = failure = err = error = critical = exception = msg

    def close(self, timeout: float = 5.0) -> None:
        """Flush queued lines and stop the writer thread."""
        if self._closed:
            return
        self._closed = True
        self._queue.put(None)
        self._thread.join(timeout)

    # ------------------------------------------------------------------
    # Writer thread
    # ------------------------------------------------------------------

    def _drain(self) -> None:
        while True:
            line = self._queue.get()
            if line is None:
                break
            self._write(line)
        if self._file is not None:
            try:
                self._file.close()
            except OSError:
                pass
            self._file = None

    def _write(self, line: str) -> None:
        if self._path:
            try:
                if self._file is None:
                    self._file = open(self._path, "a", encoding="utf-8")
                self._file.write(line + "\n")
                self._file.flush()
            except OSError:
                self._file = None

        console = self._console if self._console is not None else sys.stderr
        try:
            console.write(line + "\n")
            console.flush()
        except (OSError, ValueError):
            pass


def redact_credential(credential: Credential):
    """Build a processor that masks the secret in every string field."""

    def _processor(logger: Any, method_name: str, event_dict: dict) -> dict:
        if not credential.is_configured:
            return event_dict
        secret = credential.reveal()
        for key, value in event_dict.items():
            if isinstance(value, str):
                event_dict[key] = credential.redact(value)
            elif isinstance(value, (dict, list, tuple)) and secret in str(value):
                event_dict[key] = credential.redact(str(value))
        return event_dict

    return _processor


def configure_logging(
    credential: Credential,
    log_file: str | None,
    console: IO[str] | None = None,
) -> DiagnosticSink:
    """Route all structlog output through a new ``DiagnosticSink``."""
    sink = DiagnosticSink(log_file, console=console)
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            redact_credential(credential),
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=sink,
        cache_logger_on_first_use=False,
    )
    return sink
