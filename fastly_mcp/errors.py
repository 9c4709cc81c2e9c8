"""Exceptions raised below the dispatcher and turned into error envelopes there."""

from __future__ import annotations


class FastlyMcpError(Exception):
    """Base class for failures that are reported back to the calling client."""


class ToolValidationError(FastlyMcpError):
    """A required tool argument is missing or has the wrong shape."""


class ApiError(FastlyMcpError):
    """The HTTP exchange with the Fastly API could not be completed."""

    def __init__(self, message: str):
        super().__init__(f"Fastly API error: {message}")


class CliError(FastlyMcpError):
    """The Fastly CLI could not be started or exited with a failure status."""

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(f"Fastly CLI error: {message}")
        self.exit_code = exit_code
