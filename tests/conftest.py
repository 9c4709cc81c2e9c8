"""Shared test fixtures for the fastly-mcp test suite.

Provides settings with a known fake credential, an API client wired to an
``httpx.MockTransport`` and a fake shell runner, so nothing here touches the
network or spawns the real Fastly CLI.
"""

from __future__ import annotations

import httpx
import pytest

from fastly_mcp.api_client import FastlyApiClient
from fastly_mcp.cli_runner import FastlyCliRunner, ProcessOutput
from fastly_mcp.config import Settings

TEST_API_KEY = "test-fastly-key-0123456789"


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture
def api_key():
    return TEST_API_KEY


@pytest.fixture
def settings(api_key):
    """Settings with a fake credential, ignoring any local .env file."""
    return Settings(_env_file=None, fastly_api_key=api_key)


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


@pytest.fixture
def make_api_client(settings):
    """Factory for a ``FastlyApiClient`` backed by a mock transport.

    Usage::

        client = make_api_client(lambda request: httpx.Response(200, json={}))
    """

    def _make(handler) -> FastlyApiClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return FastlyApiClient(settings, client=http)

    return _make


@pytest.fixture
def recorded_requests():
    """List that recording handlers append outbound requests to."""
    return []


@pytest.fixture
def ok_handler(recorded_requests):
    """Mock responder returning ``{"ok": true}`` and recording each request."""

    def _handler(request: httpx.Request) -> httpx.Response:
        recorded_requests.append(request)
        return httpx.Response(200, json={"ok": True})

    return _handler


# ---------------------------------------------------------------------------
# Subprocess
# ---------------------------------------------------------------------------


class FakeShell:
    """Stand-in for ``run_shell`` that records calls and returns canned output."""

    def __init__(self, output: ProcessOutput | None = None, error: Exception | None = None):
        self.output = output or ProcessOutput(stdout="", stderr="", exit_code=0)
        self.error = error
        self.calls: list[tuple[str, str | None]] = []

    async def __call__(self, command: str, cwd: str | None = None) -> ProcessOutput:
        self.calls.append((command, cwd))
        if self.error is not None:
            raise self.error
        return self.output


@pytest.fixture
def make_cli_runner(settings):
    """Factory for a ``FastlyCliRunner`` with a ``FakeShell`` runner.

    Returns ``(runner, shell)`` so tests can inspect the recorded calls.
    """

    def _make(stdout: str = "", stderr: str = "", exit_code: int = 0, error: Exception | None = None):
        shell = FakeShell(ProcessOutput(stdout=stdout, stderr=stderr, exit_code=exit_code), error=error)
        return FastlyCliRunner(settings, runner=shell), shell

    return _make
