"""Tests for the MCP binding and the process entry point."""

from __future__ import annotations

import asyncio
import sys
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from click.testing import CliRunner
from mcp import types

from fastly_mcp.dispatcher import ToolDispatcher
from fastly_mcp.server import create_server, log_unhandled_async_fault, main


@pytest.fixture
def server(settings, make_cli_runner):
    runner, _ = make_cli_runner(stdout="authenticated\n")
    dispatcher = ToolDispatcher(settings, cli_runner=runner)
    return create_server(dispatcher, settings)


def _unwrap(response):
    return getattr(response, "root", response)


# ---------------------------------------------------------------------------
# MCP handlers
# ---------------------------------------------------------------------------


def test_server_identity(server, settings):
    assert server.name == settings.server_name
    assert types.ListToolsRequest in server.request_handlers
    assert types.CallToolRequest in server.request_handlers


@pytest.mark.asyncio
async def test_list_tools_handler(server):
    handler = server.request_handlers[types.ListToolsRequest]

    result = _unwrap(await handler(types.ListToolsRequest(method="tools/list")))

    assert [t.name for t in result.tools] == ["fastly_api", "fastly_cli"]


@pytest.mark.asyncio
async def test_call_tool_handler_returns_dispatcher_envelope(server):
    handler = server.request_handlers[types.CallToolRequest]
    request = types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name="fastly_cli", arguments={"command": "whoami"}),
    )

    result = _unwrap(await handler(request))

    assert result.isError is False
    assert '"stdout": "authenticated"' in result.content[0].text


@pytest.mark.asyncio
async def test_call_tool_handler_uses_dispatcher_validation(server):
    handler = server.request_handlers[types.CallToolRequest]
    request = types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name="fastly_api", arguments={"path": "/service"}),
    )

    result = _unwrap(await handler(request))

    assert result.isError is True
    assert result.content[0].text == "Error: path and method are required"


# ---------------------------------------------------------------------------
# Fault logging
# ---------------------------------------------------------------------------


def test_unhandled_async_fault_is_logged_not_raised():
    loop = MagicMock(spec=asyncio.AbstractEventLoop)

    with patch("fastly_mcp.server.logger") as mock_logger:
        log_unhandled_async_fault(loop, {"message": "Task exception was never retrieved", "exception": ValueError("x")})

    mock_logger.error.assert_called_once()
    assert mock_logger.error.call_args.args[0] == "unhandled_async_fault"


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


@pytest.fixture
def entry_patches(monkeypatch, settings):
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    sink = MagicMock()
    with patch("fastly_mcp.server.get_settings", return_value=settings), patch(
        "fastly_mcp.server.configure_logging", return_value=sink
    ) as configure:
        yield configure, sink


def test_main_runs_server(entry_patches):
    configure, sink = entry_patches

    with patch("fastly_mcp.server.serve", new=AsyncMock()) as serve:
        result = CliRunner().invoke(main, [])

    assert result.exit_code == 0
    serve.assert_awaited_once()
    sink.close.assert_called_once()


def test_main_log_file_option(entry_patches):
    configure, _ = entry_patches

    with patch("fastly_mcp.server.serve", new=AsyncMock()):
        CliRunner().invoke(main, ["--log-file", "custom.log"])

    assert configure.call_args.args[1] == "custom.log"


def test_main_fatal_startup_exits_nonzero(entry_patches):
    _, sink = entry_patches

    with patch("fastly_mcp.server.serve", new=AsyncMock(side_effect=RuntimeError("stdio unavailable"))):
        result = CliRunner().invoke(main, [])

    assert result.exit_code == 1
    sink.close.assert_called_once()
