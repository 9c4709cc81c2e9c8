"""Fastly MCP server — stdio transport and process entry point."""

from __future__ import annotations

import asyncio
import sys

import click
import structlog
from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from fastly_mcp.config import Settings, get_settings
from fastly_mcp.diagnostics import configure_logging
from fastly_mcp.dispatcher import ToolDispatcher

logger = structlog.get_logger()


def create_server(dispatcher: ToolDispatcher, settings: Settings) -> Server:
    """Bind the dispatcher to the MCP ``tools/list`` and ``tools/call`` handlers."""
    server = Server(
        settings.server_name,
        version=settings.server_version,
        instructions=dispatcher.manifest.description,
    )

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return dispatcher.list_tools()

    # Presence checks live in the dispatcher so the client gets its messages,
    # not the SDK's JSON-Schema errors.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict) -> types.CallToolResult:
        return await dispatcher.call_tool(name, arguments)

    return server


# ---------------------------------------------------------------------------
# Process-level fault logging
# ---------------------------------------------------------------------------


def log_uncaught_exception(exc_type, exc, tb) -> None:
    logger.error("uncaught_exception", error=str(exc), exc_info=(exc_type, exc, tb))


def log_unhandled_async_fault(loop: asyncio.AbstractEventLoop, context: dict) -> None:
    exc = context.get("exception")
    logger.error(
        "unhandled_async_fault",
        message=context.get("message"),
        error=str(exc) if exc else None,
        exc_info=exc,
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


async def serve(settings: Settings) -> None:
    """Run the server on stdin/stdout until the client disconnects."""
    asyncio.get_running_loop().set_exception_handler(log_unhandled_async_fault)

    dispatcher = ToolDispatcher(settings)
    server = create_server(dispatcher, settings)
    try:
        logger.info("transport_connecting", transport="stdio")
        async with stdio_server() as (read_stream, write_stream):
            logger.info("server_running")
            await server.run(read_stream, write_stream, server.create_initialization_options())
    finally:
        await dispatcher.aclose()


@click.command()
@click.option(
    "--log-file",
    default=None,
    help="Diagnostic log path (default: fastly-mcp-debug.log in the working directory).",
)
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Read settings from this file instead of ./.env.",
)
def main(log_file: str | None, env_file: str | None):
    """Serve the Fastly API and CLI tools over MCP stdio."""
    settings = Settings(_env_file=env_file) if env_file else get_settings()
    if log_file:
        settings = settings.model_copy(update={"log_file": log_file})

    sink = configure_logging(settings.credential, settings.log_file)
    sys.excepthook = log_uncaught_exception

    logger.info("server_starting", server=settings.server_name, version=settings.server_version)
    logger.info("api_key_configured", configured=settings.credential.is_configured)

    exit_code = 0
    try:
        asyncio.run(serve(settings))
    except KeyboardInterrupt:
        logger.info("server_interrupted")
    except Exception as e:
        logger.error("server_fatal_error", error=str(e), exc_info=True)
        exit_code = 1
    finally:
        logger.info("server_stopped", exit_code=exit_code)
        sink.close()

    if exit_code:
        sys.exit(exit_code)
