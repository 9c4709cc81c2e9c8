"""Tool registry and dispatcher.

Routes each MCP tool call by name to the API or CLI executor and folds the
outcome, success or failure, into a ``CallToolResult`` envelope. This is the
one place where exceptions from below are caught: the transport only ever
sees a well-formed envelope.
"""

from __future__ import annotations

from typing import Any

import pydantic
import structlog
from mcp import types

from fastly_mcp.api_client import FastlyApiClient
from fastly_mcp.cli_runner import FastlyCliRunner
from fastly_mcp.config import Settings
from fastly_mcp.errors import FastlyMcpError, ToolValidationError
from fastly_mcp.manifest import API_TOOL_NAME, CLI_TOOL_NAME, MANIFEST
from fastly_mcp.schemas import (
    ApiCallRequest,
    CliCallRequest,
    ServerManifest,
    ToolRequest,
)

logger = structlog.get_logger()


def _describe(exc: pydantic.ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)


def parse_request(name: str, arguments: dict[str, Any] | None) -> ToolRequest:
    """Validate raw tool arguments into a typed request.

    Raises:
        ToolValidationError: If a required argument is missing or malformed.
    """
    args = arguments or {}

    if name == API_TOOL_NAME:
        if not args.get("path") or not args.get("method"):
            raise ToolValidationError("path and method are required")
        model: type[pydantic.BaseModel] = ApiCallRequest
        fields = {
            "path": args["path"],
            "method": args["method"],
            "body": args.get("body"),
            "params": args.get("params") or None,
        }
    elif name == CLI_TOOL_NAME:
        if not args.get("command"):
            raise ToolValidationError("command is required")
        model = CliCallRequest
        fields = {
            "command": args["command"],
            "working_directory": args.get("working_directory") or None,
        }
    else:
        raise ToolValidationError(f"Unknown tool: {name}")

    try:
        return model(**fields)
    except pydantic.ValidationError as e:
        raise ToolValidationError(_describe(e)) from e


def text_result(text: str, is_error: bool = False) -> types.CallToolResult:
    """Wrap ``text`` in a single-item envelope."""
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text)],
        isError=is_error,
    )


class ToolDispatcher:
    """Protocol-facing registry of the Fastly tools."""

    def __init__(
        self,
        settings: Settings,
        api_client: FastlyApiClient | None = None,
        cli_runner: FastlyCliRunner | None = None,
        manifest: ServerManifest = MANIFEST,
    ):
        self._credential = settings.credential
        self.api = api_client or FastlyApiClient(settings)
        self.cli = cli_runner or FastlyCliRunner(settings)
        self.manifest = manifest

    def list_tools(self) -> list[types.Tool]:
        """Return the tool catalog in declaration order."""
        logger.info("list_tools", count=len(self.manifest.tools))
        return [tool.to_mcp_tool() for tool in self.manifest.tools]

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> types.CallToolResult:
        """Execute a tool call. Never raises."""
        logger.info("call_tool", tool=name)

        if self.manifest.get_tool(name) is None:
            logger.warning("unknown_tool", tool=name)
            return text_result(f"Unknown tool: {name}", is_error=True)

        try:
            request = parse_request(name, arguments)
            text = await self._execute(request)
        except Exception as e:
            message = self._credential.redact(str(e) or type(e).__name__)
            # Expected failures carry their own context; anything else is a bug.
            logger.error(
                "tool_execution_error",
                tool=name,
                error=message,
                exc_info=not isinstance(e, FastlyMcpError),
            )
            return text_result(f"Error: {message}", is_error=True)

        logger.info("tool_execution_complete", tool=name)
        return text_result(self._credential.redact(text))

    async def _execute(self, request: ToolRequest) -> str:
        if isinstance(request, ApiCallRequest):
            result = await self.api.execute(
                request.path, request.method, request.body, request.params
            )
        elif isinstance(request, CliCallRequest):
            result = await self.cli.execute(request.command, request.working_directory)
        else:
            raise ToolValidationError(f"Unsupported request: {type(request).__name__}")
        return result.to_text()

    async def aclose(self) -> None:
        await self.api.aclose()
