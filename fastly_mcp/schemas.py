"""Tool catalog, request and result schemas."""

from __future__ import annotations

import json
from typing import Any, Literal, Union

from mcp import types
from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Tool catalog
# ---------------------------------------------------------------------------


class ToolParameter(BaseModel):
    """Parameter definition for a tool."""

    name: str
    type: str  # string, integer, boolean, number, array, object
    description: str
    required: bool = True
    enum: list[str] | None = None

    def json_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": self.type, "description": self.description}
        if self.enum:
            schema["enum"] = list(self.enum)
        return schema


class ToolDefinition(BaseModel):
    """Definition of a single tool exposed over MCP."""

    name: str  # e.g. "fastly_api"
    description: str
    parameters: list[ToolParameter]

    def input_schema(self) -> dict[str, Any]:
        """Render the parameters as a JSON-Schema object contract."""
        return {
            "type": "object",
            "properties": {p.name: p.json_schema() for p in self.parameters},
            "required": [p.name for p in self.parameters if p.required],
        }

    def to_mcp_tool(self) -> types.Tool:
        return types.Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.input_schema(),
        )


class ServerManifest(BaseModel):
    """Manifest describing the server and the tools it advertises."""

    server_name: str
    description: str
    tools: list[ToolDefinition]

    def get_tool(self, name: str) -> ToolDefinition | None:
        for tool in self.tools:
            if tool.name == name:
                return tool
        return None


# ---------------------------------------------------------------------------
# Validated tool requests
# ---------------------------------------------------------------------------


class ApiCallRequest(BaseModel):
    """A Fastly API passthrough request."""

    tool: Literal["fastly_api"] = "fastly_api"
    path: str
    method: str
    body: Any = None
    params: dict[str, Any] | None = None


class CliCallRequest(BaseModel):
    """A Fastly CLI invocation."""

    tool: Literal["fastly_cli"] = "fastly_cli"
    command: str
    working_directory: str | None = None


ToolRequest = Union[ApiCallRequest, CliCallRequest]


# ---------------------------------------------------------------------------
# Executor results
# ---------------------------------------------------------------------------


class ApiResult(BaseModel):
    """Normalized HTTP response, serialized into the envelope text."""

    model_config = ConfigDict(populate_by_name=True)

    status: int
    status_text: str = Field(default="", alias="statusText")
    headers: dict[str, str] = Field(default_factory=dict)
    data: Any = None

    def to_text(self) -> str:
        return _dump(self.model_dump(by_alias=True))


class CliResult(BaseModel):
    """Trimmed output of a successful CLI run."""

    stdout: str = ""
    stderr: str = ""
    success: bool = True

    def to_text(self) -> str:
        return _dump(self.model_dump())


def _dump(payload: dict[str, Any]) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False, default=str)
