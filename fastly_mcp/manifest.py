"""Fastly MCP manifest — tool definitions."""

from fastly_mcp.schemas import ServerManifest, ToolDefinition, ToolParameter

API_TOOL_NAME = "fastly_api"
CLI_TOOL_NAME = "fastly_cli"

HTTP_METHODS = ["GET", "POST", "PUT", "DELETE"]

_API_DESCRIPTION = (
    "Make requests to the Fastly API. Allows accessing all endpoints of the Fastly API "
    "with custom paths, methods and parameters.\n\n"
    "IMPORTANT USAGE NOTES FOR LLMs:\n"
    "1. When making multiple API calls, summarize the results between calls. "
    "The user doesn't see raw API responses.\n"
    "2. Base URL is automatically added - just provide the path (e.g. '/service').\n"
    "3. Authentication is handled automatically - no need to include API keys or know API keys.\n"
    "4. Common paths:\n"
    "   - List services: GET /service\n"
    "   - Get service details: GET /service/{service_id}\n"
    "   - Get domains: GET /service/{service_id}/version/{version}/domain\n"
    "   - Get backends: GET /service/{service_id}/version/{version}/backend\n"
    "   - Purge cache: POST /service/{service_id}/purge_all\n"
    "   - Get stats: GET /stats (with params: service_id, from, to)\n"
    "5. Always check status codes in responses. Status 200-299 indicates success.\n"
    "6. Include simple explanations of what you're doing and what the results mean "
    "before and after each API call.\n\n"
    "# Creating Fastly Compute Sites\n\n"
    "To create a Compute site, combine API calls and CLI commands. The API handles "
    "service creation and configuration, while the CLI handles the local build and "
    "deployment process.\n\n"
    "Follow these general steps:\n"
    '1. Create a new service using the API: POST /service with {"name": "My Site", "type": "wasm"}\n'
    "2. Initialize a local Compute project using the Fastly CLI\n"
    "3. Build the project using the appropriate build tools\n"
    "4. Deploy using the Fastly CLI with the service ID from step 1\n\n"
    "# COMMON PITFALLS TO AVOID:\n\n"
    "1. DO NOT use --name flag with fastly compute init (use -d -y flags instead)\n"
    "2. Fastly compute build creates the package archive AFTER the Wasm binary is built\n"
    "3. Deploy command needs -d flag to avoid hanging on interactive prompts\n"
    "4. NEVER attempt to extract or use the user's API key directly - auth is handled by the server\n"
    "5. To create a service from scratch, use API calls for configuration and the CLI for the local build\n"
    "6. Check current directory paths carefully before running commands\n"
    "7. Full URL paths aren't needed in API calls - just use the path portion (e.g. '/service')"
)

_CLI_DESCRIPTION = (
    "Execute Fastly CLI commands securely without exposing API keys.\n\n"
    "This tool runs Fastly CLI commands while the server handles authentication "
    "automatically. The LLM never sees or needs to handle the API key directly.\n\n"
    "USAGE EXAMPLES:\n"
    "1. Initialize a Compute project: fastly_cli('compute init --language javascript -d -y')\n"
    "2. Build a package: fastly_cli('compute build')\n"
    "3. Deploy a service: fastly_cli('compute deploy --service-id SERVICE_ID -d -y')\n\n"
    "COMMON COMMANDS:\n"
    "- compute init: Initialize a new Compute project\n"
    "- compute build: Build a Compute package\n"
    "- compute deploy: Deploy a Compute package\n"
    "- compute publish: Build and deploy in one step\n"
    "- whoami: Check authentication status\n\n"
    "SECURITY NOTE: Authentication is handled automatically. Never attempt to pass API keys in commands."
)

MANIFEST = ServerManifest(
    server_name="fastly-mcp",
    description=(
        "Access the Fastly API and the Fastly CLI. Credentials are injected by the "
        "server and are never visible to the client."
    ),
    tools=[
        ToolDefinition(
            name=API_TOOL_NAME,
            description=_API_DESCRIPTION,
            parameters=[
                ToolParameter(
                    name="path",
                    type="string",
                    description=(
                        "API path (e.g., '/service' or '/service/{service_id}/purge_all'). "
                        "Don't include base URL."
                    ),
                ),
                ToolParameter(
                    name="method",
                    type="string",
                    description="HTTP method (GET, POST, PUT, DELETE)",
                    enum=HTTP_METHODS,
                ),
                ToolParameter(
                    name="body",
                    type="object",
                    description="Request body for POST/PUT requests (optional). Will be JSON-encoded automatically.",
                    required=False,
                ),
                ToolParameter(
                    name="params",
                    type="object",
                    description="URL parameters to add to the request (optional). For filtering, pagination, etc.",
                    required=False,
                ),
            ],
        ),
        ToolDefinition(
            name=CLI_TOOL_NAME,
            description=_CLI_DESCRIPTION,
            parameters=[
                ToolParameter(
                    name="command",
                    type="string",
                    description="The Fastly CLI command to execute (without the 'fastly' prefix)",
                ),
                ToolParameter(
                    name="working_directory",
                    type="string",
                    description="Optional working directory for command execution",
                    required=False,
                ),
            ],
        ),
    ],
)
