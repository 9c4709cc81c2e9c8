"""MCP bridge to the Fastly API and the Fastly CLI."""
