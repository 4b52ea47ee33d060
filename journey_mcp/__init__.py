"""Journey MCP server and CLI."""
