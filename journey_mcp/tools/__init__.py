"""MCP tool modules. Importing one registers its tools."""
