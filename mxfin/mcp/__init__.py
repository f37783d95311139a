"""mx-fin MCP server."""
