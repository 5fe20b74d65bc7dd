"""Command-line interface for godoty_mcp."""
