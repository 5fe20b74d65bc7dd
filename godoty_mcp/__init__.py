"""
godoty_mcp - MCP tool server for a running Godot editor.
"""

from loguru import logger

__version__ = "1.0.0"

# Library code stays quiet until the CLI opts in; stdout belongs to MCP.
logger.disable("godoty_mcp")
