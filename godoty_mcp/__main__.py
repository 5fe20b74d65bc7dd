"""
Entry point for running godoty_mcp as a module: python -m godoty_mcp
"""

from godoty_mcp.cli.commands import app

if __name__ == "__main__":
    app()
