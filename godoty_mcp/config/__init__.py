"""Configuration module for godoty_mcp."""

from godoty_mcp.config.loader import load_config, save_config, get_config_path
from godoty_mcp.config.schema import Config, GodotConnectionConfig, LoggingConfig, ServerConfig
from godoty_mcp.config.access import get_config, clear_config_cache

__all__ = [
    "Config",
    "GodotConnectionConfig",
    "LoggingConfig",
    "ServerConfig",
    "load_config",
    "save_config",
    "get_config_path",
    "get_config",
    "clear_config_cache",
]
