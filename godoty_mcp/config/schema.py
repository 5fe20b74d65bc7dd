"""Configuration schema using Pydantic.

Persisted to ~/.godoty/config.json; every field can also be set from the
environment (``GODOTY_GODOT__URL``, ``GODOTY_LOGGING__LEVEL``, ...).
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings

from godoty_mcp import __version__


class GodotConnectionConfig(BaseModel):
    """Connection to the Godot editor bridge plugin."""
    url: str = "ws://127.0.0.1:6550"
    reconnect: bool = True
    reconnect_interval_ms: int = Field(default=2000, ge=0)
    # Ceiling for exponential backoff; unset keeps the interval fixed.
    max_reconnect_interval_ms: int | None = Field(default=None, ge=0)
    # Reject outstanding requests as soon as the socket goes away instead of waiting for their timeout.
    fail_pending_on_disconnect: bool = False


class ServerConfig(BaseModel):
    """Identity reported to MCP clients."""
    name: str = "godoty-mcp"
    version: str = __version__


class LoggingConfig(BaseModel):
    """Log sinks for the CLI."""
    level: str = "INFO"
    file: bool = False  # Also write ~/.godoty/logs/<name>.log


class Config(BaseSettings):
    """Root configuration for godoty_mcp."""
    godot: GodotConnectionConfig = Field(default_factory=GodotConnectionConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(
        env_prefix="GODOTY_",
        env_nested_delimiter="__"
    )
