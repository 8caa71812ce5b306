"""
Configuration for the MCP tool-call server.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .protocol import MCP_PROTOCOL_VERSION


class Settings(BaseSettings):
    """Server settings, read from MCP_* environment variables or .env."""

    model_config = SettingsConfigDict(
        env_prefix="MCP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server identity reported by initialize
    server_name: str = Field(default="mcp-toolcall", description="serverInfo.name")
    server_version: str = Field(default="0.1.0", description="serverInfo.version")
    protocol_version: str = Field(default=MCP_PROTOCOL_VERSION, description="Negotiated MCP schema version")

    # HTTP surface
    path: str = Field(default="/mcp", description="Route serving JSON-RPC requests")

    # Logging
    log_level: str = Field(default="INFO", description="Log level (DEBUG, INFO, WARNING, ERROR)")
    log_json: bool = Field(default=True, description="Render logs as JSON lines")

    # Tool calls
    validate_tool_arguments: bool = Field(
        default=True,
        description="Check tools/call arguments against the tool's parameter schema",
    )

    # Sessions
    session_idle_timeout_seconds: int = Field(
        default=3600,
        ge=1,
        description="Sessions idle for longer than this are pruned",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings."""
    return Settings()
