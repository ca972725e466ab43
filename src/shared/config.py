"""
Base configuration for the graph visualization services.

Uses Pydantic Settings for environment-based configuration.
Each service (REST gateway, MCP server) extends BaseServiceSettings
with its own prefix.
"""

from pydantic_settings import BaseSettings


class BaseServiceSettings(BaseSettings):
    """Base settings shared by the gateway and the MCP server."""

    service_name: str = "base"
    host: str = "0.0.0.0"
    port: int = 3000

    # Public URL used when building /view links; derived from port if empty
    base_url: str = ""

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def public_base_url(self) -> str:
        """Base URL for viewer links, falling back to localhost:<port>."""
        return (self.base_url or f"http://localhost:{self.port}").rstrip("/")
