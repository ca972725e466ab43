"""MCP server configuration."""

from src.shared.config import BaseServiceSettings


class MCPServerSettings(BaseServiceSettings):
    """Settings specific to the Graph Visualizations MCP server."""

    service_name: str = "mcp_server"
    host: str = "0.0.0.0"
    port: int = 3001
    transport: str = "stdio"  # stdio | sse
    max_focus_depth: int = 5

    # Viewer links point at the REST gateway, not at this server
    base_url: str = "http://localhost:3000"

    class Config(BaseServiceSettings.Config):
        env_prefix = "MCP_"
