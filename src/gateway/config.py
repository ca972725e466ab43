"""Gateway configuration."""

from src.shared.config import BaseServiceSettings


class GatewaySettings(BaseServiceSettings):
    """Settings specific to the FastAPI Gateway."""

    service_name: str = "gateway"
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: list[str] = ["*"]

    # Comma-separated list; empty means no authentication (development mode)
    api_keys: str = ""

    class Config(BaseServiceSettings.Config):
        env_prefix = "GATEWAY_"

    @property
    def api_key_set(self) -> set[str]:
        return {key.strip() for key in self.api_keys.split(",") if key.strip()}
