"""Application settings loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Reclaim recovery server configuration."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Server
    # Loopback by default; there is no auth layer in front of the tools.
    reclaim_host: str = "127.0.0.1"
    reclaim_port: int = 8001
    reclaim_log_level: str = "info"
    # Non-loopback binds are refused unless this is set true.
    reclaim_allow_insecure_bind: bool = False

    # Metrics defaults
    default_currency: str = "USD"
    projection_horizons: list[int] = [7, 30, 90, 365]


def get_settings() -> Settings:
    """Create and return a Settings instance."""
    return Settings()
