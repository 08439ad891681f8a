"""Application settings for the room coordinator runtime and tests."""

from __future__ import annotations

from pydantic import Field
from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Typed settings loaded from environment variables or explicit kwargs."""

    roomcoord_app_env: str = "dev"
    roomcoord_app_host: str = "127.0.0.1"
    roomcoord_app_port: int = Field(default=8080, ge=1)
    roomcoord_log_level: str = "INFO"
    roomcoord_cors_allow_origins: str = "*"

    roomcoord_default_room_id: str = "main"
    roomcoord_min_players: int = Field(default=2, ge=2)
    roomcoord_start_grace_seconds: float = Field(default=3.0, ge=0)

    roomcoord_heartbeat_interval_seconds: float = Field(default=30.0, gt=0)
    roomcoord_heartbeat_pong_timeout_seconds: float = Field(default=10.0, gt=0)
    roomcoord_heartbeat_max_missed_pongs: int = Field(default=2, ge=1)

    @model_validator(mode="after")
    def validate_heartbeat_window(self) -> "Settings":
        """Ensure a pong can arrive before the next ping is due."""
        if self.roomcoord_heartbeat_pong_timeout_seconds >= self.roomcoord_heartbeat_interval_seconds:
            raise ValueError(
                "ROOMCOORD_HEARTBEAT_PONG_TIMEOUT_SECONDS must be less than "
                "ROOMCOORD_HEARTBEAT_INTERVAL_SECONDS"
            )
        return self

    @property
    def cors_allow_origins(self) -> list[str]:
        return [origin.strip() for origin in self.roomcoord_cors_allow_origins.split(",") if origin.strip()]


def load_settings() -> Settings:
    """Load settings from process environment."""
    return Settings()
