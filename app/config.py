"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./ratings.db",
        description="Database connection URL used by SQLAlchemy to store ratings",
        min_length=1,
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed to call the API from a browser",
    )

    rabbitmq_host: str = Field(default="localhost", min_length=1)
    rabbitmq_port: int = Field(default=5672, gt=0)
    rabbitmq_username: str = Field(default="guest")
    rabbitmq_password: str = Field(default="guest")
    rabbitmq_virtual_host: str = Field(default="/")
    rabbitmq_queue_name: str = Field(
        default="rating-notifications",
        description="Durable queue carrying rating notifications",
        min_length=1,
    )
    rabbitmq_heartbeat: int = Field(default=60, ge=0)

    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL used by the shared notification store",
    )
    redis_key_prefix: str = Field(default="notifications", min_length=1)
    notification_retention_days: int = Field(
        default=7,
        description="Days before an idle subject's pending notifications expire",
        gt=0,
    )

    notification_store_backend: Literal["redis", "memory"] = Field(
        default="redis",
        description="Backend holding pending notifications until they are polled",
    )
    notification_transport: Literal["rabbitmq", "http"] = Field(
        default="rabbitmq",
        description="Transport used by the rating side to publish notifications",
    )
    notification_service_base_url: str = Field(
        default="http://localhost:8000",
        description="Base URL of the internal notification ingress (http transport)",
    )
    notification_http_timeout: float = Field(default=5.0, gt=0)

    notification_consumer_enabled: bool = Field(
        default=True,
        description="Run the broker consumer inside the API process",
    )
    consumer_reconnect_delay: float = Field(default=5.0, ge=0)
    consumer_inactivity_timeout: float = Field(default=1.0, gt=0)

    @model_validator(mode="after")
    def _validate_http_transport(self) -> "Settings":
        if self.notification_transport == "http" and not self.notification_service_base_url:
            raise ValueError(
                "NOTIFICATION_SERVICE_BASE_URL is required when NOTIFICATION_TRANSPORT is 'http'"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
