# monitor/inventory/core/config.py
"""
Central configuration for the inventory client.

Environment variables override defaults. Named endpoints come from YAML
files (see ``monitor.inventory.core.clients.config``); the ``default_*``
settings describe a single fallback endpoint for setups without YAML.
"""
from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EndpointSettings(BaseModel):
    """Connection settings of one inventory endpoint (one credential set)."""

    entrypoint: str
    tenant: str | None = None
    username: str | None = None
    password: str | None = None
    token: str | None = None
    timeout: float = 30.0
    verify_ssl: bool = True


class Settings(BaseSettings):
    """Environment-driven settings with sensible defaults."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"
    log_json: bool = True

    # Config file paths (glob patterns)
    endpoints_config_paths: list[str] = Field(
        default_factory=lambda: ["config/endpoints.yaml"]
    )

    default_entrypoint: str = Field(
        default="",
        description="Base URL of the fallback endpoint (empty to disable)",
    )
    default_tenant: str | None = Field(default=None, description="Tenant header value")
    default_username: str | None = None
    default_password: str | None = None
    default_token: str | None = None

    http_timeout: float = Field(default=30.0, description="Per-request timeout in seconds")
    verify_ssl: bool = True

    def default_endpoint(self) -> EndpointSettings | None:
        if not self.default_entrypoint:
            return None
        return EndpointSettings(
            entrypoint=self.default_entrypoint,
            tenant=self.default_tenant,
            username=self.default_username,
            password=self.default_password,
            token=self.default_token,
            timeout=self.http_timeout,
            verify_ssl=self.verify_ssl,
        )


settings = Settings()
