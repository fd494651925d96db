from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Help desk configuration read from environment variables."""

    model_config = SettingsConfigDict(env_prefix="HELPDESK_", env_file=".env", case_sensitive=False)

    log_level: str = Field(default="INFO")
    log_format: str = Field(default="%(asctime)s %(levelname)s %(name)s %(message)s")
    log_file: str | None = Field(default=None)

    # Ticket store configuration
    store_path: str = Field(default="tickets.json")
    atomic_writes: bool = Field(default=False)
    default_actor: str = Field(default="System")

    # Observability configuration
    otel_enabled: bool = Field(default=False)
    otel_service_name: str = Field(default="helpdesk")
    otel_exporter_otlp_endpoint: str | None = Field(default=None)
    otel_exporter_otlp_headers: str | None = Field(default=None)


@lru_cache
def get_settings() -> Settings:
    """Return a cached instance of the help desk settings."""

    return Settings()
