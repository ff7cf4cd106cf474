from typing import Any, Dict, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from core.errors import ConfigError


class Settings(BaseSettings):
    host: str = "0.0.0.0"
    port: int = 8080

    # Cloud Foundry injects bound services as JSON keyed by service label
    vcap_services: Optional[Dict[str, Any]] = None
    vcap_local_file: str = "vcap-local.json"
    service_label: str = "compose-for-scylladb"

    static_dir: str = "public"

    log_level: str = "INFO"
    log_file: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


def get_settings() -> Settings:
    try:
        return Settings()
    except ValueError as e:
        # pydantic's ValidationError and the settings JSON errors are both ValueErrors
        raise ConfigError(f"Invalid configuration: {e}") from e
