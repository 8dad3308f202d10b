from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    app_name: str = "Workflow Overlay"

    # Links
    absolute_base_url: str = "http://localhost/"

    # YAML overlay configuration (labels, tab, comment limit)
    config_path: Optional[str] = None

    # Logging
    log_level: str = "INFO"
    log_dir: str = "/var/log/workflow-overlay"
    file_logging: bool = False

    model_config = SettingsConfigDict(
        env_prefix="WORKFLOW_OVERLAY_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"  # Allow extra env vars without raising validation errors
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
