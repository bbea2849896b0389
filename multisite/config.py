"""
multisite Configuration
"""
from __future__ import annotations
from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application Configuration
    app_name: str = "multisite CMS"
    debug: bool = False
    environment: str = "development"  # "development", "production" or "test"
    log_level: str = "INFO"

    # Multi-site switch, read once at boot.
    # Unset means: off in the test environment, on everywhere else.
    # Tests that need sites turn it on explicitly.
    enable_multisite: Optional[bool] = None

    # YAML file holding the config table, the page tree and the sites
    data_path: str = "sites/config.yaml"

    # Response cache
    cache_ttl_seconds: int = 300

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 8000

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def multisite_enabled(self) -> bool:
        if self.enable_multisite is not None:
            return self.enable_multisite
        return self.environment != "test"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
