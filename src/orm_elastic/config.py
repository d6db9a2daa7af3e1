"""Configuration management."""
from functools import lru_cache
from typing import List, Optional, Tuple

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ElasticSettings(BaseSettings):
    """Connection and indexing settings, read from ORM_ELASTIC_* variables."""

    model_config = SettingsConfigDict(
        env_prefix="ORM_ELASTIC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Connection settings
    hosts: List[str] = Field(default_factory=lambda: ["http://localhost:9200"])
    api_key: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    verify_certs: bool = True

    # Indexing settings
    page_size: int = Field(default=1000, gt=0)

    # Search settings
    search_limit: int = Field(default=50, gt=0)

    @property
    def basic_auth(self) -> Optional[Tuple[str, str]]:
        if self.username is None:
            return None
        return (self.username, self.password or "")


@lru_cache
def _get_settings_cached() -> ElasticSettings:
    return ElasticSettings()


def get_settings(clear_cache: bool = False) -> ElasticSettings:
    """Get the settings instance.

    Args:
        clear_cache: If True, re-read the environment before returning.
    """
    if clear_cache:
        _get_settings_cached.cache_clear()

    return _get_settings_cached()
