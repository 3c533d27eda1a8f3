"""
Multiset Hash Configuration

Environment-based configuration. Only MultisetHash.from_settings() and
setup_logging() read it; the hasher itself takes its digest explicitly.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .digests import available_digests


class Settings(BaseSettings):
    """Settings from MULTISET_HASH_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MULTISET_HASH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    digest: str = Field(
        default="sha512",
        description="Wide digest used to hash elements before mapping them to the group",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format: json or text"
    )

    app_version: str = Field(default="0.1.0")

    @field_validator("digest")
    @classmethod
    def _known_digest(cls, value: str) -> str:
        value = value.lower()
        if value not in available_digests():
            raise ValueError(
                f"Unknown digest '{value}'. Available: {', '.join(available_digests())}"
            )
        return value

    @field_validator("log_format", mode="before")
    @classmethod
    def _lower_format(cls, value: str) -> str:
        return value.lower() if isinstance(value, str) else value


@lru_cache()
def get_settings() -> Settings:
    """Get package settings."""
    return Settings()
