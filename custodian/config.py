"""
Custodian Configuration

Pydantic-based settings with environment variable support.
"""

import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from CUSTODIAN_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CUSTODIAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # ==========================================================================
    # MANIFESTS
    # ==========================================================================
    manifest_filename: str = Field(default="Custodianfile", min_length=1)

    # ==========================================================================
    # FILES (Custodianfiles and templates)
    # ==========================================================================
    template_encoding: str = "utf-8"

    # ==========================================================================
    # LOGGING
    # ==========================================================================
    log_level: str = "INFO"
    log_format: str = "%(message)s"

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level.upper(), logging.INFO)


# Global settings instance
settings = Settings()
