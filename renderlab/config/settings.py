# ┌───────────────────────────────────────────────────────────────┐
# │  Copyright (c) 2025 Ateet Vatan Bahmani                       │
# │  Project: MASX AI – Strategic Agentic AI System               │
# │  All rights reserved.                                         │
# └───────────────────────────────────────────────────────────────┘
#
# MASX AI is a proprietary software system developed and owned by Ateet Vatan Bahmani.
# The source code, documentation, workflows, designs, and naming (including "MASX AI")
# are protected by applicable copyright and trademark laws.
#
# Redistribution, modification, commercial use, or publication of any portion of this
# project without explicit written consent is strictly prohibited.
#
# This project is not open-source and is intended solely for internal, research,
# or demonstration use by the author.
#
# Contact: ab@masxai.com | MASXAI.com

"""
Settings configuration.

Type safe configuration management using Pydantic Settings,
handling all environment variables and worker configuration with proper validation.
"""

from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings can be configured via environment variables or .env file.
    Type validation and defaults are handled automatically.
    """

    # Pydantic Settings to load .env file
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Environment Configuration
    environment: str = Field(default="development", description="Environment name")

    # Monitoring and Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format (json or console)")

    # Resource fetching
    fetch_timeout_ms: int = Field(
        default=5000, description="Timeout shared by one resource fetch batch (ms)"
    )
    http_user_agent: str = Field(
        default="renderlab/1.0", description="User agent sent by the HTTP fetcher"
    )

    # Render worker
    resource_cache_max_entries: int = Field(
        default=128,
        description="Entries kept in the session resource cache (0 disables it)",
    )
    resource_throw_on_error: bool = Field(
        default=True,
        description="Turn any failed node resource into a render error",
    )
    default_font: str = Field(
        default="", description="Default font path or http(s) URL loaded once per session"
    )
    font_fetch_attempts: int = Field(
        default=3, description="Attempts made to load the default font"
    )
    font_retry_wait_seconds: float = Field(
        default=0.5, description="Initial backoff between font load attempts"
    )
    renderer_factory: str = Field(
        default="",
        description="Import path ('module:attribute') of the renderer factory",
    )
    render_request_timeout_ms: int = Field(
        default=30000, description="Round-trip timeout for API render requests (ms)"
    )

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host address")
    api_port: int = Field(default=8000, description="API port number")
    api_reload: bool = Field(default=False, description="API reload")
    enable_api_docs: bool = Field(default=True, description="Expose OpenAPI docs")

    # Security Configuration
    cors_origins: List[str] = Field(
        default=["http://localhost:3000"], description="Allowed CORS origins"
    )

    # Validators

    @field_validator("environment")
    def validate_environment(cls, v: str) -> str:
        """Validate environment setting."""
        valid_environments = ["development", "staging", "production"]
        if v not in valid_environments:
            raise ValueError(f"Environment must be one of: {valid_environments}")
        return v

    @field_validator("log_level")
    def validate_log_level(cls, v: str) -> str:
        """Validate log level setting."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    def validate_log_format(cls, v: str) -> str:
        valid_formats = ["json", "console"]
        if v.lower() not in valid_formats:
            raise ValueError(f"Log format must be one of: {valid_formats}")
        return v.lower()

    @field_validator("fetch_timeout_ms", "render_request_timeout_ms")
    def validate_positive_timeout(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Timeouts must be positive")
        return v

    @field_validator("resource_cache_max_entries")
    def validate_cache_size(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Resource cache size cannot be negative")
        return v

    @field_validator("font_fetch_attempts")
    def validate_attempts(cls, v: int) -> int:
        if v < 1:
            raise ValueError("At least one font load attempt is required")
        return v

    # Computed Properties
    @property
    def has_renderer_config(self) -> bool:
        """Check if a renderer factory is configured."""
        return bool(self.renderer_factory.strip())


@lru_cache()  # Least Recently Used
def get_settings() -> Settings:
    """
    Cached to avoid reloading settings on every call.
    Settings are loaded once and reused throughout the application lifecycle.
    """
    return Settings()
