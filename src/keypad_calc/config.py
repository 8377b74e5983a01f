"""
Configuration management for Keypad Calc.

Handles loading configuration from environment variables, YAML files,
and provides sensible defaults for all settings.
"""

import logging
import sys
from pathlib import Path
from typing import Any

import structlog
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="CALC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
    )

    # Application settings
    app_name: str = "Keypad Calc"
    debug: bool = False
    log_level: str = "WARNING"
    log_json: bool = False

    # Server settings
    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"]
    )

    # Display settings
    decimal_places: int = Field(2, ge=0, le=10)


# Global settings instance
settings = Settings()


def load_yaml_config(path: Path) -> dict:
    """Load configuration from a YAML file."""
    import yaml

    if not path.exists():
        return {}

    with open(path) as f:
        return yaml.safe_load(f) or {}


def apply_overrides(overrides: dict[str, Any]) -> Settings:
    """
    Apply overrides to the global settings instance in place.

    Unknown keys are ignored so that a shared YAML file may carry
    settings for other tools. Values are validated like environment
    settings; an invalid one raises pydantic.ValidationError.
    """
    for key, value in overrides.items():
        if key in Settings.model_fields:
            setattr(settings, key, value)
    return settings


def configure_logging(level: str | None = None, json_output: bool | None = None) -> None:
    """Configure structlog for console or JSON output at the given level."""
    default_level = "DEBUG" if settings.debug else settings.log_level
    level_name = (level or default_level).upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING

    use_json = settings.log_json if json_output is None else json_output
    renderer = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
