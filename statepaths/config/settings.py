"""Configuration settings and loading."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from statepaths.core.events import EventSource
from statepaths.errors import ConfigurationError


class PathConfig(BaseSettings):
    """Configuration for path generation.

    Attributes:
        max_length: Maximum number of segments per path
        deduplicate: Remove paths contained in longer paths
        events: Payload variants per event type; every payload becomes one
            candidate event of that type
        log_level: Level passed to ``configure_logging``
    """

    model_config = SettingsConfigDict(
        env_prefix="STATEPATHS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_length: int = Field(default=10, ge=1, description="Maximum segments per path")
    deduplicate: bool = False
    events: dict[str, list[dict[str, Any]]] = Field(default_factory=dict)
    log_level: str = "INFO"

    @field_validator("events", mode="after")
    @classmethod
    def validate_events(cls, v: dict[str, list[dict[str, Any]]]) -> dict[str, list[dict[str, Any]]]:
        for event_type, payloads in v.items():
            for payload in payloads:
                if payload.get("type", event_type) != event_type:
                    raise ValueError(
                        f"Event payload under '{event_type}' declares type '{payload['type']}'"
                    )
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if str(v).upper() not in valid:
            raise ValueError(f"Invalid log level: {v}. Valid: {sorted(valid)}")
        return str(v).upper()

    def event_source(self) -> EventSource:
        """Build an EventSource from the configured payload variants."""
        return EventSource({
            event_type: [{**payload, "type": event_type} for payload in payloads]
            for event_type, payloads in self.events.items()
        })


def load_config(config_path: str | Path | None = None) -> PathConfig:
    """Load configuration from file and environment.

    Priority: env vars > config file > defaults
    """
    config_data: dict[str, Any] = {}

    if config_path is not None:
        config_path = Path(config_path)
        if config_path.exists():
            with open(config_path, encoding="utf-8") as f:
                try:
                    config_data = yaml.safe_load(f) or {}
                except yaml.YAMLError as e:
                    raise ConfigurationError(f"Invalid YAML in {config_path}: {e}", cause=e) from e
        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Config file {config_path} must contain a mapping")

    config_data.update(_get_env_overrides())

    try:
        return PathConfig(**config_data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}", cause=e) from e


def _get_env_overrides() -> dict[str, Any]:
    """Get configuration overrides from environment variables."""
    overrides: dict[str, Any] = {}

    env_mappings = {
        "STATEPATHS_MAX_LENGTH": ("max_length", int),
        "STATEPATHS_DEDUPLICATE": ("deduplicate", lambda x: x.lower() in ("true", "1", "yes")),
        "STATEPATHS_LOG_LEVEL": "log_level",
    }

    for env_key, config_key in env_mappings.items():
        value = os.environ.get(env_key)
        if value is not None:
            if isinstance(config_key, tuple):
                key, converter = config_key
                overrides[key] = converter(value)
            else:
                overrides[config_key] = value

    return overrides
