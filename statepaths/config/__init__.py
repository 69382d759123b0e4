"""Configuration module exports."""

from statepaths.config.settings import PathConfig, load_config

__all__ = [
    "PathConfig",
    "load_config",
]
