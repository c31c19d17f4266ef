"""Configuration loading, schema, and defaults."""

from gitpilot.config.loader import ConfigError, load_config
from gitpilot.config.schema import GitPilotConfig, LogLevel, OutputFormat

__all__ = [
    "ConfigError",
    "GitPilotConfig",
    "LogLevel",
    "OutputFormat",
    "load_config",
]
