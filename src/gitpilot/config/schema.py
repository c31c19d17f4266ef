"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

LogLevel = Literal["debug", "info", "warning", "error"]
OutputFormat = Literal["terminal", "json"]

LOG_LEVELS: tuple[str, ...] = ("debug", "info", "warning", "error")
OUTPUT_FORMATS: tuple[str, ...] = ("terminal", "json")


@dataclass
class GitConfig:
    executable: str = "git"  # name on PATH or an absolute path


@dataclass
class LoggingConfig:
    level: LogLevel = "warning"
    json: bool = False  # one JSON object per log line


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    show_summary: bool = True


@dataclass
class GitPilotConfig:
    version: str = "1.0"
    git: GitConfig = field(default_factory=GitConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
