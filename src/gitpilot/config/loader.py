"""Load and merge configuration from .gitpilot.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from gitpilot.config.schema import (
    LOG_LEVELS,
    OUTPUT_FORMATS,
    GitConfig,
    GitPilotConfig,
    LoggingConfig,
    OutputConfig,
)

CONFIG_FILENAME = ".gitpilot.toml"


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(repo_root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = repo_root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    return cls(**{k: v for k, v in raw.items() if k in valid_fields})


def _merge_env_overrides(cfg: GitPilotConfig) -> None:
    """Apply GITPILOT_* environment variable overrides. Invalid values are ignored."""
    if val := os.environ.get("GITPILOT_GIT_EXECUTABLE"):
        cfg.git.executable = val
    if val := os.environ.get("GITPILOT_LOG_LEVEL"):
        if val.lower() in LOG_LEVELS:
            cfg.logging.level = val.lower()  # type: ignore[assignment]
    if os.environ.get("GITPILOT_LOG_JSON") == "1":
        cfg.logging.json = True
    if val := os.environ.get("GITPILOT_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]


def _validate(cfg: GitPilotConfig) -> None:
    cfg.logging.level = str(cfg.logging.level).lower()  # type: ignore[assignment]
    if cfg.logging.level not in LOG_LEVELS:
        raise ConfigError(f"Invalid logging.level: {cfg.logging.level!r}")
    if cfg.output.format not in OUTPUT_FORMATS:
        raise ConfigError(f"Invalid output.format: {cfg.output.format!r}")
    if not isinstance(cfg.git.executable, str) or not cfg.git.executable:
        raise ConfigError("git.executable must be a non-empty string")


def load_config(
    repo_root: Path,
    config_override: Optional[str] = None,
) -> GitPilotConfig:
    """Load, validate, and return a GitPilotConfig."""
    config_path = find_config_file(repo_root, config_override)

    if config_path is None:
        cfg = GitPilotConfig()
    else:
        raw = _parse_toml(config_path)
        cfg = GitPilotConfig(
            version=str(raw.get("version", "1.0")),
            git=_build_section(raw, GitConfig, "git"),
            logging=_build_section(raw, LoggingConfig, "logging"),
            output=_build_section(raw, OutputConfig, "output"),
        )

    _merge_env_overrides(cfg)
    _validate(cfg)
    return cfg
