"""
Configuration management for LLM Exec.

Uses Pydantic for validation and YAML for configuration files. One YAML
file holds both sections: ``agent`` (read by AgentConfig) and the global
settings below (currently ``logging``).
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_ENV_VAR = "LLMEXEC_CONFIG"
AGENT_SECTION = "agent"


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    format: str = "%(message)s"
    file: Optional[str] = None  # e.g. "logs/llmexec.log"
    rich_tracebacks: bool = True


def read_config(path: Union[Path, str, None]) -> Dict[str, Any]:
    """
    Read a YAML config file into a dict.

    A missing path or file, or an empty document, reads as ``{}``.

    Raises:
        ValueError: If the document is not a mapping
    """
    if path is None:
        return {}
    path = Path(path)
    if not path.exists():
        return {}

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    return data


class Settings(BaseSettings):
    """Global (non-agent) settings, overridable via LLMEXEC_* variables."""

    model_config = SettingsConfigDict(env_prefix="LLMEXEC_", env_nested_delimiter="__")

    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: Union[Path, str, None]) -> "Settings":
        """Load settings from every section of the file except ``agent``."""
        data = read_config(path)
        data.pop(AGENT_SECTION, None)
        return cls(**data)


def find_config_file(explicit: Union[Path, str, None] = None) -> Optional[Path]:
    """
    Resolve the config file to use.

    An explicit path wins, then $LLMEXEC_CONFIG, then the first existing
    file among ./configs/default.yaml, ./config.yaml, ~/.llmexec/config.yaml.
    """
    chosen = explicit or os.environ.get(CONFIG_ENV_VAR)
    if chosen:
        return Path(chosen)

    for path in (
        Path.cwd() / "configs" / "default.yaml",
        Path.cwd() / "config.yaml",
        Path.home() / ".llmexec" / "config.yaml",
    ):
        if path.exists():
            return path

    return None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_yaml(find_config_file())
