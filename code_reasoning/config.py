"""Configuration management using Pydantic settings."""
from functools import lru_cache
from typing import Literal, Optional
from pathlib import Path
import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from code_reasoning import __version__


DEFAULT_CONFIG_FILE = "config.yaml"

TOOL_DESCRIPTION = """A reflective problem-solving tool with sequential thinking.

- Break down tasks into numbered thoughts that can BRANCH or REVISE until a conclusion is reached.
- Always set 'next_thought_needed' = false when no further reasoning is needed.

Recommended checklist every 3 thoughts:
1. Need to BRANCH?   -> set 'branch_from_thought' + 'branch_id'.
2. Need to REVISE?   -> set 'is_revision' + 'revises_thought'.
3. Scope changed?    -> bump 'total_thoughts'.

End each thought with: "What am I missing?\""""


class ReasoningConfig(BaseModel):
    """Limits enforced on the reasoning chain."""
    max_thought_length: int = Field(default=20000, ge=1)
    max_thoughts: int = Field(default=20, ge=1)
    timeout_ms: int = Field(default=30000, ge=0)


class ServiceConfig(BaseModel):
    """Configuration for service metadata."""
    server_name: str = "code-reasoning-server"
    tool_name: str = "code-reasoning"
    version: str = __version__
    description: str = TOOL_DESCRIPTION


class AppConfig(BaseModel):
    """Main application configuration from YAML."""
    reasoning: ReasoningConfig = Field(default_factory=ReasoningConfig)
    service: ServiceConfig = Field(default_factory=ServiceConfig)


class Settings(BaseSettings):
    """Environment-based settings."""
    model_config = SettingsConfigDict(
        env_prefix="CODE_REASONING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Logging
    log_level: str = "info"
    log_format: Literal["console", "json"] = "console"
    debug: bool = False

    # HTTP transport
    host: str = "127.0.0.1"
    port: int = 3000

    # Overrides for config.yaml
    max_thought_length: Optional[int] = Field(default=None, ge=1)
    max_thoughts: Optional[int] = Field(default=None, ge=1)
    timeout_ms: Optional[int] = Field(default=None, ge=0)

    # Config file path
    config_file: str = DEFAULT_CONFIG_FILE


def load_yaml_config(config_path: str = DEFAULT_CONFIG_FILE) -> AppConfig:
    """Load configuration from YAML file.

    The default file is optional and falls back to built-in values; any other
    path must exist.
    """
    config_file = Path(config_path)
    if not config_file.exists():
        if config_path == DEFAULT_CONFIG_FILE:
            return AppConfig()
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_file, "r", encoding="utf-8") as f:
        config_data = yaml.safe_load(f) or {}

    if not isinstance(config_data, dict):
        raise ValueError(f"Configuration file must contain a mapping: {config_path}")
    return AppConfig(**config_data)


def apply_overrides(config: AppConfig, settings: Settings) -> AppConfig:
    """Return a copy of ``config`` with environment overrides applied."""
    overrides = {
        key: value
        for key, value in (
            ("max_thought_length", settings.max_thought_length),
            ("max_thoughts", settings.max_thoughts),
            ("timeout_ms", settings.timeout_ms),
        )
        if value is not None
    }
    if not overrides:
        return config
    reasoning = config.reasoning.model_copy(update=overrides)
    return config.model_copy(update={"reasoning": reasoning})


def load_app_config(config_path: str, settings: Settings) -> AppConfig:
    """Load ``config_path`` and apply environment overrides."""
    return apply_overrides(load_yaml_config(config_path), settings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Environment settings, read on first use."""
    return Settings()


@lru_cache(maxsize=1)
def get_app_config() -> AppConfig:
    """Configuration from the settings' config file, read on first use."""
    settings = get_settings()
    return load_app_config(settings.config_file, settings)
