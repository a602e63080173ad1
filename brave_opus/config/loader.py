"""brave-opus settings: YAML defaults, optional per-environment overlay, credentials from env only."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from brave_opus.models.sse import ReconnectPolicy

# Default config lives next to this module
_DEFAULT_CONFIG_PATH = Path(__file__).parent / "default.yaml"

# env var -> (section, key); secrets are only ever read from here
_ENV_OVERRIDES = {
    "ANTHROPIC_API_KEY": ("anthropic", "api_key"),
    "ANTHROPIC_API_VERSION": ("anthropic", "api_version"),
    "BRAVE_SUBSCRIPTION_TOKEN": ("brave", "subscription_token"),
    "BRAVE_WEB_SEARCH_DATA_FOR_AI_API_KEY": ("brave", "web_search_data_for_ai_api_key"),
    "BRAVE_SUGGEST_API_KEY": ("brave", "suggest_api_key"),
    "LOG_LEVEL": ("logging", "level"),
}


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


class AnthropicSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ANTHROPIC_", extra="ignore")
    api_key: str = ""
    api_version: str | None = None
    api_url: str = "https://api.anthropic.com/v1/"
    model: str = "claude-3-haiku-20240307"
    answer_model: str = "claude-3-opus-20240229"
    max_tokens: int = 4096
    timeout: float = 600.0


class BraveSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="BRAVE_", extra="ignore")
    api_url: str = "https://api.search.brave.com/res/v1"
    subscription_token: str = ""
    web_search_data_for_ai_api_key: str = ""
    suggest_api_key: str = ""
    timeout: float = 30.0


class StreamSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="STREAM_", extra="ignore")
    reconnect: bool = True
    retry_initial: bool = False
    initial_delay: float = 1.0
    backoff_factor: float = 2.0
    max_delay: float = 60.0
    reset_interval: float = 60.0

    def policy(self) -> ReconnectPolicy:
        return ReconnectPolicy(
            reconnect=self.reconnect,
            retry_initial=self.retry_initial,
            initial_delay=self.initial_delay,
            backoff_factor=self.backoff_factor,
            max_delay=self.max_delay,
            reset_interval=self.reset_interval,
        )


class RagSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RAG_", extra="ignore")
    search_concurrency: int = 1
    fetch_concurrency: int = 3
    count: int = 5
    country: str = "ALL"
    page_width: int = 200
    fetch_timeout: float = 30.0


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="LOG_", extra="ignore")
    level: str = "WARNING"
    use_json: bool = False


class Config(BaseSettings):
    """Application config: YAML + env. Secrets from env only."""

    model_config = SettingsConfigDict(env_nested_delimiter="__", extra="ignore")

    anthropic: AnthropicSettings = Field(default_factory=AnthropicSettings)
    brave: BraveSettings = Field(default_factory=BraveSettings)
    stream: StreamSettings = Field(default_factory=StreamSettings)
    rag: RagSettings = Field(default_factory=RagSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> "Config":
        path = Path(config_path) if config_path else _DEFAULT_CONFIG_PATH
        yaml_data = _load_yaml(path)
        env_name = os.getenv("BRAVE_OPUS_ENV", "")
        if env_name:
            yaml_data = _deep_merge(yaml_data, _load_yaml(Path(f"config/{env_name}.yaml")))
        for env_var, (section, key) in _ENV_OVERRIDES.items():
            value = os.getenv(env_var)
            if value:
                yaml_data.setdefault(section, {})[key] = value
        return cls(**yaml_data)


def get_config(config_path: str | Path | None = None) -> Config:
    return Config.load(config_path)
