"""Tests for config loading."""

from __future__ import annotations

from brave_opus.config.loader import Config, _deep_merge, _load_yaml, get_config
from brave_opus.models.sse import ReconnectPolicy


def test_load_yaml_missing(tmp_path):
    assert _load_yaml(tmp_path / "nonexistent.yaml") == {}


def test_load_yaml_exists(tmp_path):
    path = tmp_path / "test.yaml"
    path.write_text("anthropic:\n  model: claude-3-sonnet-20240229\n")
    assert _load_yaml(path)["anthropic"]["model"] == "claude-3-sonnet-20240229"


def test_deep_merge():
    base = {"a": 1, "b": {"x": 10, "y": 20}}
    override = {"b": {"y": 22, "z": 30}, "c": 3}
    out = _deep_merge(base, override)
    assert out == {"a": 1, "b": {"x": 10, "y": 22, "z": 30}, "c": 3}
    assert base["b"] == {"x": 10, "y": 20}


def test_default_config():
    config = get_config()
    assert config.anthropic.api_url == "https://api.anthropic.com/v1/"
    assert config.anthropic.model == "claude-3-haiku-20240307"
    assert config.anthropic.answer_model == "claude-3-opus-20240229"
    assert config.anthropic.api_key == ""
    assert config.brave.api_url == "https://api.search.brave.com/res/v1"
    assert config.rag.search_concurrency == 1
    assert config.rag.fetch_concurrency == 3
    assert config.rag.page_width == 200
    assert config.logging.level == "WARNING"


def test_stream_policy_from_config():
    assert Config.load().stream.policy() == ReconnectPolicy()


def test_config_load_from_path(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("stream:\n  retry_initial: true\n  max_delay: 5\n  reset_interval: 120\nrag:\n  count: 10\n")
    config = Config.load(config_path=path)
    assert config.stream.policy().retry_initial is True
    assert config.stream.policy().delay_for(10) == 5
    assert config.stream.policy().reset_interval == 120
    assert config.rag.count == 10


def test_config_env_overrides(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-env")
    monkeypatch.setenv("BRAVE_SUBSCRIPTION_TOKEN", "brave-env")
    monkeypatch.setenv("BRAVE_SUGGEST_API_KEY", "suggest-env")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    config = Config.load()
    assert config.anthropic.api_key == "sk-env"
    assert config.brave.subscription_token == "brave-env"
    assert config.brave.suggest_api_key == "suggest-env"
    assert config.logging.level == "DEBUG"


def test_config_env_file_merge(tmp_path, monkeypatch):
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "staging.yaml").write_text("rag:\n  fetch_concurrency: 8\n")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("BRAVE_OPUS_ENV", "staging")
    config = Config.load()
    assert config.rag.fetch_concurrency == 8
    assert config.rag.search_concurrency == 1
