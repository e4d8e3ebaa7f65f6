"""Tests for YAML config loading infrastructure."""

from pathlib import Path

import pytest

from mcp_relay.config.infrastructure.errors import (
    ConfigLoadError,
    ConfigValidationError,
    MissingEnvVarsError,
)
from mcp_relay.config.infrastructure.yaml_loader import YamlConfigLoader
from tests.config.fake_observer import FakeConfigObserver

# __file__ is tests/config/infrastructure/test_yaml_loader.py
FIXTURES = Path(__file__).parent.parent.parent / "fixtures"


def _fixture(name: str) -> Path:
    return FIXTURES / name


def _set_secrets(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LLM_API_KEY", "sk-test")
    monkeypatch.setenv("TOOLS_TOKEN", "tok-123")


class TestValidConfigLoading:
    def test_loads_completion(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _set_secrets(monkeypatch)

        cfg = YamlConfigLoader(FakeConfigObserver()).load(_fixture("valid_config.yaml"))

        assert cfg.name == "scheduling-assistant"
        assert cfg.completion.model == "anthropic/claude-sonnet-4-5"
        assert cfg.completion.max_tokens == 2048
        assert cfg.completion.temperature == pytest.approx(0.3)
        assert cfg.completion.api_key == "sk-test"

    def test_loads_conversation(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _set_secrets(monkeypatch)

        cfg = YamlConfigLoader(FakeConfigObserver()).load(_fixture("valid_config.yaml"))

        assert cfg.conversation.assistant_name == "Relay"
        assert cfg.conversation.history_window == 6
        assert cfg.conversation.max_tool_result_chars == 50000
        assert cfg.conversation.tool_timeout_seconds == pytest.approx(30)
        assert cfg.conversation.connect_timeout_seconds is None
        assert "scheduling tools" in cfg.conversation.instructions

    def test_interpolates_tool_server_headers(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _set_secrets(monkeypatch)

        cfg = YamlConfigLoader(FakeConfigObserver()).load(_fixture("valid_config.yaml"))

        assert cfg.tool_server is not None
        assert cfg.tool_server.url == "https://tools.example.com/sse"
        assert cfg.tool_server.headers == {"Authorization": "Bearer tok-123"}
        assert cfg.tool_server.tool_name_prefix == "sched_"
        assert cfg.logging.format == "json"
        assert cfg.logging.level == "warning"

    def test_emits_loaded_event(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _set_secrets(monkeypatch)
        observer = FakeConfigObserver()

        YamlConfigLoader(observer).load(_fixture("valid_config.yaml"))

        assert observer.loaded == [
            {"name": "scheduling-assistant", "model": "anthropic/claude-sonnet-4-5"}
        ]
        assert observer.tools_disabled == []

    def test_minimal_config_uses_defaults(self) -> None:
        observer = FakeConfigObserver()

        cfg = YamlConfigLoader(observer).load(_fixture("minimal_config.yaml"))

        assert cfg.tool_server is None
        assert cfg.conversation.history_window == 10
        assert cfg.conversation.max_tool_result_chars == 100_000
        assert cfg.completion.max_tokens == 4096
        assert cfg.logging.format == "console"
        assert cfg.logging.level == "info"
        assert observer.tools_disabled == ["plain-assistant"]


class TestInvalidConfig:
    def test_missing_file(self) -> None:
        with pytest.raises(ConfigLoadError, match="file not found"):
            YamlConfigLoader(FakeConfigObserver()).load(_fixture("nope.yaml"))

    def test_malformed_yaml(self) -> None:
        with pytest.raises(ConfigLoadError, match="invalid YAML"):
            YamlConfigLoader(FakeConfigObserver()).load(_fixture("malformed.yaml"))

    def test_non_mapping_document(self) -> None:
        with pytest.raises(ConfigValidationError, match="mapping"):
            YamlConfigLoader(FakeConfigObserver()).load(_fixture("list_document.yaml"))

    def test_schema_violation(self) -> None:
        observer = FakeConfigObserver()

        with pytest.raises(ConfigValidationError):
            YamlConfigLoader(observer).load(_fixture("invalid_config.yaml"))

        assert observer.loaded == []

    def test_all_missing_env_vars_reported(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("LLM_API_KEY", raising=False)
        monkeypatch.delenv("TOOLS_TOKEN", raising=False)

        with pytest.raises(MissingEnvVarsError) as exc_info:
            YamlConfigLoader(FakeConfigObserver()).load(_fixture("valid_config.yaml"))

        assert exc_info.value.missing_vars == ["LLM_API_KEY", "TOOLS_TOKEN"]
