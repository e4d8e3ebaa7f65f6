"""YamlConfigLoader — reads a RelayConfig from YAML with ${ENV_VAR} substitution."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from mcp_relay.config.domain.config import RelayConfig
from mcp_relay.config.domain.observer import ConfigObserver
from mcp_relay.config.infrastructure.env_interpolation import (
    collect_missing_vars,
    interpolate,
)
from mcp_relay.config.infrastructure.errors import (
    ConfigLoadError,
    ConfigValidationError,
    MissingEnvVarsError,
)


class YamlConfigLoader:
    """Loads, interpolates, validates, and returns a RelayConfig from a YAML file."""

    def __init__(self, observer: ConfigObserver) -> None:
        self._observer = observer

    def load(self, path: Path) -> RelayConfig:
        """
        Load, interpolate, validate, and return a RelayConfig from a YAML file.

        Raises:
            ConfigLoadError: if the file does not exist or is not valid YAML.
            MissingEnvVarsError: if any ${ENV_VAR} references are unset; all are
                collected before raising.
            ConfigValidationError: if the document violates the config schema.
        """
        raw = _parse_yaml(path=path)
        _check_missing_env_vars(raw=raw)
        cfg = _build_config(resolved=interpolate(raw))

        if cfg.tool_server is None:
            self._observer.config_tools_disabled(name=cfg.name)
        self._observer.config_loaded(name=cfg.name, model=cfg.completion.model)
        return cfg


def _parse_yaml(path: Path) -> Any:
    if not path.is_file():
        raise ConfigLoadError(path=path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            return yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise ConfigLoadError(path=path, reason=f"invalid YAML ({exc})") from exc


def _check_missing_env_vars(raw: Any) -> None:
    """Raise MissingEnvVarsError if any ${ENV_VAR} references in raw are unset."""
    missing = collect_missing_vars(raw)
    if missing:
        raise MissingEnvVarsError(missing)


def _build_config(resolved: Any) -> RelayConfig:
    if not isinstance(resolved, dict):
        raise ConfigValidationError("top-level document must be a mapping")
    try:
        return RelayConfig.model_validate(resolved)
    except ValidationError as exc:
        raise ConfigValidationError(str(exc)) from exc
