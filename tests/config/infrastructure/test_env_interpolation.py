"""Tests for ${ENV_VAR} interpolation."""

import pytest

from mcp_relay.config.infrastructure.env_interpolation import (
    collect_missing_vars,
    interpolate,
)


class TestCollectMissingVars:
    def test_nested_references_in_first_seen_order(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("B_VAR", raising=False)
        monkeypatch.delenv("A_VAR", raising=False)
        monkeypatch.setenv("SET_VAR", "1")
        data = {
            "x": "${B_VAR}",
            "y": ["${SET_VAR}", {"z": "${A_VAR} and ${B_VAR}"}],
            "n": 3,
        }

        assert collect_missing_vars(data) == ["B_VAR", "A_VAR"]

    def test_nothing_missing(self) -> None:
        assert collect_missing_vars({"plain": "text", "flag": True}) == []


class TestInterpolate:
    def test_substitutes_inside_strings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TOKEN", "abc")

        resolved = interpolate({"headers": {"Authorization": "Bearer ${TOKEN}"}})

        assert resolved == {"headers": {"Authorization": "Bearer abc"}}

    def test_non_strings_unchanged(self) -> None:
        assert interpolate([1, 2.5, None, False]) == [1, 2.5, None, False]
