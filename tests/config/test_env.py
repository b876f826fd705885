from __future__ import annotations

import pytest

from enricher.config import (
    ConfigurationError,
    MissingConfigurationError,
    env_bool,
    env_float,
    env_int,
    optional_env,
    require_env_vars,
)


def test_require_env_vars_returns_stripped_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", " value ")

    assert require_env_vars(["EXAMPLE_VAR"]) == {"EXAMPLE_VAR": "value"}


def test_require_env_vars_reports_every_missing_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_B", raising=False)
    monkeypatch.setenv("MISSING_A", "   ")

    with pytest.raises(MissingConfigurationError) as excinfo:
        require_env_vars(["MISSING_B", "MISSING_A"])

    assert excinfo.value.names == ["MISSING_A", "MISSING_B"]
    assert "MISSING_A, MISSING_B" in str(excinfo.value)


def test_optional_env_treats_blank_as_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "  ")

    assert optional_env("EXAMPLE_VAR") is None


def test_typed_loaders(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_INT", "7")
    monkeypatch.setenv("EXAMPLE_FLOAT", "0.25")
    monkeypatch.setenv("EXAMPLE_BOOL", "Off")
    monkeypatch.delenv("EXAMPLE_UNSET", raising=False)

    assert env_int("EXAMPLE_INT", 1) == 7
    assert env_float("EXAMPLE_FLOAT", 1.0) == 0.25
    assert env_bool("EXAMPLE_BOOL", True) is False
    assert env_bool("EXAMPLE_UNSET", True) is True


@pytest.mark.parametrize(
    ("loader", "raw"),
    [(env_int, "seven"), (env_float, "1,5"), (env_bool, "maybe")],
)
def test_invalid_values_raise(
    monkeypatch: pytest.MonkeyPatch, loader: object, raw: str
) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", raw)

    with pytest.raises(ConfigurationError, match="EXAMPLE_VAR"):
        loader("EXAMPLE_VAR", 0)  # type: ignore[operator]
