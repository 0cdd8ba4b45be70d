"""Unit tests for the configuration file helpers."""

import json
from pathlib import Path

import pytest

from zscli.config import (
    get_config_file_path,
    get_default_output,
    get_table_style,
    load_config,
    remove_config_value,
    set_config_value,
)


def test_config_path_from_environment(isolated_config: Path) -> None:
    """ZSCLI_CONFIG overrides the config location."""
    assert get_config_file_path() == isolated_config


def test_config_path_uses_xdg(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Without an override the XDG config directory is used."""
    monkeypatch.delenv("ZSCLI_CONFIG")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

    assert get_config_file_path() == tmp_path / "zscli" / "config.json"
    assert (tmp_path / "zscli").is_dir()


def test_missing_file_loads_empty() -> None:
    """No file means no settings."""
    assert load_config() == {}


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_corrupt_file_loads_empty(isolated_config: Path, content: str) -> None:
    """Unreadable or non-object files are ignored."""
    isolated_config.write_text(content, encoding="utf-8")

    assert load_config() == {}


def test_set_and_remove(isolated_config: Path) -> None:
    """Values are persisted as JSON and can be removed again."""
    set_config_value("output", "yaml")

    assert json.loads(isolated_config.read_text(encoding="utf-8")) == {"output": "yaml"}
    assert remove_config_value("output") is True
    assert remove_config_value("output") is False
    assert load_config() == {}


def test_set_unknown_key() -> None:
    """Only known keys can be stored."""
    with pytest.raises(ValueError, match="Unknown configuration key"):
        set_config_value("colour", "blue")


def test_defaults() -> None:
    """Built-in defaults apply when nothing is configured."""
    assert get_default_output() == "table"
    assert get_table_style() == "simple_outline"


def test_file_values() -> None:
    """Stored values replace the defaults."""
    set_config_value("output", "json")
    set_config_value("table-style", "github")

    assert get_default_output() == "json"
    assert get_table_style() == "github"


def test_environment_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    """Environment variables take precedence over the file."""
    set_config_value("output", "json")
    monkeypatch.setenv("ZSCLI_OUTPUT", "yaml")
    monkeypatch.setenv("ZSCLI_TABLE_STYLE", "grid")

    assert get_default_output() == "yaml"
    assert get_table_style() == "grid"
