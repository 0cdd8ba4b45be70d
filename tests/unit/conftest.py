"""Unit test configuration.

Points zscli at a throwaway config file and clears the output related
environment variables so a developer's own settings never leak into tests.
"""

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Use a per-test config file and the built-in output defaults."""
    config_file = tmp_path / "zscli-config.json"
    monkeypatch.setenv("ZSCLI_CONFIG", str(config_file))
    monkeypatch.delenv("ZSCLI_OUTPUT", raising=False)
    monkeypatch.delenv("ZSCLI_TABLE_STYLE", raising=False)
    return config_file
